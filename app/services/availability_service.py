from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session
import logging

from app.core.exceptions import ConflictError, InvalidRangeError, NotFoundError
from app.models.event import Event
from app.repositories.event_repository import EventRepository
from app.repositories.venue_repository import VenueRepository
from app.utils.interval import Interval, to_naive_utc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AvailabilityResult:
    available: bool
    conflict: Optional[Event] = None
    
    def to_dict(self) -> dict:
        result = {"available": self.available, "conflict": None}
        if self.conflict is not None:
            result["conflict"] = {
                "eventId": self.conflict.id,
                "eventName": self.conflict.name,
                "start": self.conflict.start_datetime.isoformat(),
                "end": self.conflict.end_datetime.isoformat(),
            }
        return result


class AvailabilityService:
    """Read-only conflict detection against a venue's active bookings."""
    
    def __init__(self, db: Session):
        self.db = db
        self.event_repo = EventRepository(db)
        self.venue_repo = VenueRepository(db)
    
    def find_conflict(
        self,
        venue_id: str,
        window: Interval,
        exclude_event_id: Optional[str] = None
    ) -> Optional[Event]:
        conflicts = self.event_repo.find_conflicts(venue_id, window, exclude_event_id)
        return conflicts[0] if conflicts else None
    
    def is_available(
        self,
        venue_id: str,
        window: Interval,
        exclude_event_id: Optional[str] = None
    ) -> bool:
        return self.find_conflict(venue_id, window, exclude_event_id) is None
    
    def ensure_available(
        self,
        venue_id: str,
        window: Interval,
        exclude_event_id: Optional[str] = None
    ) -> None:
        """
        Raises:
            ConflictError: Naming the earliest active booking that overlaps ``window``
        """
        conflict = self.find_conflict(venue_id, window, exclude_event_id)
        if conflict is not None:
            raise ConflictError(
                event_id=conflict.id,
                event_name=conflict.name,
                start=conflict.start_datetime,
                end=conflict.end_datetime
            )
    
    def check_availability(
        self,
        venue_id: str,
        start: datetime,
        end: datetime,
        exclude_event_id: Optional[str] = None
    ) -> AvailabilityResult:
        """
        Report whether ``[start, end)`` is free on the venue.

        Raises:
            NotFoundError: If the venue does not exist
            InvalidRangeError: If start is not before end
        """
        if self.venue_repo.get_by_id(venue_id) is None:
            raise NotFoundError("Venue", venue_id)
        
        window = Interval(to_naive_utc(start), to_naive_utc(end))
        if window.is_degenerate:
            raise InvalidRangeError("End datetime must be after start datetime")
        
        conflict = self.find_conflict(venue_id, window, exclude_event_id)
        logger.info(
            f"Availability for venue {venue_id} {window.start.isoformat()}-{window.end.isoformat()}: "
            f"{'blocked by ' + conflict.id if conflict else 'free'}"
        )
        return AvailabilityResult(available=conflict is None, conflict=conflict)

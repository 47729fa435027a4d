"""
Ordered business-rule checks run before a booking is written.

Each rule is a read-only check against state the caller already loaded. The
first failing rule raises; nothing is persisted by this module.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional
import logging

from app.core.config import settings
from app.core.exceptions import (
    BookingError,
    CapacityExceededError,
    InvalidRangeError,
    PastDateError,
    VenueUnavailableError,
)
from app.models.venue import Venue, VenueStatus
from app.services.availability_service import AvailabilityService
from app.utils.interval import Interval, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeSet:
    """Which fields of a booking changed; a create marks everything as changed."""
    
    venue: bool = True
    start: bool = True
    end: bool = True
    attendee_count: bool = True
    activated: bool = False
    
    @classmethod
    def for_create(cls) -> "ChangeSet":
        return cls()
    
    @property
    def window(self) -> bool:
        return self.start or self.end
    
    @property
    def placement(self) -> bool:
        return self.venue or self.window


class BookingValidator:
    
    def __init__(
        self,
        availability: AvailabilityService,
        clock: Callable[[], datetime] = utc_now,
        min_hours: int = settings.MIN_BOOKING_HOURS,
        max_hours: int = settings.MAX_BOOKING_HOURS
    ):
        self.availability = availability
        self.clock = clock
        self.min_length = timedelta(hours=min_hours)
        self.max_length = timedelta(hours=max_hours)
    
    def check_temporal_validity(self, window: Interval) -> None:
        if window.is_degenerate:
            raise InvalidRangeError("End datetime must be after start datetime")
        
        if not self.min_length <= window.length <= self.max_length:
            raise InvalidRangeError(
                f"Booking length must be between {self.min_length} and {self.max_length}, "
                f"got {window.length}"
            )
    
    def check_not_in_past(self, start: datetime) -> None:
        if start < self.clock():
            raise PastDateError(start)
    
    def check_venue_operational(self, venue: Venue) -> None:
        if venue.status != VenueStatus.ACTIVE:
            raise VenueUnavailableError(venue.name, venue.status.value)
    
    def check_capacity(self, venue: Venue, attendee_count: Optional[int]) -> None:
        # Only a positive headcount is checked against the venue
        if attendee_count and attendee_count > venue.capacity:
            raise CapacityExceededError(attendee_count, venue.capacity)
    
    def validate(
        self,
        venue: Venue,
        window: Interval,
        attendee_count: Optional[int] = None,
        exclude_event_id: Optional[str] = None,
        changes: ChangeSet = ChangeSet(),
        holds_window: bool = True
    ) -> None:
        """
        Run the rules relevant to ``changes`` in order.

        Args:
            venue: Venue the booking will live on (already loaded, ideally locked)
            window: Resulting booking window
            attendee_count: Resulting headcount, if any
            exclude_event_id: Booking being updated, ignored by the conflict check
            changes: Fields that changed; defaults to a full create
            holds_window: Whether the resulting booking is active and so blocks others

        Raises:
            InvalidRangeError, PastDateError, VenueUnavailableError,
            CapacityExceededError, ConflictError
        """
        try:
            if changes.window:
                self.check_temporal_validity(window)
            
            if changes.start:
                self.check_not_in_past(window.start)
            
            if changes.placement:
                self.check_venue_operational(venue)
            
            if changes.attendee_count or changes.venue:
                self.check_capacity(venue, attendee_count)
            
            if holds_window and (changes.placement or changes.activated):
                self.availability.ensure_available(venue.id, window, exclude_event_id)
        except BookingError as e:
            logger.warning(f"Booking rejected for venue {venue.id}: {e}")
            raise

from typing import Optional, List, Dict
from decimal import Decimal
from sqlalchemy.orm import Session
import logging

from app.core.config import settings
from app.core.database import write_scope
from app.core.exceptions import ActiveBookingsExistError, InvalidRangeError, NotFoundError
from app.models.venue import Venue, VenueStatus
from app.repositories.event_repository import EventRepository
from app.repositories.venue_repository import VenueRepository

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({
    "name",
    "description",
    "address",
    "city",
    "capacity",
    "price_per_hour",
    "price_per_day",
    "currency",
    "status",
})


class VenueService:

    def __init__(self, db: Session):
        self.db = db
        self.venue_repo = VenueRepository(db)
        self.event_repo = EventRepository(db)

    def _validate_rate_card(
        self,
        capacity: Optional[int],
        price_per_hour: Optional[Decimal],
        price_per_day: Optional[Decimal]
    ) -> None:
        if capacity is not None and capacity < 1:
            raise InvalidRangeError("Capacity must be at least 1 person")
        if price_per_hour is not None and price_per_hour <= 0:
            raise InvalidRangeError("Price per hour must be a positive number")
        if price_per_day is not None and price_per_day <= 0:
            raise InvalidRangeError("Price per day must be a positive number")

    def create_venue(
        self,
        name: str,
        address: str,
        city: str,
        capacity: int,
        description: Optional[str] = None,
        price_per_hour: Optional[Decimal] = None,
        price_per_day: Optional[Decimal] = None,
        currency: Optional[str] = None,
        status: VenueStatus = VenueStatus.ACTIVE
    ) -> Venue:
        self._validate_rate_card(capacity, price_per_hour, price_per_day)

        if price_per_hour is None and price_per_day is None:
            logger.warning(f"Venue '{name}' created without a rate; bookings on it cannot be priced")

        with write_scope(self.db, "create venue"):
            venue = self.venue_repo.create(
                name=name,
                description=description,
                address=address,
                city=city,
                capacity=capacity,
                price_per_hour=price_per_hour,
                price_per_day=price_per_day,
                currency=(currency or settings.DEFAULT_CURRENCY).upper(),
                status=status
            )

        logger.info(f"Venue created successfully: {venue.id}")
        return venue

    def get_venue(self, venue_id: str) -> Venue:
        venue = self.venue_repo.get_by_id(venue_id)
        if not venue:
            raise NotFoundError("Venue", venue_id)
        return venue

    def list_venues(
        self,
        status: Optional[VenueStatus] = None,
        city: Optional[str] = None
    ) -> List[Venue]:
        return self.venue_repo.get_all(status=status, city=city)

    def update_venue(self, venue_id: str, **fields) -> Venue:
        """
        Apply an administrator edit. Status moves freely between ACTIVE,
        MAINTENANCE and INACTIVE; existing bookings are left untouched.
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise TypeError(f"Unknown venue fields: {', '.join(sorted(unknown))}")

        self._validate_rate_card(
            fields.get("capacity"),
            fields.get("price_per_hour"),
            fields.get("price_per_day")
        )
        if fields.get("currency"):
            fields["currency"] = fields["currency"].upper()

        with write_scope(self.db, "update venue"):
            venue = self.get_venue(venue_id)
            venue = self.venue_repo.update(venue, **fields)

        logger.info(f"Venue updated successfully: {venue.id}")
        return venue

    def delete_venue(self, venue_id: str) -> None:
        """
        Delete a venue together with its completed and cancelled events.

        Raises:
            NotFoundError: If the venue does not exist
            ActiveBookingsExistError: If any event on it is UPCOMING or ONGOING
        """
        with write_scope(self.db, "delete venue"):
            venue = self.venue_repo.get_for_update(venue_id)
            if not venue:
                raise NotFoundError("Venue", venue_id)

            active_count = self.event_repo.count_active_for_venue(venue_id)
            if active_count > 0:
                logger.warning(
                    f"Cannot delete venue '{venue.name}' - has {active_count} active event(s)"
                )
                raise ActiveBookingsExistError(venue.name, active_count)

            name = venue.name
            self.venue_repo.delete(venue)

        logger.info(f"Venue deleted successfully: {name}")

    def get_statistics(self) -> Dict:
        return self.venue_repo.get_statistics()

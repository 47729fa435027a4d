from typing import Optional, List, Dict, Any, Callable, Tuple
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from sqlalchemy.orm import Session
import logging

from app.core.database import write_scope
from app.core.exceptions import InvalidRangeError, NotFoundError
from app.models.event import Event, EventStatus, RentalType, ACTIVE_STATUSES
from app.models.venue import Venue
from app.repositories.event_repository import EventRepository
from app.repositories.venue_repository import VenueRepository
from app.services import pricing
from app.services.availability_service import AvailabilityService, AvailabilityResult
from app.services.booking_validator import BookingValidator, ChangeSet
from app.utils.interval import Interval, to_naive_utc, utc_now

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

UPDATABLE_FIELDS = frozenset({
    "venue_id",
    "name",
    "description",
    "start_datetime",
    "end_datetime",
    "status",
    "rental_type",
    "attendee_count",
    "discount_percent",
    "additional_fees",
    "is_paid",
})


class BookingService:

    def __init__(self, db: Session, clock: Callable[[], datetime] = utc_now):
        self.db = db
        self.clock = clock
        self.event_repo = EventRepository(db)
        self.venue_repo = VenueRepository(db)
        self.availability = AvailabilityService(db)
        self.validator = BookingValidator(self.availability, clock=clock)

    def _lock_venue(self, venue_id: str) -> Venue:
        venue = self.venue_repo.get_for_update(venue_id)
        if not venue:
            raise NotFoundError("Venue", venue_id)
        return venue

    def _get_event(self, event_id: str) -> Event:
        event = self.event_repo.get_by_id(event_id)
        if not event:
            raise NotFoundError("Event", event_id)
        return event

    def _check_pricing_inputs(
        self,
        discount_percent: Decimal,
        additional_fees: Decimal
    ) -> Tuple[Decimal, Decimal]:
        """Range-check and quantize to the stored scale so the price matches what is persisted."""
        discount_percent = Decimal(discount_percent).quantize(CENT, rounding=ROUND_HALF_UP)
        additional_fees = Decimal(additional_fees).quantize(CENT, rounding=ROUND_HALF_UP)
        if not Decimal("0") <= discount_percent <= Decimal("100"):
            raise InvalidRangeError(f"Discount must be between 0 and 100, got {discount_percent}")
        if additional_fees < 0:
            raise InvalidRangeError(f"Additional fees must not be negative, got {additional_fees}")
        return discount_percent, additional_fees

    def _payment_fields(self, event: Event, is_paid: bool) -> Dict[str, Any]:
        if is_paid and not event.is_paid:
            return {"is_paid": True, "payment_date": self.clock()}
        if not is_paid and event.is_paid:
            return {"is_paid": False, "payment_date": None}
        return {}

    def create_booking(
        self,
        venue_id: str,
        name: str,
        start: datetime,
        end: datetime,
        description: Optional[str] = None,
        discount_percent: Decimal = Decimal("0"),
        additional_fees: Decimal = Decimal("0"),
        attendee_count: Optional[int] = None,
        rental_type: Optional[RentalType] = None
    ) -> Event:
        """
        Validate, price and persist a new booking.

        The venue row stays locked from the availability check until the
        insert commits, so two overlapping requests for one venue cannot
        both succeed.

        Raises:
            NotFoundError, InvalidRangeError, PastDateError, VenueUnavailableError,
            CapacityExceededError, ConflictError, ConfigurationError,
            InfrastructureError
        """
        window = Interval(to_naive_utc(start), to_naive_utc(end))

        with write_scope(self.db, "create booking"):
            discount_percent, additional_fees = self._check_pricing_inputs(discount_percent, additional_fees)
            venue = self._lock_venue(venue_id)

            self.validator.validate(venue, window, attendee_count, changes=ChangeSet.for_create())

            quote = pricing.quote(
                venue.price_per_hour,
                venue.price_per_day,
                window.start,
                window.end,
                discount_percent=discount_percent,
                additional_fees=additional_fees,
                rental_type=rental_type
            )

            event = self.event_repo.create(
                venue_id=venue.id,
                name=name,
                description=description,
                start_datetime=window.start,
                end_datetime=window.end,
                rental_type=quote.rental_type,
                base_price=quote.base_price,
                discount_percent=quote.discount_percent,
                additional_fees=quote.additional_fees,
                final_price=quote.final_price,
                attendee_count=attendee_count
            )

        logger.info(
            f"Booking {event.id} created on venue {venue_id} "
            f"({quote.rental_type.value}, {quote.duration_hours}h, final {quote.final_price})"
        )
        return event

    def update_booking(self, event_id: str, **fields) -> Event:
        """
        Merge ``fields`` into an existing booking.

        Fields left out keep their stored value. Only the rules touched by
        the change are re-run, and the price is recomputed when the venue,
        window, discount, fees or rental type change. Without an explicit
        ``rental_type`` a change of venue or window re-resolves the cheapest
        rental mode.
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise TypeError(f"Unknown booking fields: {', '.join(sorted(unknown))}")

        with write_scope(self.db, "update booking"):
            event = self._get_event(event_id)

            venue_id = fields.get("venue_id", event.venue_id)
            start = to_naive_utc(fields["start_datetime"]) if "start_datetime" in fields else event.start_datetime
            end = to_naive_utc(fields["end_datetime"]) if "end_datetime" in fields else event.end_datetime
            attendee_count = fields.get("attendee_count", event.attendee_count)
            new_status = EventStatus(fields.get("status", event.status))
            discount_percent = Decimal(fields.get("discount_percent", event.discount_percent))
            additional_fees = Decimal(fields.get("additional_fees", event.additional_fees))

            discount_percent, additional_fees = self._check_pricing_inputs(discount_percent, additional_fees)

            changes = ChangeSet(
                venue=venue_id != event.venue_id,
                start=start != event.start_datetime,
                end=end != event.end_datetime,
                attendee_count=attendee_count != event.attendee_count,
                activated=new_status in ACTIVE_STATUSES and not event.is_active
            )

            venue = self._lock_venue(venue_id)
            self.validator.validate(
                venue,
                Interval(start, end),
                attendee_count,
                exclude_event_id=event.id,
                changes=changes,
                holds_window=new_status in ACTIVE_STATUSES
            )

            updates: Dict[str, Any] = {
                "venue_id": venue_id,
                "start_datetime": start,
                "end_datetime": end,
                "attendee_count": attendee_count,
                "status": new_status,
            }
            for key in ("name", "description"):
                if key in fields:
                    updates[key] = fields[key]

            rental_type = fields.get("rental_type")
            pricing_changed = (
                changes.placement
                or rental_type is not None
                or discount_percent != event.discount_percent
                or additional_fees != event.additional_fees
            )
            if pricing_changed:
                if rental_type is None and not changes.placement:
                    rental_type = event.rental_type
                quote = pricing.quote(
                    venue.price_per_hour,
                    venue.price_per_day,
                    start,
                    end,
                    discount_percent=discount_percent,
                    additional_fees=additional_fees,
                    rental_type=rental_type
                )
                updates.update(
                    rental_type=quote.rental_type,
                    base_price=quote.base_price,
                    discount_percent=quote.discount_percent,
                    additional_fees=quote.additional_fees,
                    final_price=quote.final_price
                )

            if "is_paid" in fields:
                updates.update(self._payment_fields(event, fields["is_paid"]))

            event = self.event_repo.update(event, **updates)

        logger.info(f"Booking {event.id} updated ({', '.join(sorted(fields)) or 'no fields'})")
        return event

    def mark_paid(self, event_id: str, is_paid: bool = True) -> Event:
        return self.update_booking(event_id, is_paid=is_paid)

    def recalculate_price(self, event_id: str) -> Event:
        """Recompute the stored price from the booking's own inputs and current rate card."""
        with write_scope(self.db, "recalculate booking price"):
            event = self._get_event(event_id)
            quote = pricing.quote(
                event.venue.price_per_hour,
                event.venue.price_per_day,
                event.start_datetime,
                event.end_datetime,
                discount_percent=event.discount_percent,
                additional_fees=event.additional_fees,
                rental_type=event.rental_type
            )
            event = self.event_repo.update(
                event,
                base_price=quote.base_price,
                final_price=quote.final_price
            )
        return event

    def check_availability(
        self,
        venue_id: str,
        start: datetime,
        end: datetime,
        exclude_event_id: Optional[str] = None
    ) -> AvailabilityResult:
        return self.availability.check_availability(venue_id, start, end, exclude_event_id)

    def get_booking(self, event_id: str) -> Event:
        return self._get_event(event_id)

    def list_venue_bookings(self, venue_id: str, status: Optional[EventStatus] = None) -> List[Event]:
        if not self.venue_repo.get_by_id(venue_id):
            raise NotFoundError("Venue", venue_id)
        return self.event_repo.get_by_venue(venue_id, status=status)

    def delete_booking(self, event_id: str) -> None:
        with write_scope(self.db, "delete booking"):
            event = self._get_event(event_id)
            name = event.name
            self.event_repo.delete(event)

        logger.info(f"Booking {event_id} '{name}' deleted")

    def get_statistics(self) -> Dict:
        return self.event_repo.get_statistics(now=self.clock())

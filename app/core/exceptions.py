"""Error taxonomy for the booking engine.

Business-rule failures derive from ``BookingError`` and are deterministic:
callers surface them to the user and never retry. Persistence faults are
wrapped in ``InfrastructureError`` instead, which a caller may retry.
"""
from datetime import datetime
from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    INVALID_RANGE = "INVALID_RANGE"
    PAST_DATE = "PAST_DATE"
    VENUE_UNAVAILABLE = "VENUE_UNAVAILABLE"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    CONFLICT = "CONFLICT"
    CONFIGURATION = "CONFIGURATION"
    NOT_FOUND = "NOT_FOUND"
    ACTIVE_BOOKINGS_EXIST = "ACTIVE_BOOKINGS_EXIST"
    INFRASTRUCTURE = "INFRASTRUCTURE"


class BookingError(Exception):
    """Base business-rule error with a code and a user-safe message."""

    code: ErrorCode = ErrorCode.INVALID_RANGE
    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict:
        return {"code": self.code.value, "message": self.message}


class InvalidRangeError(BookingError):
    """Start/end ordering or booking length is out of bounds."""

    code = ErrorCode.INVALID_RANGE


class PastDateError(BookingError):
    code = ErrorCode.PAST_DATE

    def __init__(self, start: datetime) -> None:
        super().__init__(f"Start datetime {start.isoformat()} is in the past")
        self.start = start


class VenueUnavailableError(BookingError):
    code = ErrorCode.VENUE_UNAVAILABLE

    def __init__(self, venue_name: str, venue_status: str) -> None:
        super().__init__(
            f"Venue '{venue_name}' cannot be booked while its status is {venue_status}"
        )
        self.venue_name = venue_name
        self.venue_status = venue_status


class CapacityExceededError(BookingError):
    code = ErrorCode.CAPACITY_EXCEEDED

    def __init__(self, attendee_count: int, capacity: int) -> None:
        super().__init__(
            f"Attendee count {attendee_count} exceeds venue capacity of {capacity}"
        )
        self.attendee_count = attendee_count
        self.capacity = capacity


class ConflictError(BookingError):
    """The candidate window overlaps an active booking on the same venue."""

    code = ErrorCode.CONFLICT
    status_code = 409

    def __init__(
        self,
        event_id: str,
        event_name: str,
        start: datetime,
        end: datetime
    ) -> None:
        super().__init__(
            f"Venue is already booked from {start.isoformat()} to {end.isoformat()} "
            f"for event '{event_name}'"
        )
        self.event_id = event_id
        self.event_name = event_name
        self.start = start
        self.end = end

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["conflict"] = {
            "eventId": self.event_id,
            "eventName": self.event_name,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
        }
        return data


class ConfigurationError(BookingError):
    """A venue's rate card cannot price the requested rental."""

    code = ErrorCode.CONFIGURATION
    status_code = 422


class NotFoundError(BookingError):
    code = ErrorCode.NOT_FOUND
    status_code = 404

    def __init__(self, resource: str, resource_id: str) -> None:
        super().__init__(f"{resource} with ID '{resource_id}' not found")
        self.resource = resource
        self.resource_id = resource_id


class ActiveBookingsExistError(BookingError):
    code = ErrorCode.ACTIVE_BOOKINGS_EXIST
    status_code = 409

    def __init__(self, venue_name: str, active_count: int) -> None:
        super().__init__(
            f"Cannot delete venue '{venue_name}' because it has {active_count} "
            f"upcoming or ongoing event(s)"
        )
        self.venue_name = venue_name
        self.active_count = active_count


class InfrastructureError(Exception):
    """A persistence fault (connection loss, constraint violation)."""

    code = ErrorCode.INFRASTRUCTURE
    status_code = 503

    def __init__(self, message: str, original: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.original = original

    def to_dict(self) -> dict:
        return {"code": self.code.value, "message": self.message}

"""Half-open time intervals and the overlap rule used for venue bookings."""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

_HOUR = timedelta(hours=1)


def utc_now() -> datetime:
    """Current time as naive UTC, matching how booking windows are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC already."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def ceil_hours(delta: timedelta) -> int:
    """Whole hours covering ``delta``; any partial hour counts as a full one."""
    return -(-delta // _HOUR)


@dataclass(frozen=True)
class Interval:
    """The window ``[start, end)``."""

    start: datetime
    end: datetime

    @property
    def length(self) -> timedelta:
        return self.end - self.start

    @property
    def is_degenerate(self) -> bool:
        return not self.start < self.end

    def overlaps(self, other: "Interval") -> bool:
        # Touching boundaries (self.end == other.start) do not overlap
        return self.start < other.end and other.start < self.end

    def duration_hours(self) -> int:
        return ceil_hours(self.length)

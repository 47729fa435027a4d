"""
Rate card resolution and price calculation.

All money is handled as ``Decimal``; final prices are rounded half-up to a
whole currency unit because the venues are billed in a zero-decimal currency.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from app.core.exceptions import ConfigurationError
from app.models.event import RentalType
from app.utils.interval import Interval

HOURS_PER_DAY = 24
_ONE = Decimal("1")
_HUNDRED = Decimal("100")

Money = Union[Decimal, int, str]


def _to_decimal(value: Optional[Money]) -> Optional[Decimal]:
    if value is None:
        return None
    if isinstance(value, float):
        raise TypeError("Money values must not be binary floats")
    return Decimal(value)


def _days_for(duration_hours: int) -> int:
    return -(-duration_hours // HOURS_PER_DAY)


def compute_duration(start: datetime, end: datetime) -> int:
    """Billable hours between start and end, partial hours rounded up."""
    return Interval(start, end).duration_hours()


def choose_rental_type(
    price_per_hour: Optional[Money],
    price_per_day: Optional[Money],
    duration_hours: int
) -> RentalType:
    """
    Pick the cheaper rental mode for a venue's rate card.

    With a single configured rate that rate's mode is forced. With both,
    HOURLY wins ties.

    Raises:
        ConfigurationError: If the venue has no rate configured
    """
    hourly = _to_decimal(price_per_hour)
    daily = _to_decimal(price_per_day)
    
    if hourly is None and daily is None:
        raise ConfigurationError("Venue has neither an hourly nor a daily rate configured")
    if daily is None:
        return RentalType.HOURLY
    if hourly is None:
        return RentalType.DAILY
    
    hourly_cost = hourly * duration_hours
    daily_cost = daily * _days_for(duration_hours)
    return RentalType.HOURLY if hourly_cost <= daily_cost else RentalType.DAILY


def compute_base_price(
    rental_type: RentalType,
    price_per_hour: Optional[Money],
    price_per_day: Optional[Money],
    duration_hours: int
) -> Decimal:
    if rental_type == RentalType.DAILY:
        daily = _to_decimal(price_per_day)
        if daily is None:
            raise ConfigurationError("Daily price not set for this venue")
        return daily * _days_for(duration_hours)
    
    hourly = _to_decimal(price_per_hour)
    if hourly is None:
        raise ConfigurationError("Hourly price not set for this venue")
    return hourly * duration_hours


def compute_final_price(
    base_price: Money,
    discount_percent: Money = 0,
    additional_fees: Money = 0
) -> Decimal:
    """
    Apply a percentage discount and additive fees, then round to a whole unit.

    Example:
        compute_final_price(1000000, 10, 50000) -> Decimal("950000")
    """
    base = _to_decimal(base_price)
    discount = _to_decimal(discount_percent)
    fees = _to_decimal(additional_fees)
    
    if not Decimal("0") <= discount <= _HUNDRED:
        raise ValueError(f"discount_percent must be between 0 and 100, got {discount}")
    if fees < 0:
        raise ValueError(f"additional_fees must not be negative, got {fees}")
    
    raw = base * (_ONE - discount / _HUNDRED) + fees
    return raw.quantize(_ONE, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PriceQuote:
    rental_type: RentalType
    duration_hours: int
    base_price: Decimal
    discount_percent: Decimal
    additional_fees: Decimal
    final_price: Decimal


def quote(
    price_per_hour: Optional[Money],
    price_per_day: Optional[Money],
    start: datetime,
    end: datetime,
    discount_percent: Money = 0,
    additional_fees: Money = 0,
    rental_type: Optional[RentalType] = None
) -> PriceQuote:
    """Price a window end to end; an explicit ``rental_type`` skips the resolver."""
    duration_hours = compute_duration(start, end)
    if rental_type is None:
        rental_type = choose_rental_type(price_per_hour, price_per_day, duration_hours)
    
    base_price = compute_base_price(rental_type, price_per_hour, price_per_day, duration_hours)
    final_price = compute_final_price(base_price, discount_percent, additional_fees)
    
    return PriceQuote(
        rental_type=rental_type,
        duration_hours=duration_hours,
        base_price=base_price,
        discount_percent=_to_decimal(discount_percent),
        additional_fees=_to_decimal(additional_fees),
        final_price=final_price,
    )

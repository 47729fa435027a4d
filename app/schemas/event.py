from pydantic import BaseModel, Field, validator
from typing import Optional, List, Dict
from datetime import datetime
from decimal import Decimal
from app.models.event import EventStatus, RentalType


class BookingCreate(BaseModel):
    venueId: str
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    startDatetime: datetime = Field(..., description="ISO 8601 start of the booking")
    endDatetime: datetime = Field(..., description="ISO 8601 end of the booking (exclusive)")
    attendeeCount: Optional[int] = Field(None, ge=1)
    discountPercent: Decimal = Field(Decimal("0"), ge=0, le=100, decimal_places=2)
    additionalFees: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)
    rentalType: Optional[RentalType] = Field(
        None,
        description="Force a rental mode instead of picking the cheaper one"
    )
    
    @validator('name')
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Event name is required')
        return v


# Fields an update may explicitly clear with null
NULLABLE_FIELDS = frozenset({"description", "attendeeCount"})


class BookingUpdate(BaseModel):
    venueId: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    startDatetime: Optional[datetime] = None
    endDatetime: Optional[datetime] = None
    status: Optional[EventStatus] = None
    rentalType: Optional[RentalType] = None
    attendeeCount: Optional[int] = Field(None, ge=1)
    discountPercent: Optional[Decimal] = Field(None, ge=0, le=100, decimal_places=2)
    additionalFees: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    isPaid: Optional[bool] = None
    
    def to_fields(self) -> dict:
        """Fields the caller actually sent, keyed by model attribute name."""
        names = {
            "venueId": "venue_id",
            "startDatetime": "start_datetime",
            "endDatetime": "end_datetime",
            "rentalType": "rental_type",
            "attendeeCount": "attendee_count",
            "discountPercent": "discount_percent",
            "additionalFees": "additional_fees",
            "isPaid": "is_paid",
        }
        return {
            names.get(key, key): value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key in NULLABLE_FIELDS
        }


class VenueInfo(BaseModel):
    id: str
    name: str
    city: str
    capacity: int
    status: str


class BookingResponse(BaseModel):
    id: str
    venueId: str
    name: str
    description: Optional[str] = None
    startDatetime: str
    endDatetime: str
    status: str
    rentalType: str
    attendeeCount: Optional[int] = None
    basePrice: str
    discountPercent: str
    additionalFees: str
    finalPrice: str
    finalPriceFormatted: Optional[str] = None
    isPaid: bool
    paymentDate: Optional[str] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None
    venue: Optional[VenueInfo] = None
    
    class Config:
        from_attributes = True


class BookingDetailResponse(BaseModel):
    success: bool = True
    event: BookingResponse


class VenueBookingsResponse(BaseModel):
    success: bool = True
    venueId: str
    events: List[BookingResponse]
    total: int


class ConflictInfo(BaseModel):
    eventId: str
    eventName: str
    start: str
    end: str


class AvailabilityResponse(BaseModel):
    success: bool = True
    available: bool
    conflict: Optional[ConflictInfo] = None


class BookingStatistics(BaseModel):
    success: bool = True
    total: int
    byStatus: Dict[str, int] = {}
    upcoming: int
    ongoing: int
    completed: int
    paid: int
    unpaid: int
    paidRevenue: str


class MessageResponse(BaseModel):
    success: bool = True
    message: str

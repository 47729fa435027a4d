from sqlalchemy import Column, String, Boolean, DateTime, Integer, Numeric, Text, Enum as SQLEnum, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from decimal import Decimal
import enum
from app.core.database import Base
from app.utils.currency import format_currency
from app.utils.interval import Interval


class EventStatus(str, enum.Enum):
    UPCOMING = "UPCOMING"
    ONGOING = "ONGOING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# Statuses that hold a venue's time window
ACTIVE_STATUSES = (EventStatus.UPCOMING, EventStatus.ONGOING)


class RentalType(str, enum.Enum):
    HOURLY = "HOURLY"
    DAILY = "DAILY"


class Event(Base):
    """
    A booking of a venue for a half-open time window [start, end).
    Times are stored as naive UTC.
    """
    __tablename__ = "events"
    __table_args__ = (
        Index("ix_events_venue_window", "venue_id", "start_datetime", "end_datetime"),
    )
    
    id = Column(String(36), primary_key=True, index=True)
    
    venue_id = Column(String(36), ForeignKey("venues.id"), nullable=False, index=True)
    
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    
    start_datetime = Column(DateTime, nullable=False, index=True)
    end_datetime = Column(DateTime, nullable=False)
    
    status = Column(
        SQLEnum(EventStatus),
        nullable=False,
        default=EventStatus.UPCOMING,
        index=True
    )
    
    rental_type = Column(SQLEnum(RentalType), nullable=False, default=RentalType.HOURLY)
    attendee_count = Column(Integer, nullable=True)
    
    base_price = Column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    discount_percent = Column(Numeric(5, 2), nullable=False, default=Decimal("0"))
    additional_fees = Column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    final_price = Column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    
    is_paid = Column(Boolean, nullable=False, default=False, index=True)
    payment_date = Column(DateTime, nullable=True)
    
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now()
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now()
    )
    
    venue = relationship("Venue", back_populates="events")
    
    @property
    def interval(self) -> Interval:
        return Interval(self.start_datetime, self.end_datetime)
    
    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES
    
    def __repr__(self) -> str:
        return f"<Event(id={self.id}, name={self.name}, venue_id={self.venue_id}, status={self.status})>"
    
    def to_dict(self, include_venue: bool = False) -> dict:
        currency = self.venue.currency if self.venue else None
        event_dict = {
            "id": self.id,
            "venueId": self.venue_id,
            "name": self.name,
            "description": self.description,
            "startDatetime": self.start_datetime.isoformat() if self.start_datetime else None,
            "endDatetime": self.end_datetime.isoformat() if self.end_datetime else None,
            "status": self.status.value if self.status else None,
            "rentalType": self.rental_type.value if self.rental_type else None,
            "attendeeCount": self.attendee_count,
            "basePrice": str(self.base_price) if self.base_price is not None else None,
            "discountPercent": str(self.discount_percent) if self.discount_percent is not None else None,
            "additionalFees": str(self.additional_fees) if self.additional_fees is not None else None,
            "finalPrice": str(self.final_price) if self.final_price is not None else None,
            "finalPriceFormatted": format_currency(self.final_price, currency) if self.final_price is not None and currency else None,
            "isPaid": self.is_paid,
            "paymentDate": self.payment_date.isoformat() if self.payment_date else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
        
        if include_venue and self.venue:
            event_dict["venue"] = {
                "id": self.venue.id,
                "name": self.venue.name,
                "city": self.venue.city,
                "capacity": self.venue.capacity,
                "status": self.venue.status.value,
            }
        
        return event_dict

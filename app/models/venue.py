from sqlalchemy import Column, String, DateTime, Integer, Numeric, Text, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from app.core.database import Base


class VenueStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    MAINTENANCE = "MAINTENANCE"
    INACTIVE = "INACTIVE"


class Venue(Base):
    __tablename__ = "venues"
    
    id = Column(String(36), primary_key=True, index=True)
    
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    address = Column(Text, nullable=False)
    city = Column(String(255), nullable=False, index=True)
    capacity = Column(Integer, nullable=False, comment="Maximum capacity of venue")
    
    price_per_hour = Column(Numeric(12, 2), nullable=True)
    price_per_day = Column(Numeric(12, 2), nullable=True)
    currency = Column(String(3), nullable=False, default="IDR")
    
    status = Column(
        SQLEnum(VenueStatus),
        nullable=False,
        default=VenueStatus.ACTIVE,
        index=True
    )
    
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
    
    # Terminal events go with the venue; active ones block deletion upstream
    events = relationship(
        "Event",
        back_populates="venue",
        cascade="all, delete-orphan",
        order_by="Event.start_datetime"
    )
    
    def __repr__(self) -> str:
        return f"<Venue(id={self.id}, name={self.name}, status={self.status})>"
    
    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "address": self.address,
            "city": self.city,
            "capacity": self.capacity,
            "pricePerHour": str(self.price_per_hour) if self.price_per_hour is not None else None,
            "pricePerDay": str(self.price_per_day) if self.price_per_day is not None else None,
            "currency": self.currency,
            "status": self.status.value if self.status else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

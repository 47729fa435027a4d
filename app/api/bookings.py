from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.event import (
    BookingCreate,
    BookingUpdate,
    BookingDetailResponse,
    AvailabilityResponse,
    BookingStatistics,
    MessageResponse,
)
from app.services.booking_service import BookingService

router = APIRouter(prefix="/api/bookings", tags=["bookings"])


@router.post("", response_model=BookingDetailResponse, status_code=status.HTTP_201_CREATED)
def create_booking(booking_data: BookingCreate, db: Session = Depends(get_db)):
    event = BookingService(db).create_booking(
        venue_id=booking_data.venueId,
        name=booking_data.name,
        description=booking_data.description,
        start=booking_data.startDatetime,
        end=booking_data.endDatetime,
        discount_percent=booking_data.discountPercent,
        additional_fees=booking_data.additionalFees,
        attendee_count=booking_data.attendeeCount,
        rental_type=booking_data.rentalType
    )
    return {"success": True, "event": event.to_dict(include_venue=True)}


@router.get("/availability", response_model=AvailabilityResponse)
def check_availability(
    venueId: str,
    start: datetime,
    end: datetime,
    excludeId: Optional[str] = None,
    db: Session = Depends(get_db)
):
    result = BookingService(db).check_availability(venueId, start, end, exclude_event_id=excludeId)
    return {"success": True, **result.to_dict()}


@router.get("/statistics", response_model=BookingStatistics)
def booking_statistics(db: Session = Depends(get_db)):
    stats = BookingService(db).get_statistics()
    return {
        "success": True,
        "total": stats["total"],
        "byStatus": stats["by_status"],
        "upcoming": stats["upcoming"],
        "ongoing": stats["ongoing"],
        "completed": stats["completed"],
        "paid": stats["paid"],
        "unpaid": stats["unpaid"],
        "paidRevenue": str(stats["paid_revenue"])
    }


@router.get("/{event_id}", response_model=BookingDetailResponse)
def get_booking(event_id: str, db: Session = Depends(get_db)):
    event = BookingService(db).get_booking(event_id)
    return {"success": True, "event": event.to_dict(include_venue=True)}


@router.patch("/{event_id}", response_model=BookingDetailResponse)
def update_booking(event_id: str, booking_data: BookingUpdate, db: Session = Depends(get_db)):
    event = BookingService(db).update_booking(event_id, **booking_data.to_fields())
    return {"success": True, "event": event.to_dict(include_venue=True)}


@router.delete("/{event_id}", response_model=MessageResponse)
def delete_booking(event_id: str, db: Session = Depends(get_db)):
    BookingService(db).delete_booking(event_id)
    return {"success": True, "message": f"Booking {event_id} has been deleted"}

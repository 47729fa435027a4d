from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.models.venue import VenueStatus
from app.schemas.event import VenueBookingsResponse, MessageResponse
from app.schemas.venue import (
    VenueCreate,
    VenueUpdate,
    VenueDetailResponse,
    VenuesResponse,
    VenueStatistics,
)
from app.services.booking_service import BookingService
from app.services.venue_service import VenueService

router = APIRouter(prefix="/api/venues", tags=["venues"])


@router.post("", response_model=VenueDetailResponse, status_code=status.HTTP_201_CREATED)
def create_venue(venue_data: VenueCreate, db: Session = Depends(get_db)):
    venue = VenueService(db).create_venue(
        name=venue_data.name,
        description=venue_data.description,
        address=venue_data.address,
        city=venue_data.city,
        capacity=venue_data.capacity,
        price_per_hour=venue_data.pricePerHour,
        price_per_day=venue_data.pricePerDay,
        currency=venue_data.currency,
        status=venue_data.status
    )
    return {"success": True, "venue": venue.to_dict()}


@router.get("", response_model=VenuesResponse)
def list_venues(
    status: Optional[VenueStatus] = None,
    city: Optional[str] = None,
    db: Session = Depends(get_db)
):
    venues = VenueService(db).list_venues(status=status, city=city)
    return {"success": True, "venues": [venue.to_dict() for venue in venues]}


@router.get("/statistics", response_model=VenueStatistics)
def venue_statistics(db: Session = Depends(get_db)):
    stats = VenueService(db).get_statistics()
    return {
        "success": True,
        "total": stats["total"],
        "byStatus": stats["by_status"],
        "topCities": stats["top_cities"]
    }


@router.get("/{venue_id}", response_model=VenueDetailResponse)
def get_venue(venue_id: str, db: Session = Depends(get_db)):
    venue = VenueService(db).get_venue(venue_id)
    return {"success": True, "venue": venue.to_dict()}


@router.patch("/{venue_id}", response_model=VenueDetailResponse)
def update_venue(venue_id: str, venue_data: VenueUpdate, db: Session = Depends(get_db)):
    venue = VenueService(db).update_venue(venue_id, **venue_data.to_fields())
    return {"success": True, "venue": venue.to_dict()}


@router.delete("/{venue_id}", response_model=MessageResponse)
def delete_venue(venue_id: str, db: Session = Depends(get_db)):
    VenueService(db).delete_venue(venue_id)
    return {"success": True, "message": f"Venue {venue_id} has been deleted"}


@router.get("/{venue_id}/bookings", response_model=VenueBookingsResponse)
def list_venue_bookings(venue_id: str, db: Session = Depends(get_db)):
    events = BookingService(db).list_venue_bookings(venue_id)
    return {
        "success": True,
        "venueId": venue_id,
        "events": [event.to_dict() for event in events],
        "total": len(events)
    }

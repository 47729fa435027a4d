"""
Venue service tests: administration, deletion guard and statistics.
"""
import pytest
from decimal import Decimal
from app.core.exceptions import ActiveBookingsExistError, InvalidRangeError, NotFoundError
from app.models.event import Event, EventStatus
from app.models.venue import Venue, VenueStatus
from app.services.booking_service import BookingService
from app.services.venue_service import VenueService
from conftest import at, make_event, make_venue


# =============================================================================
# TEST: Create / Update
# =============================================================================
class TestVenueAdministration:
    """Test venue creation and edits."""
    
    def test_create_venue_defaults(self, db):
        venue = VenueService(db).create_venue(
            name="Rooftop",
            address="Jl. Sudirman 10",
            city="Jakarta",
            capacity=80,
            price_per_hour=Decimal("150000")
        )
        
        assert venue.id is not None
        assert venue.status == VenueStatus.ACTIVE
        assert venue.currency == "IDR"
        assert venue.price_per_day is None
    
    def test_currency_is_upper_cased(self, db):
        venue = VenueService(db).create_venue(
            name="Loft", address="Main St 1", city="Bandung", capacity=10,
            price_per_day=Decimal("500000"), currency="usd"
        )
        assert venue.currency == "USD"
    
    def test_zero_capacity_raises(self, db):
        with pytest.raises(InvalidRangeError):
            VenueService(db).create_venue(
                name="Closet", address="Main St 2", city="Bandung", capacity=0
            )
    
    def test_non_positive_rate_raises(self, db):
        with pytest.raises(InvalidRangeError):
            VenueService(db).create_venue(
                name="Free Hall", address="Main St 3", city="Bandung", capacity=10,
                price_per_hour=Decimal("0")
            )
    
    def test_status_moves_freely(self, db, sample_venue):
        service = VenueService(db)
        
        assert service.update_venue(sample_venue.id, status=VenueStatus.MAINTENANCE).status == VenueStatus.MAINTENANCE
        assert service.update_venue(sample_venue.id, status=VenueStatus.INACTIVE).status == VenueStatus.INACTIVE
        assert service.update_venue(sample_venue.id, status=VenueStatus.ACTIVE).status == VenueStatus.ACTIVE
    
    def test_partial_update_keeps_other_fields(self, db, sample_venue):
        venue = VenueService(db).update_venue(sample_venue.id, capacity=300)
        
        assert venue.capacity == 300
        assert venue.name == "Grand Hall"
        assert venue.price_per_day == Decimal("700000")
    
    def test_update_unknown_venue_raises(self, db):
        with pytest.raises(NotFoundError):
            VenueService(db).update_venue("missing", name="x")
    
    def test_list_filters_by_status_and_city(self, db, sample_venue):
        make_venue(db, name="Warehouse", city="Surabaya", status=VenueStatus.INACTIVE)
        service = VenueService(db)
        
        assert [v.name for v in service.list_venues(status=VenueStatus.ACTIVE)] == ["Grand Hall"]
        assert [v.name for v in service.list_venues(city="sura")] == ["Warehouse"]
        assert len(service.list_venues()) == 2


# =============================================================================
# TEST: Delete
# =============================================================================
class TestDeleteVenue:
    """Test the active-bookings guard on venue deletion."""
    
    def test_delete_with_upcoming_event_raises(self, db, sample_venue, sample_event):
        with pytest.raises(ActiveBookingsExistError) as exc_info:
            VenueService(db).delete_venue(sample_venue.id)
        
        assert exc_info.value.active_count == 1
        assert db.query(Venue).count() == 1
    
    def test_delete_with_ongoing_event_raises(self, db, sample_venue):
        make_event(db, sample_venue, at(9), at(10), status=EventStatus.ONGOING)
        
        with pytest.raises(ActiveBookingsExistError):
            VenueService(db).delete_venue(sample_venue.id)
    
    @pytest.mark.parametrize("final_status", [EventStatus.CANCELLED, EventStatus.COMPLETED])
    def test_delete_after_event_closed(self, db, sample_venue, sample_event, final_status):
        """Scenario: deletion succeeds once the only booking is no longer active."""
        with pytest.raises(ActiveBookingsExistError):
            VenueService(db).delete_venue(sample_venue.id)
        
        BookingService(db).update_booking(sample_event.id, status=final_status)
        VenueService(db).delete_venue(sample_venue.id)
        
        assert db.query(Venue).count() == 0
        assert db.query(Event).count() == 0
    
    def test_delete_empty_venue(self, db, sample_venue):
        VenueService(db).delete_venue(sample_venue.id)
        assert db.query(Venue).count() == 0
    
    def test_delete_unknown_venue_raises(self, db):
        with pytest.raises(NotFoundError):
            VenueService(db).delete_venue("missing")


# =============================================================================
# TEST: Statistics
# =============================================================================
class TestVenueStatistics:
    
    def test_counts_by_status(self, db, sample_venue):
        make_venue(db, name="Under Repair", status=VenueStatus.MAINTENANCE)
        make_venue(db, name="Second Hall")
        
        stats = VenueService(db).get_statistics()
        
        assert stats["total"] == 3
        assert stats["by_status"] == {"ACTIVE": 2, "MAINTENANCE": 1}
    
    def test_top_cities_ranked_by_venue_count(self, db, sample_venue):
        make_venue(db, name="Braga Hall", city="Bandung")
        make_venue(db, name="Dago Loft", city="Bandung")
        make_venue(db, name="Harbour Room", city="Surabaya")
        
        stats = VenueService(db).get_statistics()
        
        assert stats["top_cities"] == [
            {"city": "Bandung", "count": 2},
            {"city": "Jakarta", "count": 1},
            {"city": "Surabaya", "count": 1},
        ]
    
    def test_top_cities_limited_to_five(self, db):
        for index, city in enumerate(["Bandung", "Bogor", "Depok", "Jakarta", "Medan", "Surabaya"]):
            make_venue(db, name=f"Hall {index}", city=city)
        
        stats = VenueService(db).get_statistics()
        
        assert len(stats["top_cities"]) == 5

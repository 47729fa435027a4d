"""
Pytest configuration file.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from decimal import Decimal
from datetime import datetime, timedelta
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from app.core.database import Base, get_db
from app.models.venue import Venue, VenueStatus
from app.models.event import Event, EventStatus, RentalType
from main import app
import uuid

SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Far enough ahead that the real clock never treats it as past
BOOKING_DAY = datetime(2099, 6, 1)


def at(hour: int, minute: int = 0, day_offset: int = 0) -> datetime:
    """A naive UTC datetime on the shared booking day."""
    return BOOKING_DAY + timedelta(days=day_offset, hours=hour, minutes=minute)


def override_get_db():
    """Override database dependency for testing."""
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def db():
    """Create test database."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    yield db
    db.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """Create test client."""
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_venue(db, **overrides) -> Venue:
    data = dict(
        id=str(uuid.uuid4()),
        name="Grand Hall",
        description="Ballroom on the ground floor",
        address="Jl. Merdeka 1",
        city="Jakarta",
        capacity=200,
        price_per_hour=Decimal("100000"),
        price_per_day=Decimal("700000"),
        currency="IDR",
        status=VenueStatus.ACTIVE
    )
    data.update(overrides)
    venue = Venue(**data)
    db.add(venue)
    db.commit()
    db.refresh(venue)
    return venue


def make_event(db, venue, start, end, **overrides) -> Event:
    data = dict(
        id=str(uuid.uuid4()),
        venue_id=venue.id,
        name="Existing Booking",
        start_datetime=start,
        end_datetime=end,
        status=EventStatus.UPCOMING,
        rental_type=RentalType.HOURLY,
        base_price=Decimal("800000"),
        discount_percent=Decimal("0"),
        additional_fees=Decimal("0"),
        final_price=Decimal("800000"),
        is_paid=False
    )
    data.update(overrides)
    event = Event(**data)
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


@pytest.fixture
def sample_venue(db):
    """An active venue with both hourly and daily rates."""
    return make_venue(db)


@pytest.fixture
def hourly_only_venue(db):
    return make_venue(db, name="Meeting Room", capacity=20, price_per_day=None)


@pytest.fixture
def sample_event(db, sample_venue):
    """An upcoming booking on the sample venue from 09:00 to 17:00."""
    return make_event(db, sample_venue, at(9), at(17), name="Morning Conference")

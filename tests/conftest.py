from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from availability import AvailabilityIndex
from catalog import InMemoryCatalog
from errors import UnavailableError
from models import Customer, Hotel, Room, RoomType
from queries import BookingQueries
from repository import InMemoryBookingRepository
from services import BookingService


class FakeClock:
    """Settable replacement for date.today."""

    def __init__(self, today: date) -> None:
        self.today = today

    def __call__(self) -> date:
        return self.today


def unique_id(prefix: str) -> str:
    return f"{prefix}_{uuid4().hex[:8]}"


def add_hotel(catalog: InMemoryCatalog, **overrides) -> Hotel:
    fields = dict(
        id=unique_id("hotel"),
        name="Seaside Hotel",
        address="1 Ocean Drive",
        city="Miami Beach",
        state="FL",
        country="USA",
        star_rating=4,
        description="Test hotel",
    )
    fields.update(overrides)
    hotel = Hotel(**fields)
    catalog.load(hotels=[hotel])
    return hotel


def add_room(
    catalog: InMemoryCatalog,
    hotel_id: str,
    room_number: str = "101",
    capacity: int = 2,
    price: str = "150.00",
    room_type: RoomType = RoomType.STANDARD,
) -> Room:
    room = Room(
        id=unique_id("room"),
        hotel_id=hotel_id,
        room_number=room_number,
        room_type=room_type,
        price_per_night=Decimal(price),
        capacity=capacity,
        description="Test room",
        amenities=("WiFi",),
    )
    catalog.load(rooms=[room])
    return room


def add_customer(catalog: InMemoryCatalog, email: str = "") -> Customer:
    customer_id = unique_id("cust")
    customer = Customer(
        id=customer_id,
        first_name="Test",
        last_name="Guest",
        email=email or f"{customer_id}@example.com",
    )
    catalog.load(customers=[customer])
    return customer


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(date(2025, 5, 1))


@pytest.fixture
def repo() -> InMemoryBookingRepository:
    return InMemoryBookingRepository()


@pytest.fixture
def index() -> AvailabilityIndex:
    return AvailabilityIndex()


@pytest.fixture
def catalog() -> InMemoryCatalog:
    return InMemoryCatalog()


@pytest.fixture
def service(repo, index, catalog, clock) -> BookingService:
    return BookingService(repo, index, catalog, clock=clock)


@pytest.fixture
def queries(repo, catalog, clock) -> BookingQueries:
    return BookingQueries(catalog, repo, clock=clock)


class FailingInsertRepository(InMemoryBookingRepository):
    def insert(self, booking):
        raise UnavailableError("Booking storage is temporarily unavailable.")


class FailingUpdateRepository(InMemoryBookingRepository):
    def update(self, booking):
        raise UnavailableError("Booking storage is temporarily unavailable.")

from __future__ import annotations

import logging
import random
from datetime import timedelta
from decimal import Decimal
from typing import List, Optional, Tuple

from catalog import InMemoryCatalog
from errors import ConflictError
from models import CreateBookingIn, Customer, Hotel, Room, RoomType
from services import BookingService

logger = logging.getLogger(__name__)

# type, nightly rate, capacity, amenities
ROOM_TEMPLATES: List[Tuple[RoomType, Decimal, int, Tuple[str, ...]]] = [
    (RoomType.STANDARD, Decimal("120.00"), 2, ("WiFi", "TV")),
    (RoomType.DELUXE, Decimal("180.00"), 2, ("WiFi", "TV", "Mini Bar")),
    (RoomType.SUITE, Decimal("250.00"), 4, ("WiFi", "TV", "Mini Bar", "Living Area")),
    (RoomType.EXECUTIVE_SUITE, Decimal("350.00"), 4, ("WiFi", "TV", "Mini Bar", "Living Area", "Work Desk")),
]

DEMO_HOTELS: List[Tuple[Hotel, int]] = [
    (
        Hotel(
            id="1",
            name="Grand Pacific Resort",
            address="100 Beachfront Drive",
            city="Miami Beach",
            state="FL",
            country="USA",
            star_rating=5,
            description="A luxurious beachfront resort featuring world-class amenities, spa services, and fine dining.",
        ),
        20,
    ),
    (
        Hotel(
            id="2",
            name="Metropolitan Business Hotel",
            address="250 Corporate Plaza",
            city="New York",
            state="NY",
            country="USA",
            star_rating=4,
            description="Modern business hotel in the heart of Manhattan with state-of-the-art conference facilities.",
        ),
        25,
    ),
    (
        Hotel(
            id="3",
            name="The Vintage Inn",
            address="75 Historic District",
            city="Charleston",
            state="SC",
            country="USA",
            star_rating=4,
            description="Charming boutique hotel in a restored 19th-century building with unique character.",
        ),
        15,
    ),
    (
        Hotel(
            id="4",
            name="Alpine Mountain Lodge",
            address="500 Summit Road",
            city="Aspen",
            state="CO",
            country="USA",
            star_rating=4,
            description="Cozy mountain lodge offering breathtaking views and easy access to ski slopes.",
        ),
        18,
    ),
    (
        Hotel(
            id="5",
            name="Sky Harbor Hotel",
            address="1000 Airport Boulevard",
            city="Los Angeles",
            state="CA",
            country="USA",
            star_rating=3,
            description="Convenient airport hotel with complimentary shuttle service and comfortable accommodations.",
        ),
        30,
    ),
]

DEMO_CUSTOMERS: List[Customer] = [
    Customer(id="1", first_name="John", last_name="Doe", email="john.doe@example.com", phone="+1-555-0101"),
    Customer(id="2", first_name="Jane", last_name="Smith", email="jane.smith@example.com", phone="+1-555-0102"),
    Customer(id="3", first_name="Michael", last_name="Johnson", email="michael.johnson@example.com", phone="+1-555-0103"),
    Customer(id="4", first_name="Emily", last_name="Williams", email="emily.williams@example.com", phone="+1-555-0104"),
    Customer(id="5", first_name="David", last_name="Brown", email="david.brown@example.com", phone="+1-555-0105"),
    Customer(id="6", first_name="Sarah", last_name="Davis", email="sarah.davis@example.com", phone="+1-555-0106"),
    Customer(id="7", first_name="James", last_name="Miller", email="james.miller@example.com", phone="+1-555-0107"),
    Customer(id="8", first_name="Lisa", last_name="Wilson", email="lisa.wilson@example.com", phone="+1-555-0108"),
    Customer(id="9", first_name="Robert", last_name="Moore", email="robert.moore@example.com", phone="+1-555-0109"),
    Customer(id="10", first_name="Jennifer", last_name="Taylor", email="jennifer.taylor@example.com", phone="+1-555-0110"),
]


def build_rooms(hotel: Hotel, number_of_rooms: int) -> List[Room]:
    """Rooms 101..110, 201..210, ... with the type cycling through ROOM_TEMPLATES."""
    rooms = []
    for i in range(1, number_of_rooms + 1):
        floor = (i - 1) // 10 + 1
        room_number = f"{floor}{(i - 1) % 10 + 1:02d}"
        room_type, rate, capacity, amenities = ROOM_TEMPLATES[i % len(ROOM_TEMPLATES)]
        label = room_type.value.replace("_", " ").title()
        rooms.append(
            Room(
                id=f"{hotel.id}-{room_number}",
                hotel_id=hotel.id,
                room_number=room_number,
                room_type=room_type,
                price_per_night=rate,
                capacity=capacity,
                description=f"{label} room with modern amenities",
                amenities=amenities,
            )
        )
    return rooms


def seed_catalog(catalog: InMemoryCatalog) -> bool:
    """Load the demo hotels, rooms and customers. Skipped if the catalog already has data."""
    if not catalog.is_empty():
        logger.info("Catalog already initialized, skipping demo data")
        return False

    hotels = [hotel for hotel, _ in DEMO_HOTELS]
    rooms = [room for hotel, count in DEMO_HOTELS for room in build_rooms(hotel, count)]
    catalog.load(hotels=hotels, rooms=rooms, customers=DEMO_CUSTOMERS)
    logger.info(
        "Loaded %d hotels, %d rooms and %d customers", len(hotels), len(rooms), len(DEMO_CUSTOMERS)
    )
    return True


def seed_bookings(
    service: BookingService,
    catalog: InMemoryCatalog,
    count: int,
    rng: Optional[random.Random] = None,
    horizon_days: int = 90,
) -> int:
    """Create up to ``count`` random bookings over the next ``horizon_days``; overlaps are skipped."""
    rng = rng or random.Random()
    rooms = catalog.list_rooms()
    customers = catalog.list_customers()
    if not rooms or not customers:
        return 0

    today = service.today()
    created = 0
    for _ in range(count):
        room = rng.choice(rooms)
        customer = rng.choice(customers)
        check_in = today + timedelta(days=1 + rng.randrange(horizon_days - 7))
        check_out = min(check_in + timedelta(days=1 + rng.randrange(14)), today + timedelta(days=horizon_days))
        payload = CreateBookingIn(
            room_id=room.id,
            customer_id=customer.id,
            check_in_date=check_in.isoformat(),
            check_out_date=check_out.isoformat(),
            number_of_guests=1 + rng.randrange(room.capacity),
        )
        try:
            service.create_booking(payload)
        except ConflictError:
            continue
        created += 1

    logger.info("Created %d of %d requested demo bookings", created, count)
    return created

import threading
import time
from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from conftest import FailingInsertRepository, add_customer, add_hotel, add_room
from main import create_app
from services import BookingService

CREATE_BOOKING = """
mutation CreateBooking(
  $roomId: String!
  $customerId: String!
  $checkInDate: String!
  $checkOutDate: String!
  $numberOfGuests: Int!
  $specialRequests: String
) {
  createBooking(
    roomId: $roomId
    customerId: $customerId
    checkInDate: $checkInDate
    checkOutDate: $checkOutDate
    numberOfGuests: $numberOfGuests
    specialRequests: $specialRequests
  ) {
    id
    totalPrice
    status
  }
}
"""

CANCEL_BOOKING = """
mutation CancelBooking($bookingId: String!) {
  cancelBooking(bookingId: $bookingId) {
    id
    status
  }
}
"""

UPCOMING_BOOKINGS = """
query GetUpcomingBookings($customerId: String!) {
  upcomingBookings(customerId: $customerId) {
    id
    checkInDate
    checkOutDate
    numberOfGuests
    totalPrice
    status
    specialRequests
    room {
      id
      roomNumber
      roomType
      hotel {
        id
        name
        city
        state
      }
    }
    customer {
      firstName
      lastName
      email
    }
  }
}
"""


@pytest.fixture
def client(service, queries):
    return TestClient(create_app(service, queries))


@pytest.fixture
def hotel(catalog):
    return add_hotel(catalog, name="Grand Pacific Resort", city="Miami Beach", state="FL", star_rating=5)


@pytest.fixture
def room(catalog, hotel):
    return add_room(catalog, hotel.id, room_number="101", capacity=2, price="150.00")


@pytest.fixture
def customer(catalog):
    return add_customer(catalog, email="john.doe@example.com")


def gql(client, query, **variables):
    response = client.post("/graphql", json={"query": query, "variables": variables})
    assert response.status_code == 200
    return response.json()


def create(client, room, customer, check_in, check_out, guests=2, special_requests=None):
    return gql(
        client,
        CREATE_BOOKING,
        roomId=room.id,
        customerId=customer.id,
        checkInDate=check_in,
        checkOutDate=check_out,
        numberOfGuests=guests,
        specialRequests=special_requests,
    )


def error_code(result):
    return result["errors"][0]["extensions"]["code"]


def test_hotels_query(client, hotel):
    result = gql(client, "{ hotels { id name city state starRating description } }")
    assert result["data"]["hotels"] == [
        {
            "id": hotel.id,
            "name": "Grand Pacific Resort",
            "city": "Miami Beach",
            "state": "FL",
            "starRating": 5,
            "description": "Test hotel",
        }
    ]


def test_hotel_with_rooms(client, catalog, hotel, room):
    add_room(catalog, hotel.id, room_number="201", capacity=4, price="250.00")
    query = """
    query GetHotelWithRooms($id: String!) {
      hotel(id: $id) {
        id
        name
        rooms { roomNumber roomType pricePerNight capacity amenities }
      }
    }
    """
    result = gql(client, query, id=hotel.id)
    rooms = result["data"]["hotel"]["rooms"]
    assert [r["roomNumber"] for r in rooms] == ["101", "201"]
    assert Decimal(rooms[1]["pricePerNight"]) == Decimal("250")
    assert rooms[0]["roomType"] == "STANDARD"
    assert rooms[0]["amenities"] == ["WiFi"]


def test_unknown_hotel_is_null(client):
    result = gql(client, 'query { hotel(id: "nope") { id } }')
    assert result["data"]["hotel"] is None
    assert "errors" not in result


def test_rooms_by_hotel_unknown_hotel(client):
    result = gql(client, 'query { roomsByHotel(hotelId: "nope") { id } }')
    assert error_code(result) == "NOT_FOUND"


def test_booking_scenario(client, room, customer):
    first = create(client, room, customer, "2025-06-01", "2025-06-04")
    booking = first["data"]["createBooking"]
    assert Decimal(booking["totalPrice"]) == Decimal("450")
    assert booking["status"] == "CONFIRMED"

    conflict = create(client, room, customer, "2025-06-03", "2025-06-05")
    assert conflict["data"] is None
    assert error_code(conflict) == "CONFLICT"

    cancelled = gql(client, CANCEL_BOOKING, bookingId=booking["id"])
    assert cancelled["data"]["cancelBooking"] == {"id": booking["id"], "status": "CANCELLED"}

    retry = create(client, room, customer, "2025-06-03", "2025-06-05")
    assert retry["data"]["createBooking"]["status"] == "CONFIRMED"


def test_create_booking_validation_errors(client, room, customer):
    assert error_code(create(client, room, customer, "2025-06-04", "2025-06-01")) == "VALIDATION_ERROR"
    assert error_code(create(client, room, customer, "2025-06-01", "2025-06-04", guests=3)) == "VALIDATION_ERROR"
    assert error_code(create(client, room, customer, "June 1st", "2025-06-04")) == "VALIDATION_ERROR"


def test_create_booking_unknown_customer(client, room):
    result = gql(
        client,
        CREATE_BOOKING,
        roomId=room.id,
        customerId="nobody",
        checkInDate="2025-06-01",
        checkOutDate="2025-06-02",
        numberOfGuests=1,
    )
    assert error_code(result) == "NOT_FOUND"


def test_cancel_twice_is_invalid_transition(client, room, customer):
    booking_id = create(client, room, customer, "2025-06-01", "2025-06-04")["data"]["createBooking"]["id"]
    gql(client, CANCEL_BOOKING, bookingId=booking_id)

    result = gql(client, CANCEL_BOOKING, bookingId=booking_id)
    assert error_code(result) == "INVALID_TRANSITION"


def test_cancel_unknown_booking(client):
    assert error_code(gql(client, CANCEL_BOOKING, bookingId="bkg_missing")) == "NOT_FOUND"


def test_upcoming_bookings(client, room, customer, clock):
    later = create(client, room, customer, "2025-07-01", "2025-07-03", special_requests="Crib")
    sooner = create(client, room, customer, "2025-06-01", "2025-06-04")
    cancelled = create(client, room, customer, "2025-06-10", "2025-06-12")
    gql(client, CANCEL_BOOKING, bookingId=cancelled["data"]["createBooking"]["id"])

    result = gql(client, UPCOMING_BOOKINGS, customerId=customer.id)
    bookings = result["data"]["upcomingBookings"]

    assert [b["id"] for b in bookings] == [
        sooner["data"]["createBooking"]["id"],
        later["data"]["createBooking"]["id"],
    ]
    assert bookings[0]["checkInDate"] == "2025-06-01"
    assert bookings[0]["checkOutDate"] == "2025-06-04"
    assert bookings[1]["specialRequests"] == "Crib"
    assert bookings[0]["room"]["roomNumber"] == "101"
    assert bookings[0]["room"]["hotel"]["name"] == "Grand Pacific Resort"
    assert bookings[0]["customer"] == {"firstName": "Test", "lastName": "Guest", "email": "john.doe@example.com"}

    # Stays that already started drop out of the upcoming list
    clock.today = date(2025, 6, 2)
    result = gql(client, UPCOMING_BOOKINGS, customerId=customer.id)
    assert [b["checkInDate"] for b in result["data"]["upcomingBookings"]] == ["2025-07-01"]


def test_booking_and_customer_lookups(client, room, customer):
    booking_id = create(client, room, customer, "2025-06-01", "2025-06-04")["data"]["createBooking"]["id"]

    result = gql(
        client,
        """
        query Lookups($id: String!, $customerId: String!, $email: String!) {
          booking(id: $id) { id status customer { email } }
          bookingsByCustomer(customerId: $customerId) { id }
          customer(id: $customerId) { firstName }
          customerByEmail(email: $email) { id }
        }
        """,
        id=booking_id,
        customerId=customer.id,
        email="JOHN.DOE@example.com",
    )

    data = result["data"]
    assert data["booking"]["status"] == "CONFIRMED"
    assert data["booking"]["customer"]["email"] == "john.doe@example.com"
    assert data["bookingsByCustomer"] == [{"id": booking_id}]
    assert data["customer"] == {"firstName": "Test"}
    assert data["customerByEmail"] == {"id": customer.id}


def test_storage_outage_is_retryable(index, catalog, clock, queries, room, customer):
    service = BookingService(FailingInsertRepository(), index, catalog, clock=clock)
    outage_client = TestClient(create_app(service, queries))

    result = create(outage_client, room, customer, "2025-06-01", "2025-06-04")

    assert result["data"] is None
    extensions = result["errors"][0]["extensions"]
    assert extensions["code"] == "UNAVAILABLE"
    assert extensions["retryable"] is True
    assert index.reservations(room.id) == []


def test_mutation_waiting_on_room_lock_does_not_block_queries(service, queries, index, room, customer):
    lock_held = threading.Event()
    release = threading.Event()
    outcome = {}

    def hold_room():
        with index.locked(room.id):
            lock_held.set()
            release.wait(10)

    with TestClient(create_app(service, queries)) as shared_client:
        holder = threading.Thread(target=hold_room)
        holder.start()
        assert lock_held.wait(5)

        booker = threading.Thread(
            target=lambda: outcome.update(
                booking=create(shared_client, room, customer, "2025-06-01", "2025-06-04")
            )
        )
        booker.start()
        time.sleep(0.2)

        reader = threading.Thread(
            target=lambda: outcome.update(hotels=gql(shared_client, "{ hotels { id } }"))
        )
        reader.start()
        reader.join(5)
        assert not reader.is_alive()
        assert outcome["hotels"]["data"]["hotels"] == [{"id": room.hotel_id}]
        assert "booking" not in outcome

        release.set()
        holder.join(5)
        booker.join(5)

    assert outcome["booking"]["data"]["createBooking"]["status"] == "CONFIRMED"

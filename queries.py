from __future__ import annotations

from datetime import date
from typing import Callable, List, Optional

from catalog import InMemoryCatalog
from errors import NotFoundError
from models import Booking, Customer, Hotel, Room
from repository import InMemoryBookingRepository


class BookingQueries:
    """Read-only projections over the catalog and the booking repository."""

    def __init__(
        self,
        catalog: InMemoryCatalog,
        repo: InMemoryBookingRepository,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._catalog = catalog
        self._repo = repo
        self._clock = clock

    def hotels(self) -> List[Hotel]:
        return self._catalog.list_hotels()

    def hotel(self, hotel_id: str) -> Optional[Hotel]:
        return self._catalog.get_hotel(hotel_id)

    def room(self, room_id: str) -> Optional[Room]:
        return self._catalog.get_room(room_id)

    def rooms_by_hotel(self, hotel_id: str) -> List[Room]:
        if self._catalog.get_hotel(hotel_id) is None:
            raise NotFoundError("Hotel not found.", details={"hotel_id": hotel_id})
        return self._catalog.rooms_by_hotel(hotel_id)

    def bookings_by_room(self, room_id: str) -> List[Booking]:
        if self._catalog.get_room(room_id) is None:
            raise NotFoundError("Room not found.", details={"room_id": room_id})
        return self._repo.find_by_room(room_id)

    def booking(self, booking_id: str) -> Optional[Booking]:
        return self._repo.get(booking_id)

    def bookings_by_customer(self, customer_id: str) -> List[Booking]:
        return self._repo.find_by_customer(customer_id)

    def upcoming_bookings(self, customer_id: str, as_of: Optional[date] = None) -> List[Booking]:
        return self._repo.find_upcoming(customer_id, as_of or self._clock())

    def customer(self, customer_id: str) -> Optional[Customer]:
        return self._catalog.get_customer(customer_id)

    def customer_by_email(self, email: str) -> Optional[Customer]:
        return self._catalog.customer_by_email(email)

from __future__ import annotations

from datetime import date
from threading import Lock
from typing import Dict, List, Optional

from errors import ConflictError, NotFoundError
from models import ACTIVE_STATUSES, Booking, BookingStatus


class InMemoryBookingRepository:
    """
    Keyed booking store. Records are replaced on status changes and are
    never deleted. A durable backend raises ``UnavailableError`` when storage
    cannot be reached.
    """

    def __init__(self) -> None:
        self._items: Dict[str, Booking] = {}
        self._lock = Lock()

    def get(self, booking_id: str) -> Optional[Booking]:
        with self._lock:
            return self._items.get(booking_id)

    def get_all(self) -> List[Booking]:
        with self._lock:
            return list(self._items.values())

    def find_by_room(self, room_id: str) -> List[Booking]:
        with self._lock:
            items = [b for b in self._items.values() if b.room_id == room_id]
        items.sort(key=lambda b: b.check_in_date)
        return items

    def find_by_customer(self, customer_id: str) -> List[Booking]:
        with self._lock:
            items = [b for b in self._items.values() if b.customer_id == customer_id]
        items.sort(key=lambda b: (b.check_in_date, b.created_at))
        return items

    def find_upcoming(self, customer_id: str, as_of: date) -> List[Booking]:
        """Active bookings of a customer checking in on or after ``as_of``, earliest first."""
        with self._lock:
            items = [
                b
                for b in self._items.values()
                if b.customer_id == customer_id
                and b.status in ACTIVE_STATUSES
                and b.check_in_date >= as_of
            ]
        items.sort(key=lambda b: (b.check_in_date, b.created_at))
        return items

    def find_elapsed(self, as_of: date) -> List[Booking]:
        with self._lock:
            return [
                b
                for b in self._items.values()
                if b.status == BookingStatus.CONFIRMED and b.check_out_date <= as_of
            ]

    def insert(self, booking: Booking) -> None:
        with self._lock:
            if booking.id in self._items:
                raise ConflictError(
                    "Booking identifier already exists.", details={"booking_id": booking.id}
                )
            self._items[booking.id] = booking

    def update(self, booking: Booking) -> None:
        with self._lock:
            if booking.id not in self._items:
                raise NotFoundError("Booking not found.", details={"booking_id": booking.id})
            self._items[booking.id] = booking

    def reset(self) -> None:
        """Clear all bookings. For testing only."""
        with self._lock:
            self._items.clear()

from __future__ import annotations

from threading import Lock
from typing import Dict, Iterable, List, Optional

from models import Customer, Hotel, Room


class InMemoryCatalog:
    """Read side of the hotel, room and customer records the booking core depends on."""

    def __init__(self) -> None:
        self._hotels: Dict[str, Hotel] = {}
        self._rooms: Dict[str, Room] = {}
        self._customers: Dict[str, Customer] = {}
        self._lock = Lock()

    def load(
        self,
        hotels: Iterable[Hotel] = (),
        rooms: Iterable[Room] = (),
        customers: Iterable[Customer] = (),
    ) -> None:
        with self._lock:
            for hotel in hotels:
                self._hotels[hotel.id] = hotel
            for room in rooms:
                if not room.price_per_night > 0:
                    raise ValueError(f"room {room.id} must have a positive price per night")
                if room.capacity < 1:
                    raise ValueError(f"room {room.id} must have a capacity of at least 1")
                if room.hotel_id not in self._hotels:
                    raise ValueError(f"room {room.id} references unknown hotel {room.hotel_id}")
                for other in self._rooms.values():
                    if (
                        other.id != room.id
                        and other.hotel_id == room.hotel_id
                        and other.room_number == room.room_number
                    ):
                        raise ValueError(
                            f"room number {room.room_number} is already used in hotel {room.hotel_id}"
                        )
                self._rooms[room.id] = room
            for customer in customers:
                self._customers[customer.id] = customer

    def is_empty(self) -> bool:
        with self._lock:
            return not self._hotels

    def list_hotels(self) -> List[Hotel]:
        with self._lock:
            return sorted(self._hotels.values(), key=lambda h: h.name)

    def get_hotel(self, hotel_id: str) -> Optional[Hotel]:
        with self._lock:
            return self._hotels.get(hotel_id)

    def list_rooms(self) -> List[Room]:
        with self._lock:
            return list(self._rooms.values())

    def get_room(self, room_id: str) -> Optional[Room]:
        with self._lock:
            return self._rooms.get(room_id)

    def rooms_by_hotel(self, hotel_id: str) -> List[Room]:
        with self._lock:
            rooms = [r for r in self._rooms.values() if r.hotel_id == hotel_id]
        rooms.sort(key=lambda r: r.room_number)
        return rooms

    def list_customers(self) -> List[Customer]:
        with self._lock:
            return list(self._customers.values())

    def get_customer(self, customer_id: str) -> Optional[Customer]:
        with self._lock:
            return self._customers.get(customer_id)

    def customer_by_email(self, email: str) -> Optional[Customer]:
        wanted = email.strip().lower()
        with self._lock:
            for customer in self._customers.values():
                if customer.email.lower() == wanted:
                    return customer
        return None

    def reset(self) -> None:
        """Clear all records. For testing only."""
        with self._lock:
            self._hotels.clear()
            self._rooms.clear()
            self._customers.clear()

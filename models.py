from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from errors import ValidationError


# -----------------------------
# Shared date helpers
# -----------------------------
ISO_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


def parse_iso_date(value: str) -> date:
    """
    Parse an ISO-8601 calendar date (YYYY-MM-DD) without a time component.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Validation error: date must be a non-empty string.")

    s = value.strip()
    message = f"Validation error: '{s}' is not an ISO calendar date (YYYY-MM-DD)."
    # fromisoformat also takes week dates and the compact form on 3.11+
    if not ISO_DATE_RE.fullmatch(s):
        raise ValidationError(message)
    try:
        return date.fromisoformat(s)
    except ValueError:
        raise ValidationError(message) from None


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def intervals_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """
    Half-open interval overlap: [start, end)
    Overlap iff a_start < b_end AND b_start < a_end.
    Back-to-back is allowed (check-out day == other check-in day is NOT overlap).
    """
    return a_start < b_end and b_start < a_end


# -----------------------------
# Domain model
# -----------------------------
class BookingStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


ACTIVE_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})


class RoomType(str, Enum):
    STANDARD = "STANDARD"
    DELUXE = "DELUXE"
    SUITE = "SUITE"
    EXECUTIVE_SUITE = "EXECUTIVE_SUITE"


@dataclass(frozen=True, order=True)
class StayRange:
    check_in: date
    check_out: date

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    def overlaps(self, other: "StayRange") -> bool:
        return intervals_overlap(self.check_in, self.check_out, other.check_in, other.check_out)


@dataclass(frozen=True)
class Hotel:
    id: str
    name: str
    address: str
    city: str
    country: str
    star_rating: int
    description: str = ""
    state: Optional[str] = None
    zip_code: Optional[str] = None
    phone: Optional[str] = None


@dataclass(frozen=True)
class Room:
    id: str
    hotel_id: str
    room_number: str
    room_type: RoomType
    price_per_night: Decimal
    capacity: int
    description: str = ""
    amenities: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Customer:
    id: str
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None


@dataclass(frozen=True)
class Booking:
    id: str
    room_id: str
    customer_id: str
    check_in_date: date
    check_out_date: date
    number_of_guests: int
    total_price: Decimal
    status: BookingStatus
    special_requests: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)

    @property
    def stay(self) -> StayRange:
        return StayRange(self.check_in_date, self.check_out_date)

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES


# -----------------------------
# API models (transport layer)
# -----------------------------
class CreateBookingIn(BaseModel):
    room_id: str = Field(..., min_length=1)
    customer_id: str = Field(..., min_length=1)
    check_in_date: str
    check_out_date: str
    number_of_guests: int
    special_requests: Optional[str] = None

    @field_validator("check_in_date", "check_out_date")
    @classmethod
    def must_be_iso_date(cls, v: str) -> str:
        # Validate format early; date rules are checked in the service.
        parse_iso_date(v)
        return v.strip()


class BookingOut(BaseModel):
    id: str
    room_id: str
    customer_id: str
    check_in_date: date
    check_out_date: date
    number_of_guests: int
    total_price: Decimal
    status: BookingStatus
    special_requests: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingOut":
        return cls(
            id=booking.id,
            room_id=booking.room_id,
            customer_id=booking.customer_id,
            check_in_date=booking.check_in_date,
            check_out_date=booking.check_out_date,
            number_of_guests=booking.number_of_guests,
            total_price=booking.total_price,
            status=booking.status,
            special_requests=booking.special_requests,
            created_at=booking.created_at,
        )


class CancelBookingOut(BaseModel):
    id: str
    status: BookingStatus


class HotelOut(BaseModel):
    id: str
    name: str
    address: str
    city: str
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: str
    phone: Optional[str] = None
    star_rating: int
    description: str

    @classmethod
    def from_hotel(cls, hotel: Hotel) -> "HotelOut":
        return cls(
            id=hotel.id,
            name=hotel.name,
            address=hotel.address,
            city=hotel.city,
            state=hotel.state,
            zip_code=hotel.zip_code,
            country=hotel.country,
            phone=hotel.phone,
            star_rating=hotel.star_rating,
            description=hotel.description,
        )


class RoomOut(BaseModel):
    id: str
    hotel_id: str
    room_number: str
    room_type: RoomType
    price_per_night: Decimal
    capacity: int
    description: str
    amenities: List[str]

    @classmethod
    def from_room(cls, room: Room) -> "RoomOut":
        return cls(
            id=room.id,
            hotel_id=room.hotel_id,
            room_number=room.room_number,
            room_type=room.room_type,
            price_per_night=room.price_per_night,
            capacity=room.capacity,
            description=room.description,
            amenities=list(room.amenities),
        )

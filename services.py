from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple
from uuid import uuid4

from availability import AvailabilityIndex
from catalog import InMemoryCatalog
from errors import InvalidTransitionError, NotFoundError, ValidationError
from models import (
    Booking,
    BookingStatus,
    CreateBookingIn,
    Room,
    StayRange,
    parse_iso_date,
)
from pricing import quote
from repository import InMemoryBookingRepository

logger = logging.getLogger(__name__)

Clock = Callable[[], date]

ALLOWED_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.CANCELLED, BookingStatus.COMPLETED}),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.COMPLETED: frozenset(),
}


def ensure_transition(current: BookingStatus, target: BookingStatus) -> None:
    if target not in ALLOWED_TRANSITIONS[current]:
        raise InvalidTransitionError(
            f"Invalid transition: booking is {current.value} and cannot become {target.value}.",
            details={"from": current.value, "to": target.value},
        )


def new_booking_id() -> str:
    return f"bkg_{uuid4().hex}"


class BookingService:
    def __init__(
        self,
        repo: InMemoryBookingRepository,
        index: AvailabilityIndex,
        catalog: InMemoryCatalog,
        clock: Clock = date.today,
    ) -> None:
        self._repo = repo
        self._index = index
        self._catalog = catalog
        self._clock = clock

    def today(self) -> date:
        return self._clock()

    def create_booking(self, payload: CreateBookingIn) -> Booking:
        try:
            room, stay = self._check_request(payload)
        except (NotFoundError, ValidationError) as exc:
            logger.warning("Rejected booking for room %s: %s", payload.room_id, exc.message)
            raise

        total_price = quote(room, stay)

        pending = Booking(
            id=new_booking_id(),
            room_id=room.id,
            customer_id=payload.customer_id,
            check_in_date=stay.check_in,
            check_out_date=stay.check_out,
            number_of_guests=payload.number_of_guests,
            total_price=total_price,
            status=BookingStatus.PENDING,
            special_requests=payload.special_requests,
        )
        # No confirmation gate (payment etc.) yet: confirm as soon as it is priced.
        ensure_transition(pending.status, BookingStatus.CONFIRMED)
        booking = replace(pending, status=BookingStatus.CONFIRMED)

        # Reserve and persist under the room lock; a failed write gives the range back.
        with self._index.locked(room.id):
            self._index.reserve(room.id, stay)
            try:
                self._repo.insert(booking)
            except Exception:
                self._index.release(room.id, stay)
                logger.exception("Persisting booking %s failed, released room %s", booking.id, room.id)
                raise

        logger.info(
            "Booking %s confirmed: room %s, %s..%s, total %s",
            booking.id, room.id, stay.check_in, stay.check_out, total_price,
        )
        return booking

    def _check_request(self, payload: CreateBookingIn) -> Tuple[Room, StayRange]:
        room = self._catalog.get_room(payload.room_id)
        if room is None:
            raise NotFoundError("Room not found.", details={"room_id": payload.room_id})
        if self._catalog.get_customer(payload.customer_id) is None:
            raise NotFoundError("Customer not found.", details={"customer_id": payload.customer_id})

        check_in = parse_iso_date(payload.check_in_date)
        check_out = parse_iso_date(payload.check_out_date)

        # Rule: check-in must be before check-out
        if not (check_in < check_out):
            raise ValidationError("Validation error: check-in date must be before check-out date.")

        # Rule: stays cannot start in the past (check-in >= today)
        if check_in < self._clock():
            raise ValidationError("Validation error: check-in date cannot be in the past.")

        # Rule: 1 <= guests <= capacity
        if not (1 <= payload.number_of_guests <= room.capacity):
            raise ValidationError(
                f"Validation error: number of guests must be between 1 and {room.capacity}.",
                details={"capacity": room.capacity, "number_of_guests": payload.number_of_guests},
            )

        return room, StayRange(check_in, check_out)

    def cancel_booking(self, booking_id: str) -> Booking:
        try:
            return self._cancel(booking_id)
        except (NotFoundError, InvalidTransitionError) as exc:
            logger.warning("Rejected cancellation of booking %s: %s", booking_id, exc.message)
            raise

    def _cancel(self, booking_id: str) -> Booking:
        booking = self._repo.get(booking_id)
        if booking is None:
            raise NotFoundError("Booking not found.", details={"booking_id": booking_id})

        with self._index.locked(booking.room_id):
            # Re-read under the lock so concurrent cancellations see each other.
            booking = self._repo.get(booking_id)
            if booking is None:
                raise NotFoundError("Booking not found.", details={"booking_id": booking_id})

            ensure_transition(booking.status, BookingStatus.CANCELLED)
            if not (booking.check_in_date > self._clock()):
                raise InvalidTransitionError(
                    "Invalid transition: only bookings with a future check-in date can be cancelled.",
                    details={"booking_id": booking_id},
                )

            cancelled = replace(booking, status=BookingStatus.CANCELLED)
            self._repo.update(cancelled)
            self._index.release(booking.room_id, booking.stay)

        logger.info("Booking %s cancelled, room %s released", booking_id, booking.room_id)
        return cancelled

    def complete_elapsed_bookings(self, as_of: Optional[date] = None) -> List[Booking]:
        """Move CONFIRMED bookings whose check-out date has been reached to COMPLETED."""
        as_of = as_of or self._clock()
        completed: List[Booking] = []
        for candidate in self._repo.find_elapsed(as_of):
            with self._index.locked(candidate.room_id):
                booking = self._repo.get(candidate.id)
                if booking is None or booking.status != BookingStatus.CONFIRMED:
                    continue
                ensure_transition(booking.status, BookingStatus.COMPLETED)
                done = replace(booking, status=BookingStatus.COMPLETED)
                self._repo.update(done)
                self._index.release(booking.room_id, booking.stay)
            completed.append(done)

        if completed:
            logger.info("Completed %d elapsed bookings as of %s", len(completed), as_of)
        return completed

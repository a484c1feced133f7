from __future__ import annotations

import logging
from contextlib import contextmanager
from threading import Lock, RLock
from typing import Dict, Iterable, Iterator, List

from errors import ConflictError
from models import Booking, StayRange

logger = logging.getLogger(__name__)


class AvailabilityIndex:
    """
    Per-room record of the date ranges held by active bookings.

    Every room has its own re-entrant lock. ``reserve`` checks for overlap and
    inserts under that lock, and callers that must pair a reservation with a
    repository write hold ``locked(room_id)`` around both.
    """

    def __init__(self) -> None:
        self._ranges: Dict[str, List[StayRange]] = {}
        self._room_locks: Dict[str, RLock] = {}
        self._guard = Lock()

    def _lock_for(self, room_id: str) -> RLock:
        with self._guard:
            lock = self._room_locks.get(room_id)
            if lock is None:
                lock = RLock()
                self._room_locks[room_id] = lock
            return lock

    @contextmanager
    def locked(self, room_id: str) -> Iterator[None]:
        with self._lock_for(room_id):
            yield

    def is_free(self, room_id: str, stay: StayRange) -> bool:
        with self.locked(room_id):
            return not any(stay.overlaps(held) for held in self._ranges.get(room_id, []))

    def reserve(self, room_id: str, stay: StayRange) -> None:
        with self.locked(room_id):
            held = self._ranges.setdefault(room_id, [])
            for existing in held:
                if stay.overlaps(existing):
                    logger.warning(
                        "Room %s already held %s..%s, rejecting %s..%s",
                        room_id, existing.check_in, existing.check_out, stay.check_in, stay.check_out,
                    )
                    raise ConflictError(
                        "Overlap conflict: booking overlaps an existing booking in this room.",
                        details={"room_id": room_id},
                    )
            held.append(stay)
            held.sort()

    def release(self, room_id: str, stay: StayRange) -> bool:
        """Remove a held range. Releasing a range that is not held is a no-op."""
        with self.locked(room_id):
            held = self._ranges.get(room_id, [])
            if stay not in held:
                return False
            held.remove(stay)
            return True

    def reservations(self, room_id: str) -> List[StayRange]:
        with self.locked(room_id):
            return list(self._ranges.get(room_id, []))

    def rebuild(self, bookings: Iterable[Booking]) -> int:
        """Repopulate the index from the active bookings in ``bookings``."""
        count = 0
        with self._guard:
            self._ranges.clear()
        for booking in bookings:
            if not booking.is_active:
                continue
            self.reserve(booking.room_id, booking.stay)
            count += 1
        logger.info("Availability index rebuilt with %d active reservations", count)
        return count

    def reset(self) -> None:
        """Clear all reservations. For testing only."""
        with self._guard:
            self._ranges.clear()

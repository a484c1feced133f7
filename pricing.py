from __future__ import annotations

from decimal import Decimal

from errors import InvalidRangeError
from models import Room, StayRange


def quote(room: Room, stay: StayRange) -> Decimal:
    """Total price for ``room`` over ``stay``: price per night times nights, unrounded."""
    nights = stay.nights
    if nights < 1:
        raise InvalidRangeError(
            "Validation error: a stay must be at least one night.",
            details={"nights": nights},
        )
    return Decimal(room.price_per_night) * nights

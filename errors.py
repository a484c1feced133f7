from __future__ import annotations

from typing import Any, Dict, Optional


class BookingError(Exception):
    """Base class for domain/service errors."""

    code = "BOOKING_ERROR"
    status_code = 400
    retryable = False

    def __init__(self, message: str = "", details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message or self.__class__.__doc__ or self.code)
        self.message = message or (self.__class__.__doc__ or self.code).strip()
        self.details = details or {}

    @property
    def extensions(self) -> Dict[str, Any]:
        # Picked up by graphql-core when the error is wrapped in a GraphQLError.
        payload: Dict[str, Any] = {"code": self.code}
        if self.retryable:
            payload["retryable"] = True
        if self.details:
            payload["details"] = self.details
        return payload

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.details:
            payload["details"] = self.details
        if self.retryable:
            payload["retryable"] = True
        return payload


class ValidationError(BookingError, ValueError):
    """Validation error: request is malformed or contradictory."""

    code = "VALIDATION_ERROR"
    status_code = 422


class InvalidRangeError(ValidationError):
    """Validation error: check-out must be after check-in."""


class NotFoundError(BookingError):
    """Resource not found."""

    code = "NOT_FOUND"
    status_code = 404


class ConflictError(BookingError):
    """Overlap conflict: room is already booked for the selected dates."""

    code = "CONFLICT"
    status_code = 409


class InvalidTransitionError(BookingError):
    """Booking cannot change to the requested status."""

    code = "INVALID_TRANSITION"
    status_code = 409


class UnavailableError(BookingError):
    """Booking storage is temporarily unavailable."""

    code = "UNAVAILABLE"
    status_code = 503
    retryable = True

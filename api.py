from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, FastAPI, Path, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from errors import BookingError, NotFoundError, ValidationError
from models import BookingOut, CancelBookingOut, CreateBookingIn, HotelOut, RoomOut
from queries import BookingQueries
from services import BookingService

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(BookingError)
    async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [
            {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", ""), "type": err.get("type", "")}
            for err in exc.errors()
        ]
        message = errors[0]["msg"] if errors else "Request validation failed"
        # pydantic prefixes errors raised from validators with "Value error, "
        message = message.split("Value error, ", 1)[-1]
        logger.warning("%s %s rejected: %s", request.method, request.url.path, message)
        error = ValidationError(message, details={"errors": errors})
        return JSONResponse(status_code=error.status_code, content=error.to_dict())


def create_router(service: BookingService, queries: BookingQueries) -> APIRouter:
    router = APIRouter()

    @router.get("/health")
    def health() -> dict:
        return {"ok": True, "status": "healthy"}

    @router.post("/bookings", response_model=BookingOut, status_code=status.HTTP_201_CREATED)
    def create_booking(payload: CreateBookingIn) -> BookingOut:
        return BookingOut.from_booking(service.create_booking(payload))

    @router.post("/bookings/{booking_id}/cancel", response_model=CancelBookingOut)
    def cancel_booking(booking_id: str = Path(..., min_length=1)) -> CancelBookingOut:
        booking = service.cancel_booking(booking_id)
        return CancelBookingOut(id=booking.id, status=booking.status)

    @router.get("/bookings/{booking_id}", response_model=BookingOut)
    def get_booking(booking_id: str = Path(..., min_length=1)) -> BookingOut:
        booking = queries.booking(booking_id)
        if booking is None:
            raise NotFoundError("Booking not found.", details={"booking_id": booking_id})
        return BookingOut.from_booking(booking)

    @router.get("/customers/{customer_id}/bookings/upcoming", response_model=List[BookingOut])
    def upcoming_bookings(customer_id: str = Path(..., min_length=1)) -> List[BookingOut]:
        return [BookingOut.from_booking(b) for b in queries.upcoming_bookings(customer_id)]

    @router.get("/hotels", response_model=List[HotelOut])
    def list_hotels() -> List[HotelOut]:
        return [HotelOut.from_hotel(h) for h in queries.hotels()]

    @router.get("/hotels/{hotel_id}", response_model=HotelOut)
    def get_hotel(hotel_id: str = Path(..., min_length=1)) -> HotelOut:
        hotel = queries.hotel(hotel_id)
        if hotel is None:
            raise NotFoundError("Hotel not found.", details={"hotel_id": hotel_id})
        return HotelOut.from_hotel(hotel)

    @router.get("/hotels/{hotel_id}/rooms", response_model=List[RoomOut])
    def rooms_by_hotel(hotel_id: str = Path(..., min_length=1)) -> List[RoomOut]:
        return [RoomOut.from_room(r) for r in queries.rooms_by_hotel(hotel_id)]

    @router.get("/rooms/{room_id}/bookings", response_model=List[BookingOut])
    def list_bookings_for_room(room_id: str = Path(..., min_length=1)) -> List[BookingOut]:
        return [BookingOut.from_booking(b) for b in queries.bookings_by_room(room_id)]

    return router

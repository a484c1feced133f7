"""
GraphQL schema for the booking service.

Field names follow the web client's queries (camelCase on the wire). Dates
travel as ISO calendar-date strings and identifiers as opaque strings.
"""
import asyncio
import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

import pydantic
import strawberry
from strawberry.fastapi import GraphQLRouter
from strawberry.types import Info

import config
from errors import BookingError, ValidationError
from models import Booking, BookingStatus, CreateBookingIn, Customer, Hotel, Room, RoomType
from queries import BookingQueries
from services import BookingService

logger = logging.getLogger(__name__)

BookingStatusEnum = strawberry.enum(BookingStatus, name="BookingStatus")
RoomTypeEnum = strawberry.enum(RoomType, name="RoomType")


# Types
@strawberry.type(name="Customer")
class CustomerNode:
    id: str
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None

    @classmethod
    def from_domain(cls, customer: Customer) -> "CustomerNode":
        return cls(
            id=customer.id,
            first_name=customer.first_name,
            last_name=customer.last_name,
            email=customer.email,
            phone=customer.phone,
        )


@strawberry.type(name="Room")
class RoomNode:
    id: str
    hotel_id: str
    room_number: str
    room_type: RoomTypeEnum
    price_per_night: Decimal
    capacity: int
    description: str
    amenities: List[str]

    @strawberry.field
    def hotel(self, info: Info) -> Optional["HotelNode"]:
        hotel = info.context["queries"].hotel(self.hotel_id)
        return HotelNode.from_domain(hotel) if hotel else None

    @classmethod
    def from_domain(cls, room: Room) -> "RoomNode":
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


@strawberry.type(name="Hotel")
class HotelNode:
    id: str
    name: str
    address: str
    city: str
    state: Optional[str]
    zip_code: Optional[str]
    country: str
    phone: Optional[str]
    star_rating: int
    description: str

    @strawberry.field
    def rooms(self, info: Info) -> List[RoomNode]:
        """Rooms of this hotel, ordered by room number"""
        return [RoomNode.from_domain(r) for r in info.context["queries"].rooms_by_hotel(self.id)]

    @classmethod
    def from_domain(cls, hotel: Hotel) -> "HotelNode":
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


@strawberry.type(name="Booking")
class BookingNode:
    id: str
    room_id: str
    customer_id: str
    check_in_date: str
    check_out_date: str
    number_of_guests: int
    total_price: Decimal
    status: BookingStatusEnum
    special_requests: Optional[str]
    created_at: datetime

    @strawberry.field
    def room(self, info: Info) -> Optional[RoomNode]:
        room = info.context["queries"].room(self.room_id)
        return RoomNode.from_domain(room) if room else None

    @strawberry.field
    def customer(self, info: Info) -> Optional[CustomerNode]:
        customer = info.context["queries"].customer(self.customer_id)
        return CustomerNode.from_domain(customer) if customer else None

    @classmethod
    def from_domain(cls, booking: Booking) -> "BookingNode":
        return cls(
            id=booking.id,
            room_id=booking.room_id,
            customer_id=booking.customer_id,
            check_in_date=booking.check_in_date.isoformat(),
            check_out_date=booking.check_out_date.isoformat(),
            number_of_guests=booking.number_of_guests,
            total_price=booking.total_price,
            status=booking.status,
            special_requests=booking.special_requests,
            created_at=booking.created_at,
        )


# Queries
@strawberry.type
class Query:
    @strawberry.field(description="Get all hotels")
    def hotels(self, info: Info) -> List[HotelNode]:
        return [HotelNode.from_domain(h) for h in info.context["queries"].hotels()]

    @strawberry.field(description="Get a hotel by ID")
    def hotel(self, info: Info, id: str) -> Optional[HotelNode]:
        hotel = info.context["queries"].hotel(id)
        return HotelNode.from_domain(hotel) if hotel else None

    @strawberry.field(description="Get a room by ID")
    def room(self, info: Info, id: str) -> Optional[RoomNode]:
        room = info.context["queries"].room(id)
        return RoomNode.from_domain(room) if room else None

    @strawberry.field(description="Get all rooms for a specific hotel")
    def rooms_by_hotel(self, info: Info, hotel_id: str) -> List[RoomNode]:
        return [RoomNode.from_domain(r) for r in info.context["queries"].rooms_by_hotel(hotel_id)]

    @strawberry.field(description="Get a booking by ID")
    def booking(self, info: Info, id: str) -> Optional[BookingNode]:
        booking = info.context["queries"].booking(id)
        return BookingNode.from_domain(booking) if booking else None

    @strawberry.field(description="Get all bookings for a customer")
    def bookings_by_customer(self, info: Info, customer_id: str) -> List[BookingNode]:
        return [
            BookingNode.from_domain(b) for b in info.context["queries"].bookings_by_customer(customer_id)
        ]

    @strawberry.field(description="Get a customer's active bookings from today on, earliest first")
    def upcoming_bookings(self, info: Info, customer_id: str) -> List[BookingNode]:
        return [
            BookingNode.from_domain(b) for b in info.context["queries"].upcoming_bookings(customer_id)
        ]

    @strawberry.field(description="Get a customer by ID")
    def customer(self, info: Info, id: str) -> Optional[CustomerNode]:
        customer = info.context["queries"].customer(id)
        return CustomerNode.from_domain(customer) if customer else None

    @strawberry.field(description="Get a customer by email")
    def customer_by_email(self, info: Info, email: str) -> Optional[CustomerNode]:
        customer = info.context["queries"].customer_by_email(email)
        return CustomerNode.from_domain(customer) if customer else None


# Mutations (service calls can wait on a room lock, so they run off the event loop)
@strawberry.type
class Mutation:
    @strawberry.mutation(description="Create a new booking")
    async def create_booking(
        self,
        info: Info,
        room_id: str,
        customer_id: str,
        check_in_date: str,
        check_out_date: str,
        number_of_guests: int,
        special_requests: Optional[str] = None,
    ) -> BookingNode:
        try:
            payload = CreateBookingIn(
                room_id=room_id,
                customer_id=customer_id,
                check_in_date=check_in_date,
                check_out_date=check_out_date,
                number_of_guests=number_of_guests,
                special_requests=special_requests,
            )
        except pydantic.ValidationError as exc:
            first = exc.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ()))
            raise ValidationError(
                f"Validation error: {field}: {first.get('msg')}", details={"field": field}
            ) from exc

        booking = await asyncio.to_thread(info.context["service"].create_booking, payload)
        return BookingNode.from_domain(booking)

    @strawberry.mutation(description="Cancel an existing booking")
    async def cancel_booking(self, info: Info, booking_id: str) -> BookingNode:
        booking = await asyncio.to_thread(info.context["service"].cancel_booking, booking_id)
        return BookingNode.from_domain(booking)


class BookingSchema(strawberry.Schema):
    def process_errors(self, errors, execution_context=None) -> None:
        unexpected = []
        for error in errors:
            if isinstance(error.original_error, BookingError):
                logger.warning("GraphQL request rejected: %s", error.message)
            else:
                unexpected.append(error)
        if unexpected:
            super().process_errors(unexpected, execution_context)


schema = BookingSchema(query=Query, mutation=Mutation)


def create_graphql_router(service: BookingService, queries: BookingQueries) -> GraphQLRouter:
    async def get_context() -> Dict[str, Any]:
        return {"service": service, "queries": queries}

    return GraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide="graphiql" if config.GRAPHIQL else None,
    )

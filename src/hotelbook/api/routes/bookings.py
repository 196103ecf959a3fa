"""Booking endpoints.

GET  /bookings/available?start_date=&end_date=&number_of_guests=
POST /bookings
GET  /bookings/{reference}
"""

from __future__ import annotations

import re
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from hotelbook.api.routes.hotels import hotel_to_dict
from hotelbook.domain.availability import InvalidRangeError, get_available_hotel_rooms
from hotelbook.domain.booking_lookup import BookingNotFoundError, get_booking_by_reference
from hotelbook.domain.bookings import create_booking, is_conflict
from hotelbook.domain.models import (
    BookingRequest,
    BookingResult,
    CustomerDetails,
    RoomLine,
)
from hotelbook.domain.validation import (
    BookingValidationError,
    check_date_order,
    check_future_date,
    check_guest_capacity,
)
from hotelbook.infra.time import Clock, get_clock
from hotelbook.observability.logging import get_logger
from hotelbook.observability.redaction import mask_email, safe_log_context

logger = get_logger(__name__)

router = APIRouter(prefix="/bookings", tags=["bookings"])

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_PHONE_RE = re.compile(r"^\+?[0-9\s\-\(\)]{7,}$")


# ── Schemas ───────────────────────────────────────────────────────────────────


class CustomerIn(BaseModel):
    first_name: str = ""
    last_name: str = ""
    address: str = ""
    email: str
    phone: str

    @field_validator("email")
    @classmethod
    def _valid_email(cls, value: str) -> str:
        if not _EMAIL_RE.match(value):
            raise ValueError("Invalid email address.")
        return value

    @field_validator("phone")
    @classmethod
    def _valid_phone(cls, value: str) -> str:
        if not _PHONE_RE.match(value):
            raise ValueError("Invalid phone number format.")
        return value

    def to_details(self) -> CustomerDetails:
        return CustomerDetails(
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            phone=self.phone,
            address=self.address,
        )


class RoomLineIn(BaseModel):
    """A requested room. Descriptive fields echoed from search results are ignored."""

    model_config = ConfigDict(extra="ignore")

    room_number: int
    capacity: int = 0
    guests: list[CustomerIn] | None = None

    @model_validator(mode="after")
    def _guests_fit(self) -> RoomLineIn:
        check_guest_capacity(None if self.guests is None else len(self.guests), self.capacity)
        return self


class BookingRequestIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    customer: CustomerIn
    hotel_name: str
    rooms: list[RoomLineIn]
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def _dates_ordered(self) -> BookingRequestIn:
        check_date_order(self.start_date, self.end_date)
        return self

    def to_request(self) -> BookingRequest:
        return BookingRequest(
            customer=self.customer.to_details(),
            hotel_name=self.hotel_name,
            start_date=self.start_date,
            end_date=self.end_date,
            rooms=tuple(
                RoomLine(
                    room_number=line.room_number,
                    guests=tuple(guest.to_details() for guest in line.guests or ()),
                )
                for line in self.rooms
            ),
        )


# ── Helpers ───────────────────────────────────────────────────────────────────


def _booking_to_dict(result: BookingResult) -> dict:
    return {
        "booking_reference": result.reference,
        "customer_name": result.customer_name,
        "total_price": float(result.total_price),
        "room_bookings": [
            {
                "hotel_name": stay.hotel_name,
                "room_number": stay.room_number,
                "start_date": stay.start_date.isoformat(),
                "end_date": stay.end_date.isoformat(),
                "guests": list(stay.guests),
            }
            for stay in result.room_stays
        ],
    }


# ── GET /bookings/available ───────────────────────────────────────────────────


@router.get("/available")
def available_hotel_rooms(
    start_date: date = Query(...),
    end_date: date = Query(...),
    number_of_guests: int = Query(1, ge=0),
) -> list[dict]:
    """Hotels with enough free rooms for number_of_guests over the dates.

    Returns:
        200 with hotels (only their available rooms listed).
        422 if start_date is not before end_date.
    """
    try:
        hotels = get_available_hotel_rooms(start_date, end_date, number_of_guests)
    except InvalidRangeError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    return [hotel_to_dict(hotel) for hotel in hotels]


# ── POST /bookings ────────────────────────────────────────────────────────────


@router.post("")
def book_rooms(body: BookingRequestIn, clock: Clock = Depends(get_clock)) -> dict:
    """Create a booking.

    Returns:
        200 with the booking (reference, price, stays).
        404 if the hotel or one of the rooms does not exist.
        409 if one of the rooms is not available for the dates.
        422 if the request is malformed or starts in the past.
    """
    try:
        check_future_date(body.start_date, clock.today())
    except BookingValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.message)

    result, message = create_booking(body.to_request())

    if result is None:
        status_code = 409 if is_conflict(message) else 404
        logger.info(
            "booking request refused",
            extra={
                "extra_fields": {
                    "status_code": status_code,
                    "booker": mask_email(body.customer.email),
                    **safe_log_context(reason=message, booker_phone=body.customer.phone),
                }
            },
        )
        raise HTTPException(status_code=status_code, detail=message)

    return _booking_to_dict(result)


# ── GET /bookings/{reference} ─────────────────────────────────────────────────


@router.get("/{reference}")
def find_booking(reference: str = Path(..., description="Booking reference")) -> dict:
    """Look up a booking by its reference.

    Returns:
        200 with the booking.
        404 if no booking carries the reference.
    """
    try:
        result = get_booking_by_reference(reference)
    except BookingNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    return _booking_to_dict(result)

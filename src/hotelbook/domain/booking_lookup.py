"""Booking lookup by public reference.

Rebuilds the customer-facing view of a booking from stored rows. Unlike
create_booking, the customer name here is the one stored on the booker's
customer record.
"""

from __future__ import annotations

from psycopg2.extensions import cursor as PgCursor

from hotelbook.domain.models import BookingResult, StayResult
from hotelbook.infra.db import txn
from hotelbook.infra.repositories.bookings_repository import (
    get_booking_by_reference as fetch_booking,
    list_room_stays,
)
from hotelbook.observability.logging import get_logger

logger = get_logger(__name__)


class BookingNotFoundError(Exception):
    """Raised when no booking carries the given reference."""

    def __init__(self, reference: str | None) -> None:
        self.reference = reference
        super().__init__(f"Booking not found: {reference}")


def _lookup(cur: PgCursor, reference: str) -> BookingResult:
    booking = fetch_booking(cur, reference)
    if booking is None:
        logger.warning("booking not found", extra={"extra_fields": {"reference": reference}})
        raise BookingNotFoundError(reference)

    stays = [
        StayResult(
            hotel_name=stay["hotel_name"],
            room_number=str(stay["room_number"]),
            start_date=stay["start_date"],
            end_date=stay["end_date"],
            guests=list(stay["guests"]),
        )
        for stay in list_room_stays(cur, booking["id"])
    ]

    return BookingResult(
        reference=booking["reference"],
        customer_name=f"{booking['customer_first_name']} {booking['customer_last_name']}",
        total_price=booking["total_price"],
        room_stays=stays,
    )


def get_booking_by_reference(reference: str | None, cur: PgCursor | None = None) -> BookingResult:
    """Return the booking with this exact reference.

    Raises:
        BookingNotFoundError: If reference is empty, None or unknown.
    """
    if not reference:
        raise BookingNotFoundError(reference)

    if cur is not None:
        return _lookup(cur, reference)
    with txn() as c:
        return _lookup(c, reference)

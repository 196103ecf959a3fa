"""Booking creation - transactional multi-room reservation.

Orchestrates a booking inside a single DB transaction:
resolve booker and guests → find hotel → lock rooms → check availability → price →
reference → insert booking, stays and guests.

Business failures (missing hotel or room, room taken) are returned as data:
(None, message). Everything written up to that point is rolled back to a
savepoint, so a failed request leaves no rows behind, not even the booker's
customer record. Infrastructure errors propagate.

Two concurrent bookings of the same room cannot both pass the availability
check: the requested room rows are locked FOR UPDATE before their stays are
read, and the no_room_stay_overlap exclusion constraint rejects whatever
slips past the lock.
"""

from __future__ import annotations

from decimal import Decimal

from psycopg2 import errors as pg_errors
from psycopg2.extensions import cursor as PgCursor

from hotelbook.domain.models import (
    BookingRequest,
    BookingResult,
    Room,
    RoomKey,
    StayResult,
    nights_occupied,
)
from hotelbook.domain.overlap import DateInterval, first_overlap
from hotelbook.domain.references import new_reference
from hotelbook.domain.validation import check_date_order
from hotelbook.infra.db import savepoint, txn
from hotelbook.infra.repositories.bookings_repository import (
    insert_booking,
    insert_room_stay,
    insert_stay_guest,
    reference_exists,
)
from hotelbook.infra.repositories.customers_repository import resolve_customer
from hotelbook.infra.repositories.hotels_repository import get_hotel_by_name, lock_rooms
from hotelbook.infra.settings import ReferenceSettings
from hotelbook.observability.logging import get_logger

logger = get_logger(__name__)

BOOKING_COMPLETE = "Booking Complete"
HOTEL_NOT_FOUND = "Hotel not found"
ROOM_NOT_FOUND = "Room not found"
ROOM_NOT_AVAILABLE = "Room not available"


class _BookingRejected(Exception):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def _hotel_not_found(hotel_name: str) -> _BookingRejected:
    return _BookingRejected(f"{HOTEL_NOT_FOUND}: {hotel_name}")


def _room_not_found(hotel_name: str, room_number: int) -> _BookingRejected:
    return _BookingRejected(f"{ROOM_NOT_FOUND}: Hotel '{hotel_name}', Room Number '{room_number}'")


def _room_not_available(hotel_name: str, room_number: int) -> _BookingRejected:
    return _BookingRejected(
        f"{ROOM_NOT_AVAILABLE}: Hotel '{hotel_name}', Room Number '{room_number}'"
    )


def is_conflict(message: str) -> bool:
    """True if a create_booking failure message reports a room already taken."""
    return message.startswith(ROOM_NOT_AVAILABLE)


def _claim_rooms(
    cur: PgCursor,
    request: BookingRequest,
    hotel_id: int,
    requested: DateInterval,
) -> list[Room]:
    """Lock and check every requested room before anything is written.

    Returns:
        The Room for each request line, in request order.
    """
    index = lock_rooms(cur, hotel_id, [line.room_number for line in request.rooms])

    claimed: list[Room] = []
    seen: set[RoomKey] = set()
    for line in request.rooms:
        key = RoomKey(hotel_id, line.room_number)
        room = index.get(key)
        if room is None:
            raise _room_not_found(request.hotel_name, line.room_number)
        # A room listed twice would overlap its own first stay.
        if key in seen or first_overlap(room.stays, requested) is not None:
            raise _room_not_available(request.hotel_name, line.room_number)
        seen.add(key)
        claimed.append(room)
    return claimed


def _book(
    cur: PgCursor,
    request: BookingRequest,
    reference_settings: ReferenceSettings | None,
) -> BookingResult:
    booker = resolve_customer(cur, request.customer)
    # Every customer insert happens before the first room row lock.
    guest_ids = [[resolve_customer(cur, guest).id for guest in line.guests] for line in request.rooms]

    hotel = get_hotel_by_name(cur, request.hotel_name)
    if hotel is None:
        raise _hotel_not_found(request.hotel_name)

    requested = DateInterval.of(request.start_date, request.end_date)
    rooms = _claim_rooms(cur, request, hotel.id, requested)

    nights = nights_occupied(requested.start, requested.end)
    total_price = sum((room.price_per_night * nights for room in rooms), Decimal("0"))

    reference = new_reference(lambda candidate: reference_exists(cur, candidate), reference_settings)
    booking_id = insert_booking(
        cur,
        customer_id=booker.id,
        reference=reference,
        total_price=total_price,
    )

    stays: list[StayResult] = []
    for line, room, line_guest_ids in zip(request.rooms, rooms, guest_ids):
        try:
            stay_id = insert_room_stay(
                cur,
                booking_id=booking_id,
                room_id=room.id,
                start_date=requested.start,
                end_date=requested.end,
            )
        except pg_errors.ExclusionViolation:
            raise _room_not_available(request.hotel_name, line.room_number) from None

        for guest_id in line_guest_ids:
            insert_stay_guest(cur, room_stay_id=stay_id, guest_customer_id=guest_id)

        stays.append(
            StayResult(
                hotel_name=request.hotel_name,
                room_number=str(line.room_number),
                start_date=requested.start,
                end_date=requested.end,
                guests=[guest.display_name for guest in line.guests],
            )
        )

    logger.info(
        "booking created",
        extra={
            "extra_fields": {
                "reference": reference,
                "hotel_id": hotel.id,
                "room_count": len(rooms),
                "nights": nights,
                "total_price": str(total_price),
            }
        },
    )

    # Display name is what the request typed, even if an existing customer
    # row with a different name was reused.
    return BookingResult(
        reference=reference,
        customer_name=request.customer.display_name,
        total_price=total_price,
        room_stays=stays,
    )


def create_booking(
    request: BookingRequest,
    *,
    cur: PgCursor | None = None,
    reference_settings: ReferenceSettings | None = None,
) -> tuple[BookingResult | None, str]:
    """Create a booking for one or more rooms of a hotel.

    Args:
        request: Booker, hotel, dates and requested room lines with guests.
        cur: Optional cursor of a caller-owned transaction. If None, a new
             transaction is opened and committed here.
        reference_settings: Reference alphabet/length (default: environment).

    Returns:
        (BookingResult, "Booking Complete") on success;
        (None, "<reason>: ...") when the hotel or a room is missing or a room
        is not available for the requested dates.

    Raises:
        BookingValidationError: If end_date is before start_date.
        ReferenceExhaustedError: If no unique reference could be drawn.
        psycopg2.Error: On storage failures.
    """
    check_date_order(request.start_date, request.end_date)

    def _do(c: PgCursor) -> tuple[BookingResult | None, str]:
        try:
            with savepoint(c, "create_booking"):
                return _book(c, request, reference_settings), BOOKING_COMPLETE
        except _BookingRejected as exc:
            logger.warning(
                "booking rejected",
                extra={
                    "extra_fields": {
                        "reason": exc.message,
                        "room_count": len(request.rooms),
                        "start_date": request.start_date.isoformat(),
                        "end_date": request.end_date.isoformat(),
                    }
                },
            )
            return None, exc.message

    if cur is not None:
        return _do(cur)
    with txn() as c:
        return _do(c)

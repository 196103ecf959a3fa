"""Hotel availability aggregation.

A room is available for [start, end] when none of its stays overlap the
interval. A hotel qualifies when the combined capacity of its available rooms
can hold the requested number of guests; it is then returned with only those
rooms. Hotels without any rooms are skipped; a fully booked hotel still
qualifies for zero guests, with an empty rooms list.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date

from psycopg2.extensions import cursor as PgCursor

from hotelbook.domain.models import Hotel, Room
from hotelbook.domain.overlap import DateInterval, as_date, first_overlap
from hotelbook.infra.db import txn
from hotelbook.infra.repositories.hotels_repository import load_catalog
from hotelbook.observability.logging import get_logger

logger = get_logger(__name__)


class InvalidRangeError(ValueError):
    """Raised when start_date is not strictly before end_date."""

    def __init__(self, start_date: date, end_date: date) -> None:
        self.start_date = start_date
        self.end_date = end_date
        super().__init__("start_date must be before end_date")


def _room_is_free(hotel: Hotel, room: Room, requested: DateInterval) -> bool:
    try:
        return first_overlap(room.stays, requested) is None
    except Exception:
        # A corrupt stay must not take the whole search down.
        logger.warning(
            "availability check failed, treating room as unavailable",
            exc_info=True,
            extra={
                "extra_fields": {
                    "hotel_id": hotel.id,
                    "room_id": room.id,
                    "requested_start": requested.start.isoformat(),
                    "requested_end": requested.end.isoformat(),
                }
            },
        )
        return False


def find_available(
    catalog: list[Hotel],
    start_date: date,
    end_date: date,
    min_guests: int,
) -> list[Hotel]:
    """Filter a hotel catalog down to hotels that can take min_guests.

    Args:
        catalog: Hotels with their rooms and each room's existing stays.
        start_date: First night requested.
        end_date: Last night requested.
        min_guests: Guests that must fit across the available rooms.

    Returns:
        Hotels (catalog order) whose rooms list holds only the available rooms.

    Raises:
        InvalidRangeError: If start_date >= end_date.
    """
    start_date, end_date = as_date(start_date), as_date(end_date)
    if start_date >= end_date:
        raise InvalidRangeError(start_date, end_date)

    requested = DateInterval(start_date, end_date)
    result: list[Hotel] = []

    for hotel in catalog:
        if not hotel.rooms:
            continue

        available = tuple(room for room in hotel.rooms if _room_is_free(hotel, room, requested))
        if sum(room.capacity for room in available) >= min_guests:
            result.append(replace(hotel, rooms=available))

    return result


def get_available_hotel_rooms(
    start_date: date,
    end_date: date,
    min_guests: int,
    cur: PgCursor | None = None,
) -> list[Hotel]:
    """Load the catalog and return hotels with enough free rooms.

    Raises:
        InvalidRangeError: If start_date >= end_date (checked before any query).
    """
    if as_date(start_date) >= as_date(end_date):
        raise InvalidRangeError(as_date(start_date), as_date(end_date))

    if cur is not None:
        catalog = load_catalog(cur)
    else:
        with txn() as c:
            catalog = load_catalog(c)

    return find_available(catalog, start_date, end_date, min_guests)

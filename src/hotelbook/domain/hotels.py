"""Hotel search by name."""

from __future__ import annotations

from psycopg2.extensions import cursor as PgCursor

from hotelbook.domain.models import Hotel
from hotelbook.infra.db import txn
from hotelbook.infra.repositories.hotels_repository import find_hotels_by_name

MIN_HOTEL_NAME_LENGTH = 3


class HotelNameError(ValueError):
    """Raised when a hotel search name is blank or too short."""


def check_hotel_name(name: str | None) -> str:
    if name is None or not name.strip():
        raise HotelNameError("Hotel name cannot be null or empty.")
    if len(name) < MIN_HOTEL_NAME_LENGTH:
        raise HotelNameError(
            f"Hotel name must be at least {MIN_HOTEL_NAME_LENGTH} characters long."
        )
    return name


def get_hotel_by_name(name: str | None, cur: PgCursor | None = None) -> list[Hotel]:
    """Hotels whose name matches case-insensitively, each with all its rooms.

    Returns an empty list when nothing matches.

    Raises:
        HotelNameError: If name is blank or shorter than 3 characters.
    """
    name = check_hotel_name(name)

    if cur is not None:
        return find_hotels_by_name(cur, name)
    with txn() as c:
        return find_hotels_by_name(c, name)

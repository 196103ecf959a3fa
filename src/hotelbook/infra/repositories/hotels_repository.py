"""Hotels repository - hotels, rooms and the stays occupying them.

Uses raw SQL with psycopg2 (no ORM).
"""

from __future__ import annotations

from collections import defaultdict
from decimal import Decimal

from psycopg2.extensions import cursor as PgCursor

from hotelbook.domain.models import Hotel, Room, RoomKey, RoomType
from hotelbook.domain.overlap import DateInterval
from hotelbook.infra.db import fetchall, fetchone, for_update

_ROOM_COLUMNS = "id, hotel_id, room_type, room_number, price_per_night, capacity"


def _row_to_room(row: tuple, stays: tuple[DateInterval, ...] = ()) -> Room:
    return Room(
        id=row[0],
        hotel_id=row[1],
        room_type=RoomType(row[2]),
        room_number=row[3],
        price_per_night=Decimal(row[4]),
        capacity=row[5],
        stays=stays,
    )


def _row_to_hotel(row: tuple, rooms: tuple[Room, ...] = ()) -> Hotel:
    return Hotel(id=row[0], name=row[1], address=row[2], phone=row[3], rooms=rooms)


def _stays_by_room(cur: PgCursor, room_ids: list[int] | None = None) -> dict[int, list[DateInterval]]:
    if room_ids is None:
        rows = fetchall(cur, "SELECT room_id, start_date, end_date FROM room_stays ORDER BY start_date")
    else:
        rows = fetchall(
            cur,
            """
            SELECT room_id, start_date, end_date
            FROM room_stays
            WHERE room_id = ANY(%s)
            ORDER BY start_date
            """,
            (room_ids,),
        )

    stays: dict[int, list[DateInterval]] = defaultdict(list)
    for room_id, start_date, end_date in rows:
        stays[room_id].append(DateInterval(start_date, end_date))
    return stays


def load_catalog(cur: PgCursor) -> list[Hotel]:
    """Load every hotel with its rooms and each room's existing stays.

    Three queries regardless of catalog size (hotels, rooms, stays).
    """
    hotel_rows = fetchall(cur, "SELECT id, name, address, phone FROM hotels ORDER BY id")
    room_rows = fetchall(cur, f"SELECT {_ROOM_COLUMNS} FROM rooms ORDER BY hotel_id, room_number")
    stays = _stays_by_room(cur)

    rooms_by_hotel: dict[int, list[Room]] = defaultdict(list)
    for row in room_rows:
        rooms_by_hotel[row[1]].append(_row_to_room(row, tuple(stays.get(row[0], ()))))

    return [_row_to_hotel(row, tuple(rooms_by_hotel.get(row[0], ()))) for row in hotel_rows]


def find_hotels_by_name(cur: PgCursor, name: str) -> list[Hotel]:
    """Case-insensitive name search; hotels come back with all their rooms."""
    hotel_rows = fetchall(
        cur,
        "SELECT id, name, address, phone FROM hotels WHERE lower(name) = lower(%s) ORDER BY id",
        (name,),
    )
    if not hotel_rows:
        return []

    room_rows = fetchall(
        cur,
        f"SELECT {_ROOM_COLUMNS} FROM rooms WHERE hotel_id = ANY(%s) ORDER BY hotel_id, room_number",
        ([row[0] for row in hotel_rows],),
    )
    rooms_by_hotel: dict[int, list[Room]] = defaultdict(list)
    for row in room_rows:
        rooms_by_hotel[row[1]].append(_row_to_room(row))

    return [_row_to_hotel(row, tuple(rooms_by_hotel.get(row[0], ()))) for row in hotel_rows]


def get_hotel_by_name(cur: PgCursor, name: str) -> Hotel | None:
    """Exact-name lookup. Names are not unique; the oldest hotel wins."""
    row = fetchone(
        cur,
        "SELECT id, name, address, phone FROM hotels WHERE name = %s ORDER BY id LIMIT 1",
        (name,),
    )
    return _row_to_hotel(row) if row else None


def lock_rooms(cur: PgCursor, hotel_id: int, room_numbers: list[int]) -> dict[RoomKey, Room]:
    """Lock the requested rooms of a hotel and load their current stays.

    Rows are locked FOR UPDATE in id order, so two bookings touching the same
    rooms queue behind each other instead of deadlocking. The caller must be
    inside a transaction; locks are held until it commits or rolls back.

    Args:
        cur: Database cursor (within transaction).
        hotel_id: Owning hotel.
        room_numbers: Room numbers requested (duplicates allowed).

    Returns:
        Index of the rooms that exist, keyed by RoomKey. Missing room numbers
        are simply absent.
    """
    if not room_numbers:
        return {}

    rows = for_update(
        cur,
        f"""
        SELECT {_ROOM_COLUMNS}
        FROM rooms
        WHERE hotel_id = %s AND room_number = ANY(%s)
        ORDER BY id
        """,
        (hotel_id, sorted(set(room_numbers))),
    )
    stays = _stays_by_room(cur, [row[0] for row in rows]) if rows else {}

    index: dict[RoomKey, Room] = {}
    for row in rows:
        room = _row_to_room(row, tuple(stays.get(row[0], ())))
        index[room.key] = room
    return index

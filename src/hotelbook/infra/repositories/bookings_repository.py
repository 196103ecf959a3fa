"""Bookings repository - bookings, room stays and stay guests.

Uses raw SQL with psycopg2 (no ORM).
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from decimal import Decimal

from psycopg2.extensions import cursor as PgCursor


def reference_exists(cur: PgCursor, reference: str) -> bool:
    cur.execute("SELECT 1 FROM bookings WHERE reference = %s", (reference,))
    return cur.fetchone() is not None


def insert_booking(
    cur: PgCursor,
    *,
    customer_id: int,
    reference: str,
    total_price: Decimal,
) -> int:
    """Insert a booking row and return its id.

    Raises:
        psycopg2.errors.UniqueViolation: If the reference is already taken.
    """
    cur.execute(
        """
        INSERT INTO bookings (customer_id, reference, total_price)
        VALUES (%s, %s, %s)
        RETURNING id
        """,
        (customer_id, reference, total_price),
    )
    return cur.fetchone()[0]


def insert_room_stay(
    cur: PgCursor,
    *,
    booking_id: int,
    room_id: int,
    start_date: date,
    end_date: date,
) -> int:
    """Insert a room stay and return its id.

    Raises:
        psycopg2.errors.ExclusionViolation: If the stay overlaps another stay
            of the same room (no_room_stay_overlap constraint).
    """
    cur.execute(
        """
        INSERT INTO room_stays (booking_id, room_id, start_date, end_date)
        VALUES (%s, %s, %s, %s)
        RETURNING id
        """,
        (booking_id, room_id, start_date, end_date),
    )
    return cur.fetchone()[0]


def insert_stay_guest(cur: PgCursor, *, room_stay_id: int, guest_customer_id: int) -> int:
    cur.execute(
        """
        INSERT INTO stay_guests (room_stay_id, guest_customer_id)
        VALUES (%s, %s)
        RETURNING id
        """,
        (room_stay_id, guest_customer_id),
    )
    return cur.fetchone()[0]


def get_booking_by_reference(cur: PgCursor, reference: str) -> dict | None:
    """Fetch a booking and its booker by exact reference.

    Returns:
        Dict with id, reference, total_price, cancelled, customer_first_name,
        customer_last_name; or None.
    """
    cur.execute(
        """
        SELECT b.id, b.reference, b.total_price, b.cancelled,
               c.first_name, c.last_name
        FROM bookings b
        JOIN customers c ON c.id = b.customer_id
        WHERE b.reference = %s
        """,
        (reference,),
    )
    row = cur.fetchone()
    if row is None:
        return None
    return {
        "id": row[0],
        "reference": row[1],
        "total_price": Decimal(row[2]),
        "cancelled": row[3],
        "customer_first_name": row[4],
        "customer_last_name": row[5],
    }


def list_room_stays(cur: PgCursor, booking_id: int) -> list[dict]:
    """Room stays of a booking with hotel name, room number and guest names."""
    cur.execute(
        """
        SELECT s.id, h.name, r.room_number, s.start_date, s.end_date
        FROM room_stays s
        JOIN rooms r ON r.id = s.room_id
        JOIN hotels h ON h.id = r.hotel_id
        WHERE s.booking_id = %s
        ORDER BY s.id
        """,
        (booking_id,),
    )
    stay_rows = cur.fetchall()
    if not stay_rows:
        return []

    cur.execute(
        """
        SELECT g.room_stay_id, c.first_name, c.last_name
        FROM stay_guests g
        JOIN customers c ON c.id = g.guest_customer_id
        WHERE g.room_stay_id = ANY(%s)
        ORDER BY g.id
        """,
        ([row[0] for row in stay_rows],),
    )
    guests: dict[int, list[str]] = defaultdict(list)
    for stay_id, first_name, last_name in cur.fetchall():
        guests[stay_id].append(f"{first_name} {last_name}")

    return [
        {
            "id": row[0],
            "hotel_name": row[1],
            "room_number": row[2],
            "start_date": row[3],
            "end_date": row[4],
            "guests": guests.get(row[0], []),
        }
        for row in stay_rows
    ]

"""Seed a development database with a small hotel catalog and three bookings.

Idempotent: rows carry fixed ids and are inserted with ON CONFLICT DO NOTHING.
Run with: python -m hotelbook.operations.seed_dev
"""

import os
from datetime import date

from hotelbook.infra.db import txn

HOTELS = [
    ("Grand Plaza", "123 Main St, Cityville", "+44 1234 56789123"),
    ("Mardon Villa", "28 High St, Redtown", "+44 1417 9258465"),
    ("Hilton Heights", "425 Main Rd, Bluefield", "+44 1187 62549785"),
]

# (hotel_id, room_type, room_number, price_per_night, capacity)
ROOMS = [
    (1, 1, 1, 75, 1),
    (1, 2, 2, 155, 2),
    (1, 2, 3, 150, 2),
    (1, 3, 4, 175, 2),
    (1, 2, 5, 150, 2),
    (1, 3, 6, 175, 2),
    (2, 1, 1, 75, 1),
    (2, 1, 2, 75, 1),
    (2, 2, 3, 250, 2),
    (2, 1, 4, 75, 1),
    (2, 2, 5, 250, 2),
    (2, 2, 6, 250, 2),
    (3, 3, 1, 250, 2),
    (3, 1, 2, 175, 1),
    (3, 3, 3, 275, 2),
    (3, 3, 4, 275, 2),
    (3, 3, 5, 275, 2),
    (3, 3, 6, 275, 2),
]

# (first_name, last_name, email)
CUSTOMERS = [
    ("John", "Doe", "jdoe@highdon.com"),
    ("Hayley", "Tilsley", "htilsley@outlook.co.uk"),
    ("Rachel", "Piemaker", "rpiemaker@gmail.com"),
    ("Paul", "Pope", "ppope@futuremail.co.uk"),
    ("Jane", "Carter", "jcarter@gmail.com"),
]

# (customer_id, reference, total_price)
BOOKINGS = [
    (1, "PrhEjxxuk1Bnp", 475),
    (2, "Z26UtejKnmWtA", 280),
    (3, "XR1NHc5U9Fl74", 1450),
]

# (booking_id, room_id, start_date, end_date)
ROOM_STAYS = [
    (1, 2, date(2026, 7, 1), date(2026, 7, 5)),
    (2, 3, date(2026, 8, 10), date(2026, 8, 15)),
    (3, 4, date(2026, 9, 20), date(2026, 9, 25)),
    (1, 3, date(2026, 7, 1), date(2026, 7, 5)),
    (2, 4, date(2026, 8, 10), date(2026, 8, 15)),
    (3, 5, date(2026, 9, 20), date(2026, 9, 25)),
]

# (room_stay_id, guest_customer_id)
STAY_GUESTS = [(1, 1), (2, 2), (3, 3), (4, 4), (5, 5), (6, 1)]

_SEQUENCES = ["hotels", "rooms", "customers", "bookings", "room_stays", "stay_guests"]


def env(name: str, default: str | None = None) -> str:
    v = os.getenv(name, default)
    if v is None or v.strip() == "":
        raise RuntimeError(f"Missing env var: {name}")
    return v


def seed(cur) -> dict[str, int]:
    """Insert the fixture rows through an open cursor. Returns rows inserted per table."""
    inserted: dict[str, int] = {}

    def _insert(table: str, sql: str, rows) -> None:
        count = 0
        for i, row in enumerate(rows, start=1):
            cur.execute(sql, (i, *row))
            count += cur.rowcount
        inserted[table] = count

    _insert(
        "hotels",
        "INSERT INTO hotels (id, name, address, phone) VALUES (%s, %s, %s, %s)"
        " ON CONFLICT (id) DO NOTHING",
        HOTELS,
    )
    _insert(
        "rooms",
        """
        INSERT INTO rooms (id, hotel_id, room_type, room_number, price_per_night, capacity)
        VALUES (%s, %s, %s, %s, %s, %s)
        ON CONFLICT (id) DO NOTHING
        """,
        ROOMS,
    )
    _insert(
        "customers",
        "INSERT INTO customers (id, first_name, last_name, email) VALUES (%s, %s, %s, %s)"
        " ON CONFLICT DO NOTHING",
        CUSTOMERS,
    )
    _insert(
        "bookings",
        "INSERT INTO bookings (id, customer_id, reference, total_price) VALUES (%s, %s, %s, %s)"
        " ON CONFLICT DO NOTHING",
        BOOKINGS,
    )
    _insert(
        "room_stays",
        """
        INSERT INTO room_stays (id, booking_id, room_id, start_date, end_date)
        VALUES (%s, %s, %s, %s, %s)
        ON CONFLICT (id) DO NOTHING
        """,
        ROOM_STAYS,
    )
    _insert(
        "stay_guests",
        "INSERT INTO stay_guests (id, room_stay_id, guest_customer_id) VALUES (%s, %s, %s)"
        " ON CONFLICT (id) DO NOTHING",
        STAY_GUESTS,
    )

    # Fixed ids bypass the sequences; move them past the seeded rows.
    for table in _SEQUENCES:
        cur.execute(
            f"SELECT setval(pg_get_serial_sequence('{table}', 'id'),"
            f" (SELECT COALESCE(MAX(id), 1) FROM {table}))"
        )

    return inserted


def main() -> int:
    env("DATABASE_URL")

    with txn() as cur:
        inserted = seed(cur)

    print("seed ok:", inserted)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

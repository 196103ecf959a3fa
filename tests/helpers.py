"""Shared test helpers for Hotelbook tests.

These are NOT fixtures - they are regular functions and classes that
conftest.py and individual test files import.
"""

from __future__ import annotations

import copy
from contextlib import contextmanager
from datetime import date
from decimal import Decimal

from psycopg2 import errors as pg_errors

from hotelbook.domain.models import (
    BookingRequest,
    Customer,
    CustomerDetails,
    Hotel,
    Room,
    RoomKey,
    RoomLine,
    RoomType,
)
from hotelbook.domain.overlap import DateInterval, overlaps


def details(first: str = "Ann", last: str = "Lee", email: str | None = None) -> CustomerDetails:
    """Customer details with a unique-looking email derived from the name."""
    return CustomerDetails(
        first_name=first,
        last_name=last,
        email=email or f"{first.lower()}.{last.lower()}@example.com",
        phone="+44 1234 567890",
    )


def booking_request(
    hotel_name: str,
    start: date,
    end: date,
    rooms: list[tuple[int, list[CustomerDetails]]],
    customer: CustomerDetails | None = None,
) -> BookingRequest:
    return BookingRequest(
        customer=customer or details(),
        hotel_name=hotel_name,
        start_date=start,
        end_date=end,
        rooms=tuple(RoomLine(room_number=n, guests=tuple(g)) for n, g in rooms),
    )


class FakeStore:
    """Dict-backed stand-in for the Postgres tables create_booking touches.

    Mirrors the constraints the real schema enforces: unique customer email,
    unique booking reference and the no_room_stay_overlap exclusion
    constraint (which can be switched off to simulate a race).
    """

    def __init__(self) -> None:
        self.hotels: list[dict] = []
        self.rooms: list[dict] = []
        self.customers: list[dict] = []
        self.bookings: list[dict] = []
        self.room_stays: list[dict] = []
        self.stay_guests: list[dict] = []
        self.enforce_exclusion = True
        self.taken_references: set[str] = set()

    # ── seeding ──────────────────────────────────────────────────────────

    def add_hotel(self, name: str, address: str = "1 High St", phone: str = "+44 100") -> int:
        hotel_id = len(self.hotels) + 1
        self.hotels.append({"id": hotel_id, "name": name, "address": address, "phone": phone})
        return hotel_id

    def add_room(
        self,
        hotel_id: int,
        room_number: int,
        price: str | int = "50",
        capacity: int = 2,
        room_type: RoomType = RoomType.DOUBLE,
    ) -> int:
        room_id = len(self.rooms) + 1
        self.rooms.append(
            {
                "id": room_id,
                "hotel_id": hotel_id,
                "room_type": room_type,
                "room_number": room_number,
                "price_per_night": Decimal(str(price)),
                "capacity": capacity,
            }
        )
        return room_id

    def add_stay(self, room_id: int, start: date, end: date) -> int:
        stay_id = len(self.room_stays) + 1
        self.room_stays.append(
            {"id": stay_id, "booking_id": 0, "room_id": room_id, "start_date": start, "end_date": end}
        )
        return stay_id

    def add_customer(self, first: str, last: str, email: str) -> Customer:
        return self.resolve_customer(None, CustomerDetails(first, last, email, phone=""))

    # ── transaction scopes ───────────────────────────────────────────────

    @contextmanager
    def txn(self, conn=None):
        yield object()

    @contextmanager
    def savepoint(self, cur, name):
        tables = ("customers", "bookings", "room_stays", "stay_guests")
        snapshot = {t: copy.deepcopy(getattr(self, t)) for t in tables}
        try:
            yield cur
        except Exception:
            for t in tables:
                setattr(self, t, snapshot[t])
            raise

    # ── repository functions ─────────────────────────────────────────────

    def _customer(self, row: dict) -> Customer:
        return Customer(
            id=row["id"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            email=row["email"],
            phone=row["phone"],
            address=row["address"],
        )

    def resolve_customer(self, cur, details: CustomerDetails) -> Customer:
        for row in self.customers:
            if row["email"] == details.email:
                return self._customer(row)
        row = {
            "id": len(self.customers) + 1,
            "first_name": details.first_name,
            "last_name": details.last_name,
            "email": details.email,
            "phone": details.phone,
            "address": details.address,
        }
        self.customers.append(row)
        return self._customer(row)

    def get_hotel_by_name(self, cur, name: str) -> Hotel | None:
        for row in self.hotels:
            if row["name"] == name:
                return Hotel(id=row["id"], name=row["name"], address=row["address"], phone=row["phone"])
        return None

    def _stays_of(self, room_id: int) -> tuple[DateInterval, ...]:
        return tuple(
            DateInterval(s["start_date"], s["end_date"]) for s in self.room_stays if s["room_id"] == room_id
        )

    def lock_rooms(self, cur, hotel_id: int, room_numbers: list[int]) -> dict[RoomKey, Room]:
        index: dict[RoomKey, Room] = {}
        for row in self.rooms:
            if row["hotel_id"] == hotel_id and row["room_number"] in room_numbers:
                room = Room(stays=self._stays_of(row["id"]), **row)
                index[room.key] = room
        return index

    def reference_exists(self, cur, reference: str) -> bool:
        return reference in self.taken_references or any(
            b["reference"] == reference for b in self.bookings
        )

    def insert_booking(self, cur, *, customer_id: int, reference: str, total_price: Decimal) -> int:
        booking_id = len(self.bookings) + 1
        self.bookings.append(
            {"id": booking_id, "customer_id": customer_id, "reference": reference, "total_price": total_price}
        )
        return booking_id

    def insert_room_stay(self, cur, *, booking_id: int, room_id: int, start_date: date, end_date: date) -> int:
        candidate = DateInterval(start_date, end_date)
        if self.enforce_exclusion and any(overlaps(s, candidate) for s in self._stays_of(room_id)):
            raise pg_errors.ExclusionViolation("conflicting key value violates exclusion constraint")
        stay_id = len(self.room_stays) + 1
        self.room_stays.append(
            {
                "id": stay_id,
                "booking_id": booking_id,
                "room_id": room_id,
                "start_date": start_date,
                "end_date": end_date,
            }
        )
        return stay_id

    def insert_stay_guest(self, cur, *, room_stay_id: int, guest_customer_id: int) -> int:
        guest_id = len(self.stay_guests) + 1
        self.stay_guests.append(
            {"id": guest_id, "room_stay_id": room_stay_id, "guest_customer_id": guest_customer_id}
        )
        return guest_id

    def fetch_booking(self, cur, reference: str) -> dict | None:
        for b in self.bookings:
            if b["reference"] == reference:
                booker = self.customers[b["customer_id"] - 1]
                return {
                    "id": b["id"],
                    "reference": b["reference"],
                    "total_price": b["total_price"],
                    "cancelled": False,
                    "customer_first_name": booker["first_name"],
                    "customer_last_name": booker["last_name"],
                }
        return None

    def list_room_stays(self, cur, booking_id: int) -> list[dict]:
        result = []
        for s in self.room_stays:
            if s["booking_id"] != booking_id:
                continue
            room = self.rooms[s["room_id"] - 1]
            hotel = self.hotels[room["hotel_id"] - 1]
            guests = [
                "{first_name} {last_name}".format(**self.customers[g["guest_customer_id"] - 1])
                for g in self.stay_guests
                if g["room_stay_id"] == s["id"]
            ]
            result.append(
                {
                    "id": s["id"],
                    "hotel_name": hotel["name"],
                    "room_number": room["room_number"],
                    "start_date": s["start_date"],
                    "end_date": s["end_date"],
                    "guests": guests,
                }
            )
        return result

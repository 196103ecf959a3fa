"""Shared pytest fixtures for Hotelbook tests."""
import sys
sys.dont_write_bytecode = True

import pytest  # noqa: E402

from tests.helpers import FakeStore  # noqa: E402


@pytest.fixture
def store(monkeypatch):
    """In-memory storage wired into the booking orchestrator and lookup.

    Repository functions are replaced where the domain modules imported them,
    so create_booking / get_booking_by_reference run unchanged against it.
    """
    fake = FakeStore()

    for name in (
        "resolve_customer",
        "get_hotel_by_name",
        "lock_rooms",
        "reference_exists",
        "insert_booking",
        "insert_room_stay",
        "insert_stay_guest",
        "savepoint",
        "txn",
    ):
        monkeypatch.setattr(f"hotelbook.domain.bookings.{name}", getattr(fake, name))

    monkeypatch.setattr("hotelbook.domain.booking_lookup.fetch_booking", fake.fetch_booking)
    monkeypatch.setattr("hotelbook.domain.booking_lookup.list_room_stays", fake.list_room_stays)
    monkeypatch.setattr("hotelbook.domain.booking_lookup.txn", fake.txn)

    return fake

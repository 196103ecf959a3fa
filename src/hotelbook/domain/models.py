"""Booking domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

from hotelbook.domain.overlap import DateInterval


class RoomType(Enum):
    SINGLE = 1
    DOUBLE = 2
    SUITE = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()


@dataclass(frozen=True)
class RoomKey:
    """A room's natural key: its number is only unique within one hotel."""

    hotel_id: int
    room_number: int


@dataclass(frozen=True)
class Room:
    id: int
    hotel_id: int
    room_type: RoomType
    room_number: int
    price_per_night: Decimal
    capacity: int
    stays: tuple[DateInterval, ...] = ()

    @property
    def key(self) -> RoomKey:
        return RoomKey(self.hotel_id, self.room_number)


@dataclass(frozen=True)
class Hotel:
    id: int
    name: str
    address: str
    phone: str
    rooms: tuple[Room, ...] = ()


@dataclass(frozen=True)
class CustomerDetails:
    """Contact details as typed by the customer (not yet resolved)."""

    first_name: str
    last_name: str
    email: str
    phone: str
    address: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class Customer:
    """A stored customer row. Email is the deduplication key."""

    id: int
    first_name: str
    last_name: str
    email: str
    phone: str
    address: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class RoomLine:
    """One requested room and the guests who will sleep in it."""

    room_number: int
    guests: tuple[CustomerDetails, ...] = ()


@dataclass(frozen=True)
class BookingRequest:
    customer: CustomerDetails
    hotel_name: str
    start_date: date
    end_date: date
    rooms: tuple[RoomLine, ...] = ()


@dataclass(frozen=True)
class StayResult:
    hotel_name: str
    room_number: str
    start_date: date
    end_date: date
    guests: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class BookingResult:
    reference: str
    customer_name: str
    total_price: Decimal
    room_stays: list[StayResult] = field(default_factory=list)


def nights_occupied(start_date: date, end_date: date) -> int:
    """Nights charged for a stay.

    end_date is the last night slept; checkout is the following morning.
    """
    return (end_date - start_date).days + 1

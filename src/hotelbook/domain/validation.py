"""Booking request validation rules.

Rejections raise BookingValidationError before any lookup is made.
"""

from __future__ import annotations

from datetime import date

from hotelbook.domain.overlap import as_date


class BookingValidationError(ValueError):
    """Raised when a booking request is malformed."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(message)


def check_future_date(start_date: date, today: date) -> None:
    """Start date may be today or later; today comes from the caller's Clock."""
    if as_date(start_date) < as_date(today):
        raise BookingValidationError("start_date", "Start date must be in the future")


def check_date_order(start_date: date, end_date: date) -> None:
    """End date is the last night, so start == end is a valid one-night stay."""
    if as_date(end_date) < as_date(start_date):
        raise BookingValidationError(
            "end_date", "End date must be later than or equal to start date"
        )


def check_guest_capacity(guest_count: int | None, capacity: int) -> None:
    if guest_count is None:
        raise BookingValidationError("guests", "Guest required for a room")
    if guest_count > capacity:
        raise BookingValidationError("guests", "Guest number cannot exceed room capacity")

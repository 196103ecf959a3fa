"""Booking reference generation.

A reference is the only key customers get for looking up a booking, so it
must not be guessable or sequential. Codes are drawn from `secrets` and
encoded into the configured alphabet; a draw that is already taken is
discarded and redrawn, up to ReferenceSettings.max_attempts times.
"""

from __future__ import annotations

import secrets
from typing import Callable

from hotelbook.infra.settings import ReferenceSettings, get_reference_settings
from hotelbook.observability.logging import get_logger

logger = get_logger(__name__)


class ReferenceExhaustedError(RuntimeError):
    """Raised when no unused reference was found within max_attempts draws."""

    def __init__(self, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(f"No unique booking reference after {attempts} attempts")


def encode(number: int, alphabet: str, min_length: int) -> str:
    """Encode a non-negative integer in base len(alphabet), left-padded."""
    if number < 0:
        raise ValueError("number must be non-negative")

    base = len(alphabet)
    digits: list[str] = []
    while number:
        number, remainder = divmod(number, base)
        digits.append(alphabet[remainder])

    encoded = "".join(reversed(digits))
    return encoded.rjust(min_length, alphabet[0])


def draw_reference(settings: ReferenceSettings) -> str:
    """Draw one random candidate reference (not checked for uniqueness)."""
    return encode(secrets.randbelow(settings.space), settings.alphabet, settings.min_length)


def new_reference(
    exists: Callable[[str], bool],
    settings: ReferenceSettings | None = None,
) -> str:
    """Return a reference for which exists() is False.

    Args:
        exists: Uniqueness check against stored bookings.
        settings: Alphabet/length/attempt settings (default: from environment).

    Raises:
        ReferenceExhaustedError: If every draw collided.
    """
    if settings is None:
        settings = get_reference_settings()

    for attempt in range(1, settings.max_attempts + 1):
        candidate = draw_reference(settings)
        if not exists(candidate):
            return candidate
        logger.info(
            "booking reference collision, redrawing",
            extra={"extra_fields": {"attempt": attempt}},
        )

    logger.error(
        "booking reference space exhausted",
        extra={
            "extra_fields": {
                "attempts": settings.max_attempts,
                "space": settings.space,
            }
        },
    )
    raise ReferenceExhaustedError(settings.max_attempts)

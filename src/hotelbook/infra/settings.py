"""Booking reference settings.

Loaded from the environment on every call so tests can patch os.environ.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

# Same shuffled alphabet the production encoder was configured with.
DEFAULT_REFERENCE_ALPHABET = "2pKB0eLxIhfd5GMH3qQREN9XaVPl7bUDtzZFoAjiwv6WgYumrcJ14yCnskT8SO"
DEFAULT_REFERENCE_MIN_LENGTH = 8
DEFAULT_REFERENCE_MAX_ATTEMPTS = 10

# Below this many distinct codes, collisions stop being negligible.
MIN_REFERENCE_SPACE = 1_000_000


@dataclass(frozen=True)
class ReferenceSettings:
    """Alphabet and length used to encode booking references.

    Attributes:
        alphabet: Symbols a reference may contain. No duplicates.
        min_length: Every reference is at least this long.
        max_attempts: Draws allowed before giving up on a unique code.
    """

    alphabet: str = DEFAULT_REFERENCE_ALPHABET
    min_length: int = DEFAULT_REFERENCE_MIN_LENGTH
    max_attempts: int = DEFAULT_REFERENCE_MAX_ATTEMPTS

    def __post_init__(self) -> None:
        if len(self.alphabet) < 2:
            raise ValueError("reference alphabet needs at least 2 symbols")
        if len(set(self.alphabet)) != len(self.alphabet):
            raise ValueError("reference alphabet contains duplicate symbols")
        if self.min_length < 1:
            raise ValueError("reference min_length must be at least 1")
        if self.max_attempts < 1:
            raise ValueError("reference max_attempts must be at least 1")
        if self.space < MIN_REFERENCE_SPACE:
            raise ValueError(
                f"reference space too small ({self.space} codes); "
                "use a longer alphabet or min_length"
            )

    @property
    def space(self) -> int:
        """Number of distinct codes of exactly min_length symbols."""
        return len(self.alphabet) ** self.min_length


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def get_reference_settings() -> ReferenceSettings:
    """Build ReferenceSettings from environment, falling back to defaults.

    Raises:
        ValueError: If the configured values are unusable.
    """
    return ReferenceSettings(
        alphabet=os.environ.get("BOOKING_REFERENCE_ALPHABET") or DEFAULT_REFERENCE_ALPHABET,
        min_length=_env_int("BOOKING_REFERENCE_MIN_LENGTH", DEFAULT_REFERENCE_MIN_LENGTH),
        max_attempts=_env_int("BOOKING_REFERENCE_MAX_ATTEMPTS", DEFAULT_REFERENCE_MAX_ATTEMPTS),
    )

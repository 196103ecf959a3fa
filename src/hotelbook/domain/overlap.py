"""Room stay overlap detection.

Stay intervals are closed on both ends: end_date is the last night the room
is occupied. Two stays conflict when they share at least one calendar date,
so a check-in on the same day another stay ends IS a conflict:

    (candidate.start <= existing.end) AND (existing.start <= candidate.end)

The storage layer enforces the same rule with daterange(start, end, '[]').
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


def as_date(value: date | datetime) -> date:
    """Drop any time-of-day component."""
    if isinstance(value, datetime):
        return value.date()
    return value


@dataclass(frozen=True)
class DateInterval:
    start: date
    end: date

    @classmethod
    def of(cls, start: date | datetime, end: date | datetime) -> DateInterval:
        return cls(as_date(start), as_date(end))


def overlaps(existing: DateInterval, candidate: DateInterval) -> bool:
    """Return True if the two intervals share at least one calendar date."""
    existing_start, existing_end = as_date(existing.start), as_date(existing.end)
    candidate_start, candidate_end = as_date(candidate.start), as_date(candidate.end)
    return candidate_start <= existing_end and existing_start <= candidate_end


def first_overlap(
    stays: list[DateInterval] | tuple[DateInterval, ...],
    candidate: DateInterval,
) -> DateInterval | None:
    """Return the first stay overlapping candidate, or None if the room is free."""
    for stay in stays:
        if overlaps(stay, candidate):
            return stay
    return None

"""Redaction helpers for booking logs.

Customer contact data (emails, phone numbers, names) must never reach the
logs verbatim. Hotel names, room numbers, dates and references are fine.
"""

import re
from datetime import date
from decimal import Decimal
from typing import Any

_PHONE_PATTERN = re.compile(r"\+?\d[\d\s\-()]{6,}\d")
_EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+")

_REDACTED = "[REDACTED]"


def redact_string(value: str) -> str:
    """Replace email addresses and phone numbers inside a string."""
    result = _EMAIL_PATTERN.sub(_REDACTED, value)
    return _PHONE_PATTERN.sub(_REDACTED, result)


def mask_email(email: str | None) -> str:
    """Mask an email, keeping its first character and domain: ``j***@example.com``."""
    if not email or "@" not in email:
        return _REDACTED
    local, domain = email.rsplit("@", 1)
    return f"{local[:1]}***@{domain}"


def redact_value(value: Any) -> str:
    """Redact any value for safe logging. Returns string representation."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        return redact_string(value)
    if isinstance(value, dict):
        return f"dict(keys={sorted(value.keys())})"
    if isinstance(value, (list, tuple, set)):
        return f"list(len={len(value)})"
    return f"<{type(value).__name__}>"


def safe_log_context(**kwargs: Any) -> dict[str, str]:
    """Build a context dict safe for logging. All values are redacted."""
    return {k: redact_value(v) for k, v in kwargs.items()}

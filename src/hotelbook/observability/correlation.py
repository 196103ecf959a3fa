"""Correlation ID management for request tracing."""

import uuid
from contextvars import ContextVar, Token

# Set per request by the API middleware, read by the JSON log formatter
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

CORRELATION_ID_HEADER = "X-Correlation-ID"


def generate_correlation_id() -> str:
    return str(uuid.uuid4())


def get_correlation_id() -> str:
    return correlation_id_var.get()


def set_correlation_id(cid: str) -> Token[str]:
    return correlation_id_var.set(cid)


def reset_correlation_id(token: Token[str]) -> None:
    """Restore the correlation ID that was active before set_correlation_id."""
    correlation_id_var.reset(token)

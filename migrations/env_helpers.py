"""Database URL helpers for Alembic migrations.

Kept apart from env.py so they can be tested without an alembic context.
The application connects with psycopg2 using DATABASE_URL as-is; Alembic
needs a SQLAlchemy URL, so libpq key=value DSNs and postgres:// URLs are
converted here.
"""

from __future__ import annotations

import os
from urllib.parse import quote_plus

from psycopg2.extensions import parse_dsn

_DRIVER_PREFIX = "postgresql+psycopg2://"


def _dsn_to_url(dsn: str) -> str:
    """Convert a libpq key=value DSN to a SQLAlchemy URL.

    A host starting with "/" is a Unix socket directory and goes in the
    query string, since it cannot appear in the URL authority.
    """
    params = parse_dsn(dsn)

    password = params.get("password") or os.environ.get("DB_PASSWORD", "")
    user = quote_plus(params.get("user", ""))
    dbname = quote_plus(params.get("dbname", ""))
    host = params.get("host", "localhost")
    port = params.get("port", "5432")

    credentials = f"{user}:{quote_plus(password)}" if password else user

    if host.startswith("/"):
        return f"{_DRIVER_PREFIX}{credentials}@/{dbname}?host={quote_plus(host)}"
    return f"{_DRIVER_PREFIX}{credentials}@{host}:{port}/{dbname}"


def _url_to_sqlalchemy(url: str) -> str:
    for scheme in ("postgres://", "postgresql://"):
        if url.startswith(scheme):
            url = _DRIVER_PREFIX + url[len(scheme):]
            break

    db_password = os.environ.get("DB_PASSWORD", "")
    if not db_password:
        return url

    rest = url[len(_DRIVER_PREFIX):] if url.startswith(_DRIVER_PREFIX) else None
    if rest is None or "@" not in rest.split("/", 1)[0]:
        return url
    userinfo, hostpart = rest.split("@", 1)
    if ":" in userinfo:
        return url
    return f"{_DRIVER_PREFIX}{userinfo}:{quote_plus(db_password)}@{hostpart}"


def get_database_url() -> str:
    """Return DATABASE_URL as a SQLAlchemy psycopg2 URL.

    Raises:
        RuntimeError: If DATABASE_URL is not set.
    """
    url = os.environ.get("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is required to run migrations")
    if "://" in url:
        return _url_to_sqlalchemy(url)
    return _dsn_to_url(url)

"""Customers repository - identity resolution by email.

Uses raw SQL with psycopg2 (no ORM).

Identity resolution strategy
─────────────────────────────
Bookers and room guests are both customers, resolved the same way:

  1. Look up by exact email. Found → return the stored row untouched; the
     name/phone/address on the request are NOT written back.
  2. Not found → INSERT the supplied details and return the new row.

customers.email carries a unique index. If a concurrent transaction inserts
the same email between steps 1 and 2, the INSERT does nothing and the row
the other transaction created is read back instead.
"""

from psycopg2.extensions import cursor as PgCursor

from hotelbook.domain.models import Customer, CustomerDetails

_COLUMNS = "id, first_name, last_name, email, phone, address"


def _row_to_customer(row: tuple) -> Customer:
    return Customer(
        id=row[0],
        first_name=row[1],
        last_name=row[2],
        email=row[3],
        phone=row[4],
        address=row[5],
    )


def get_customer_by_email(cur: PgCursor, email: str) -> Customer | None:
    cur.execute(
        f"SELECT {_COLUMNS} FROM customers WHERE email = %s ORDER BY id LIMIT 1",
        (email,),
    )
    row = cur.fetchone()
    return _row_to_customer(row) if row else None


def resolve_customer(cur: PgCursor, details: CustomerDetails) -> Customer:
    """Return the customer owning details.email, creating it on first sight.

    Args:
        cur:     Database cursor (must be inside a transaction).
        details: Contact details from the request.

    Returns:
        The stored Customer (pre-existing or newly inserted).
    """
    # ── Step 1: search by email ───────────────────────────────────────────────
    existing = get_customer_by_email(cur, details.email)
    if existing is not None:
        return existing

    # ── Step 2: insert new customer ───────────────────────────────────────────
    cur.execute(
        f"""
        INSERT INTO customers (first_name, last_name, email, phone, address)
        VALUES (%s, %s, %s, %s, %s)
        ON CONFLICT (email) DO NOTHING
        RETURNING {_COLUMNS}
        """,
        (
            details.first_name,
            details.last_name,
            details.email,
            details.phone,
            details.address,
        ),
    )
    row = cur.fetchone()
    if row is not None:
        return _row_to_customer(row)

    # Lost the insert race - the winner's row is committed or about to be.
    winner = get_customer_by_email(cur, details.email)
    if winner is None:
        raise RuntimeError("customer insert conflicted but no row was found")
    return winner

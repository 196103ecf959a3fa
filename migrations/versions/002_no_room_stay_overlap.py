"""Exclusion constraint: no two stays of a room on the same date.

Second layer of the double-booking guard. create_booking locks the room rows
before checking availability; this constraint rejects any overlapping insert
that bypasses that path.

Revision ID: 002_no_room_stay_overlap
Revises: 001_initial_schema
Create Date: 2026-10-18
"""
from __future__ import annotations

from pathlib import Path

from alembic import op

revision = "002_no_room_stay_overlap"
down_revision = "001_initial_schema"
branch_labels = None
depends_on = None

_SQL_FILE = Path(__file__).resolve().parents[1] / "sql" / "002_no_room_stay_overlap.sql"


def upgrade() -> None:
    conn = op.get_bind()
    conn.exec_driver_sql(_SQL_FILE.read_text(encoding="utf-8"))


def downgrade() -> None:
    conn = op.get_bind()
    conn.exec_driver_sql("ALTER TABLE room_stays DROP CONSTRAINT IF EXISTS no_room_stay_overlap")
    # btree_gist stays installed: other indexes may depend on it.

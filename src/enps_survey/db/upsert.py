"""
enps_survey.db.upsert

Dialect-aware INSERT constructs.

Responsibilities:
- Return the backend's `insert()` so repositories can use ON CONFLICT clauses
  (`on_conflict_do_nothing` / `on_conflict_do_update`) on both SQLite and Postgres.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession


def dialect_insert(session: AsyncSession, table: Any) -> Any:
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(table)
    if dialect == "sqlite":
        return sqlite.insert(table)
    raise RuntimeError(f"unsupported database dialect: {dialect}")

"""
enps_survey.db.init_db

DB bootstrap helpers.

Responsibilities:
- Wait for the database with a bounded, linearly backed-off retry loop.
- Create tables when auto-creation is enabled (local SQLite, tests, simple deploys).
"""

from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

from enps_survey.db import models  # noqa: F401  # ensure models are registered on Base.metadata
from enps_survey.db.base import Base
from enps_survey.observability.logging import get_logger

log = get_logger(__name__)


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    log.warning(
        "db.connect.retry",
        attempt=state.attempt_number,
        sleep_seconds=state.next_action.sleep if state.next_action else None,
        error=str(exc),
    )


async def wait_for_database(
    engine: AsyncEngine, *, attempts: int, backoff_seconds: float
) -> None:
    """
    Block until `SELECT 1` succeeds. Sleeps backoff, 2*backoff, 3*backoff, ... between
    attempts and re-raises the last error once `attempts` is exhausted.
    """

    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(attempts),
        wait=wait_incrementing(start=backoff_seconds, increment=backoff_seconds),
        retry=retry_if_exception_type((SQLAlchemyError, OSError)),
        before_sleep=_log_retry,
        reraise=True,
    ):
        with attempt:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
    log.info("db.connect.ok", backend=engine.dialect.name)


async def init_db(engine: AsyncEngine) -> None:
    # CREATE TABLE IF NOT EXISTS semantics; Alembic owns schema changes beyond that.
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# --- Module Notes -----------------------------------------------------------
# With DB_AUTO_CREATE=false, run `alembic upgrade head` as part of deployment instead.

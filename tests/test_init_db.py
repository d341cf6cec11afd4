from __future__ import annotations

import pytest
from sqlalchemy import inspect, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import create_async_engine

from enps_survey.db.init_db import init_db, wait_for_database
from enps_survey.db.session import create_engine
from tests.conftest import make_settings


@pytest.mark.asyncio
async def test_wait_for_database_gives_up(tmp_path) -> None:
    # Parent directory does not exist, so every connect attempt fails.
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/missing/dir/db.sqlite")
    try:
        with pytest.raises(OperationalError):
            await wait_for_database(engine, attempts=3, backoff_seconds=0)
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_init_db_creates_schema(tmp_path) -> None:
    engine = create_engine(make_settings(tmp_path / "nested"))
    try:
        await wait_for_database(engine, attempts=1, backoff_seconds=0)
        await init_db(engine)
        # Idempotent on an existing schema.
        await init_db(engine)

        async with engine.connect() as conn:
            tables = await conn.run_sync(lambda c: set(inspect(c).get_table_names()))
            rows = await conn.execute(text("SELECT name FROM sqlite_master WHERE type = 'index'"))
            indexes = set(rows.scalars())
        assert {"users", "projects", "surveys"} <= tables
        assert "uq_projects_name_lower" in indexes
    finally:
        await engine.dispose()

"""
tests.conftest

Shared fixtures: an app bound to a throwaway SQLite file, an ASGI client, and
header helpers for debug users and the admin token.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta
from pathlib import Path
from typing import Any

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from sqlalchemy import update

from enps_survey.api.app import create_app
from enps_survey.db.models import Survey, utcnow
from enps_survey.settings import Settings

ADMIN_TOKEN = "test-admin-token"
BOT_TOKEN = "123456:TEST-BOT-TOKEN"


def make_settings(tmp_path: Path, **overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "environment": "test",
        "database_url": None,
        "database_file": str(tmp_path / "enps.sqlite"),
        "allow_insecure_init_data": True,
        "admin_token": ADMIN_TOKEN,
        "bot_token": BOT_TOKEN,
        "db_connect_attempts": 1,
        "db_connect_backoff_seconds": 0,
        "feature_flags": {},
    }
    values.update(overrides)
    return Settings(**values)


def user_headers(user_id: int = 999_001, first_name: str = "Test", **extra: Any) -> dict[str, str]:
    return {"x-debug-user": json.dumps({"id": user_id, "first_name": first_name, **extra})}


ADMIN_HEADERS = {"x-admin-token": ADMIN_TOKEN}


@asynccontextmanager
async def running_client(settings: Settings) -> AsyncIterator[tuple[FastAPI, httpx.AsyncClient]]:
    app = create_app(settings=settings)
    # httpx's ASGITransport does not drive lifespan; enter it explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            yield app, client


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path)


@pytest_asyncio.fixture
async def app_and_client(settings: Settings) -> AsyncIterator[tuple[FastAPI, httpx.AsyncClient]]:
    async with running_client(settings) as pair:
        yield pair


@pytest.fixture
def app(app_and_client: tuple[FastAPI, httpx.AsyncClient]) -> FastAPI:
    return app_and_client[0]


@pytest.fixture
def client(app_and_client: tuple[FastAPI, httpx.AsyncClient]) -> httpx.AsyncClient:
    return app_and_client[1]


async def create_project(client: httpx.AsyncClient, name: str = "Project Alpha", **kw: Any) -> int:
    r = await client.post("/api/projects", json={"name": name}, headers=user_headers(**kw))
    assert r.status_code in (200, 201), r.text
    return r.json()["project"]["id"]


async def start_survey(
    client: httpx.AsyncClient, project_id: int, *, user_id: int = 999_001, **body: Any
) -> dict[str, Any]:
    r = await client.post(
        "/api/surveys",
        json={"projectId": project_id, **body},
        headers=user_headers(user_id=user_id),
    )
    assert r.status_code in (200, 201), r.text
    return r.json()


async def backdate_survey(app: FastAPI, survey_id: int, age: timedelta) -> None:
    async with app.state.sessionmaker() as session:
        await session.execute(
            update(Survey).where(Survey.id == survey_id).values(created_at=utcnow() - age)
        )
        await session.commit()

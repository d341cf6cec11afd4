"""
enps_survey.api.routers.health

Liveness and readiness probes.

Responsibilities:
- `/healthz`: the process is serving HTTP.
- `/readyz`: the configured datastore answers a trivial query; reports which backend is live.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from enps_survey.api.deps import db_session

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(session: AsyncSession = Depends(db_session)) -> dict[str, str]:
    # Backend is chosen once at startup (DATABASE_URL vs local SQLite file).
    await session.execute(text("SELECT 1"))
    return {"status": "ready", "database": session.get_bind().dialect.name}

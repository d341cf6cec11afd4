"""
enps_survey.db.repositories.projects

Repository for `Project` entities.

Responsibilities:
- Search projects with per-project response counters.
- Create, rename and delete projects (deletion removes the project's surveys).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from enps_survey.db.models import Project, Survey


@dataclass(frozen=True, slots=True)
class ProjectSummary:
    id: int
    name: str
    created_at: datetime
    responses_count: int
    last_response_at: datetime | None


class ProjectRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    def _summary_query(self):
        stats = (
            select(
                Survey.project_id.label("project_id"),
                func.count(Survey.id).label("responses_count"),
                func.max(Survey.created_at).label("last_response_at"),
            )
            .group_by(Survey.project_id)
            .subquery()
        )
        stmt = select(
            Project.id,
            Project.name,
            Project.created_at,
            func.coalesce(stats.c.responses_count, 0),
            stats.c.last_response_at,
        ).outerjoin(stats, stats.c.project_id == Project.id)
        return stmt, stats

    async def search(self, *, search: str | None, limit: int) -> list[ProjectSummary]:
        stmt, stats = self._summary_query()
        term = (search or "").strip()
        if term:
            pattern = f"%{_escape_like(term)}%"
            stmt = stmt.where(func.lower(Project.name).like(func.lower(pattern), escape="/"))
        stmt = stmt.order_by(
            func.coalesce(stats.c.last_response_at, Project.created_at).desc(),
            Project.id.desc(),
        ).limit(limit)
        rows = (await self._session.execute(stmt)).all()
        return [_to_summary(row) for row in rows]

    async def summary(self, project_id: int) -> ProjectSummary | None:
        stmt, _ = self._summary_query()
        row = (await self._session.execute(stmt.where(Project.id == project_id))).first()
        return _to_summary(row) if row is not None else None

    async def get(self, project_id: int) -> Project | None:
        return await self._session.get(Project, project_id)

    async def find_by_name(self, name: str) -> Project | None:
        stmt = select(Project).where(func.lower(Project.name) == func.lower(name.strip()))
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def create(self, *, name: str, created_by: int | None) -> Project:
        project = Project(name=name.strip(), created_by=created_by)
        self._session.add(project)
        await self._session.flush()
        return project

    async def rename(self, project: Project, name: str) -> Project:
        project.name = name.strip()
        await self._session.flush()
        return project

    async def delete(self, project_id: int) -> bool:
        # Explicit survey delete keeps the cascade independent of backend FK enforcement.
        await self._session.execute(delete(Survey).where(Survey.project_id == project_id))
        result = await self._session.execute(delete(Project).where(Project.id == project_id))
        return (result.rowcount or 0) > 0


def _escape_like(term: str) -> str:
    return term.replace("/", "//").replace("%", "/%").replace("_", "/_")


def _to_summary(row) -> ProjectSummary:
    return ProjectSummary(
        id=int(row[0]),
        name=row[1],
        created_at=row[2],
        responses_count=int(row[3] or 0),
        last_response_at=row[4],
    )


# --- Module Notes -----------------------------------------------------------
# Project names are unique case-insensitively via the `uq_projects_name_lower` index;
# `find_by_name` and `search` fold case in SQL on both sides so they agree with that index
# (SQLite `lower()` folds ASCII only).

"""
enps_survey.services.project_service

Project catalogue service.

Responsibilities:
- Search projects with sanitized limits.
- Get-or-create projects by case-insensitive name (feature-flag gated).
- Admin rename and delete (delete removes every survey of the project).
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from enps_survey.db.repositories.projects import ProjectRepo, ProjectSummary
from enps_survey.observability.logging import get_logger
from enps_survey.services.errors import ConflictError, FeatureDisabledError, NotFoundError
from enps_survey.settings import Settings

log = get_logger(__name__)

DEFAULT_LIMIT = 50
MIN_LIMIT = 1
MAX_LIMIT = 100


def sanitize_limit(value: int | None) -> int:
    if value is None:
        return DEFAULT_LIMIT
    return min(max(value, MIN_LIMIT), MAX_LIMIT)


class ProjectService:
    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings
        self._projects = ProjectRepo(session)

    async def search(self, *, search: str | None, limit: int | None) -> list[ProjectSummary]:
        return await self._projects.search(search=search, limit=sanitize_limit(limit))

    async def create(self, *, name: str, user_id: int) -> tuple[ProjectSummary, bool]:
        if not self._settings.is_feature_enabled("projectCreation"):
            raise FeatureDisabledError("Project creation is disabled")

        existing = await self._projects.find_by_name(name)
        if existing is None:
            try:
                project = await self._projects.create(name=name, created_by=user_id)
                await self._session.commit()
            except IntegrityError:
                # Lost a race against a concurrent create with the same name.
                await self._session.rollback()
                existing = await self._projects.find_by_name(name)
                if existing is None:
                    raise
            else:
                log.info("project.created", project_id=project.id, name=project.name)
                return await self._summary(project.id), True

        return await self._summary(existing.id), False

    async def rename(self, *, project_id: int, name: str) -> ProjectSummary:
        project = await self._projects.get(project_id)
        if project is None:
            raise NotFoundError("Project not found")

        clash = await self._projects.find_by_name(name)
        if clash is not None and clash.id != project_id:
            raise ConflictError("Project with this name already exists")
        try:
            await self._projects.rename(project, name)
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            raise ConflictError("Project with this name already exists") from e

        log.info("project.renamed", project_id=project_id, name=project.name)
        return await self._summary(project_id)

    async def delete(self, *, project_id: int) -> None:
        if not await self._projects.delete(project_id):
            raise NotFoundError("Project not found")
        await self._session.commit()
        log.info("project.deleted", project_id=project_id)

    async def _summary(self, project_id: int) -> ProjectSummary:
        summary = await self._projects.summary(project_id)
        if summary is None:
            raise NotFoundError("Project not found")
        return summary

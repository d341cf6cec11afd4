"""
enps_survey.services.survey_service

Survey lifecycle service (transaction + business-rule owner).

Responsibilities:
- Idempotent "start survey" for a (user, project, date) triple.
- Partial answer updates guarded by the edit window and the editing feature flag.
- Admin overrides: edit without a window, delete surveys, list project responses.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import date, datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from enps_survey.db.models import Survey, utcnow
from enps_survey.db.repositories.projects import ProjectRepo
from enps_survey.db.repositories.surveys import SurveyRepo
from enps_survey.observability.logging import get_logger
from enps_survey.services.answers import apply_answers, can_edit, normalize_answers
from enps_survey.services.errors import (
    EditWindowExpiredError,
    FeatureDisabledError,
    NotFoundError,
)
from enps_survey.settings import Settings

log = get_logger(__name__)


class SurveyService:
    def __init__(
        self,
        *,
        session: AsyncSession,
        settings: Settings,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._session = session
        self._settings = settings
        self._clock = clock

        self._surveys = SurveyRepo(session)
        self._projects = ProjectRepo(session)

    def can_edit(self, survey: Survey) -> bool:
        return can_edit(survey.created_at, now=self._clock(), window=self._settings.edit_window)

    async def list_surveys(self, *, user_id: int, project_id: int | None = None) -> list[Survey]:
        return await self._surveys.list_for_user(user_id, project_id=project_id)

    async def get_survey(self, *, survey_id: int, user_id: int) -> Survey:
        survey = await self._surveys.get_for_user(survey_id, user_id)
        if survey is None:
            raise NotFoundError("Survey not found")
        return survey

    async def ensure_survey(
        self,
        *,
        user_id: int,
        project_id: int,
        survey_date: date | None = None,
    ) -> tuple[Survey, bool]:
        if await self._projects.get(project_id) is None:
            raise NotFoundError("Project not found")

        now = self._clock()
        survey, was_created = await self._surveys.create_or_get(
            user_id=user_id,
            project_id=project_id,
            survey_date=survey_date or now.date(),
            now=now,
        )
        await self._session.commit()
        if was_created:
            log.info("survey.created", survey_id=survey.id, project_id=project_id)
        return survey, was_created

    async def update_survey(
        self, *, survey_id: int, user_id: int, updates: Mapping[str, Any]
    ) -> Survey:
        if not self._settings.is_feature_enabled("responseEditing"):
            raise FeatureDisabledError("Survey editing is disabled")

        survey = await self.get_survey(survey_id=survey_id, user_id=user_id)
        if not self.can_edit(survey):
            raise EditWindowExpiredError("Survey can no longer be edited")

        return await self._write_answers(survey, updates, actor="user")

    async def admin_update_survey(self, *, survey_id: int, updates: Mapping[str, Any]) -> Survey:
        survey = await self._surveys.get(survey_id)
        if survey is None:
            raise NotFoundError("Survey not found")
        return await self._write_answers(survey, updates, actor="admin")

    async def delete_survey(self, *, survey_id: int) -> None:
        if not await self._surveys.delete(survey_id):
            raise NotFoundError("Survey not found")
        await self._session.commit()
        log.info("survey.deleted", survey_id=survey_id)

    async def list_project_responses(
        self, *, project_id: int, completed_only: bool = False
    ) -> list[Survey]:
        if await self._projects.get(project_id) is None:
            raise NotFoundError("Project not found")
        return await self._surveys.list_for_project(project_id, completed_only=completed_only)

    async def _write_answers(
        self, survey: Survey, updates: Mapping[str, Any], *, actor: str
    ) -> Survey:
        answers = normalize_answers(updates)
        if apply_answers(survey, answers):
            survey.updated_at = self._clock()
            await self._session.commit()
            log.info(
                "survey.updated",
                survey_id=survey.id,
                actor=actor,
                fields=sorted(str(f) for f in answers),
            )
        return survey


# --- Module Notes -----------------------------------------------------------
# `updated_at` moves only when a column value really changes; the edit window is always
# measured from `created_at`.

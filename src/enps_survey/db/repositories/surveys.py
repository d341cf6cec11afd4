"""
enps_survey.db.repositories.surveys

Repository for `Survey` entities.

Responsibilities:
- Idempotent get-or-create keyed by (user, project, survey date).
- Fetch surveys for their author or for admins (with respondent info).
- Delete individual surveys.
"""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import and_, delete, desc, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from enps_survey.db.models import AnswerField, Survey, answer_column
from enps_survey.db.upsert import dialect_insert


class SurveyRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    def _select(self):
        return select(Survey).options(joinedload(Survey.project))

    async def get(self, survey_id: int) -> Survey | None:
        stmt = self._select().options(joinedload(Survey.user)).where(Survey.id == survey_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def get_for_user(self, survey_id: int, user_id: int) -> Survey | None:
        stmt = self._select().where(Survey.id == survey_id, Survey.user_id == user_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list_for_user(self, user_id: int, *, project_id: int | None = None) -> list[Survey]:
        stmt = self._select().where(Survey.user_id == user_id)
        if project_id is not None:
            stmt = stmt.where(Survey.project_id == project_id)
        stmt = stmt.order_by(desc(Survey.created_at), desc(Survey.id))
        return list((await self._session.execute(stmt)).scalars().all())

    async def list_for_project(
        self, project_id: int, *, completed_only: bool = False
    ) -> list[Survey]:
        stmt = (
            self._select()
            .options(joinedload(Survey.user))
            .where(Survey.project_id == project_id)
        )
        if completed_only:
            stmt = stmt.where(and_(*(answer_column(f).is_not(None) for f in AnswerField)))
        stmt = stmt.order_by(desc(Survey.created_at), desc(Survey.id))
        return list((await self._session.execute(stmt)).scalars().all())

    async def create_or_get(
        self,
        *,
        user_id: int,
        project_id: int,
        survey_date: date,
        now: datetime,
    ) -> tuple[Survey, bool]:
        # Insert-if-absent: on a unique-key conflict the insert silently no-ops and
        # RETURNING yields nothing, so the row is always re-read by its unique key.
        stmt = (
            dialect_insert(self._session, Survey)
            .values(
                user_id=user_id,
                project_id=project_id,
                survey_date=survey_date,
                created_at=now,
                updated_at=now,
            )
            .on_conflict_do_nothing(index_elements=["user_id", "project_id", "survey_date"])
            .returning(Survey.id)
        )
        inserted_id = (await self._session.execute(stmt)).scalar_one_or_none()

        lookup = self._select().where(
            Survey.user_id == user_id,
            Survey.project_id == project_id,
            Survey.survey_date == survey_date,
        )
        survey = (await self._session.execute(lookup)).scalar_one_or_none()
        if survey is None:
            raise RuntimeError("Failed to load survey after creation")
        return survey, inserted_id is not None

    async def delete(self, survey_id: int) -> bool:
        result = await self._session.execute(delete(Survey).where(Survey.id == survey_id))
        return (result.rowcount or 0) > 0


# --- Module Notes -----------------------------------------------------------
# Answer writes happen on loaded ORM instances (`Survey.set_answer`) so the service layer
# can tell whether anything actually changed before bumping `updated_at`.

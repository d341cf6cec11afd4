"""
enps_survey.db.repositories.stats

Read-only aggregation queries for the admin dashboard.

Responsibilities:
- Compute per-project response counters, null-safe rating averages and the
  contribution breakdown in a single grouped query.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy import case, distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from enps_survey.db.models import (
    RATING_FIELDS,
    AnswerField,
    ContributionValue,
    Project,
    Survey,
    answer_column,
)


@dataclass(frozen=True, slots=True)
class ProjectStats:
    id: int
    name: str
    created_at: datetime
    responses_count: int
    last_response_at: datetime | None
    unique_respondents: int
    averages: dict[AnswerField, float | None] = field(default_factory=dict)
    contribution_breakdown: dict[ContributionValue, int] = field(default_factory=dict)


class StatsRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def project_stats(self) -> list[ProjectStats]:
        # SQL AVG ignores NULLs and yields NULL when there are no samples.
        averages = [func.avg(answer_column(f)) for f in RATING_FIELDS]
        breakdown = [
            func.sum(case((Survey.contribution_valued == value, 1), else_=0))
            for value in ContributionValue
        ]
        stmt = (
            select(
                Project.id,
                Project.name,
                Project.created_at,
                func.count(Survey.id),
                func.max(Survey.created_at),
                func.count(distinct(Survey.user_id)),
                *averages,
                *breakdown,
            )
            .outerjoin(Survey, Survey.project_id == Project.id)
            .group_by(Project.id, Project.name, Project.created_at)
            .order_by(
                func.coalesce(func.max(Survey.created_at), Project.created_at).desc(),
                Project.id.desc(),
            )
        )

        result: list[ProjectStats] = []
        for row in (await self._session.execute(stmt)).all():
            avg_values = row[6 : 6 + len(RATING_FIELDS)]
            counts = row[6 + len(RATING_FIELDS) :]
            result.append(
                ProjectStats(
                    id=int(row[0]),
                    name=row[1],
                    created_at=row[2],
                    responses_count=int(row[3] or 0),
                    last_response_at=row[4],
                    unique_respondents=int(row[5] or 0),
                    averages={
                        f: (float(v) if v is not None else None)
                        for f, v in zip(RATING_FIELDS, avg_values, strict=True)
                    },
                    contribution_breakdown={
                        value: int(c or 0)
                        for value, c in zip(ContributionValue, counts, strict=True)
                    },
                )
            )
        return result


# --- Module Notes -----------------------------------------------------------
# Postgres returns AVG as Decimal; values are normalised to float here so the API layer
# never sees backend-specific numeric types.

"""
enps_survey.services.statistics

Admin dashboard aggregates.

Responsibilities:
- Load per-project stats (counts, null-safe averages, contribution breakdown).
- Compute the portfolio-wide score as a response-weighted mean of project means.
"""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from enps_survey.db.models import AnswerField
from enps_survey.db.repositories.stats import ProjectStats, StatsRepo


def portfolio_score(
    projects: Iterable[ProjectStats],
    field: AnswerField = AnswerField.project_recommendation,
) -> float | None:
    weighted_sum = 0.0
    weight = 0
    for project in projects:
        mean = project.averages.get(field)
        if project.responses_count <= 0 or mean is None:
            continue
        weighted_sum += mean * project.responses_count
        weight += project.responses_count
    if weight == 0:
        return None
    return weighted_sum / weight


class StatisticsService:
    def __init__(self, *, session: AsyncSession) -> None:
        self._stats = StatsRepo(session)

    async def project_stats(self) -> list[ProjectStats]:
        return await self._stats.project_stats()

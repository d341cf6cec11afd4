from __future__ import annotations

from datetime import datetime

import pytest

from enps_survey.db.models import AnswerField, ContributionValue
from enps_survey.db.repositories.stats import ProjectStats
from enps_survey.services.statistics import portfolio_score


def stats(responses: int, recommendation: float | None, manager: float | None = None) -> ProjectStats:
    return ProjectStats(
        id=1,
        name="p",
        created_at=datetime(2024, 1, 1),
        responses_count=responses,
        last_response_at=None,
        unique_respondents=responses,
        averages={
            AnswerField.project_recommendation: recommendation,
            AnswerField.manager_effectiveness: manager,
            AnswerField.team_comfort: None,
            AnswerField.process_organization: None,
        },
        contribution_breakdown={v: 0 for v in ContributionValue},
    )


def test_weighted_by_response_count() -> None:
    assert portfolio_score([stats(3, 7.0), stats(1, 10.0)]) == pytest.approx(7.75)


def test_projects_without_data_are_skipped() -> None:
    assert portfolio_score([stats(0, None), stats(2, None), stats(4, 5.0)]) == pytest.approx(5.0)


def test_no_data_yields_none() -> None:
    assert portfolio_score([]) is None
    assert portfolio_score([stats(0, None)]) is None


def test_other_rating_field() -> None:
    score = portfolio_score(
        [stats(1, 9.0, manager=4.0), stats(3, 9.0, manager=8.0)],
        field=AnswerField.manager_effectiveness,
    )
    assert score == pytest.approx(7.0)

"""
enps_survey.api.schemas

Request/response models shared by the API routers.

Responsibilities:
- Define the JSON contract (camelCase on the wire, snake_case in Python).
- Validate answer payloads (ratings 0-10, text <= 2000 chars, contribution enum).
- Render ORM rows and repository dataclasses into response models.
"""

from __future__ import annotations

import re
from datetime import UTC, date, datetime
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

from enps_survey.db.models import AnswerField, ContributionValue, Survey
from enps_survey.db.repositories.projects import ProjectSummary
from enps_survey.db.repositories.stats import ProjectStats

Rating = Annotated[int, Field(ge=0, le=10, strict=True)]
AnswerText = Annotated[str, Field(max_length=2000)]
ProjectName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=120)]

_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


def _iso_date(value: object) -> object:
    # Only YYYY-MM-DD strings; numeric timestamps and loose formats are rejected.
    if isinstance(value, date) or (isinstance(value, str) and _ISO_DATE.fullmatch(value)):
        return value
    raise ValueError("surveyDate must be a YYYY-MM-DD string")


SurveyDate = Annotated[date, BeforeValidator(_iso_date)]


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _utc(value: datetime | None) -> datetime | None:
    # Stored as naive UTC; emit an explicit offset so clients don't read it as local time.
    if value is None:
        return None
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value


# --- Requests ---------------------------------------------------------------


class SurveyAnswersIn(ApiModel):
    """Sparse answer update: only keys present in the JSON body are written."""

    project_recommendation: Rating | None = None
    project_improvement: AnswerText | None = None
    manager_effectiveness: Rating | None = None
    manager_improvement: AnswerText | None = None
    team_comfort: Rating | None = None
    team_improvement: AnswerText | None = None
    process_organization: Rating | None = None
    process_obstacles: AnswerText | None = None
    contribution_valued: ContributionValue | None = None
    improvement_ideas: AnswerText | None = None

    def provided(self) -> dict[str, object]:
        return self.model_dump(exclude_unset=True)


class SurveyCreateIn(ApiModel):
    project_id: Annotated[int, Field(gt=0, strict=True)]
    survey_date: SurveyDate | None = None


class ProjectIn(ApiModel):
    name: ProjectName


# --- Responses --------------------------------------------------------------


class SurveyOut(ApiModel):
    id: int
    user_id: int
    project_id: int
    project_name: str
    survey_date: date
    project_recommendation: int | None = None
    project_improvement: str | None = None
    manager_effectiveness: int | None = None
    manager_improvement: str | None = None
    team_comfort: int | None = None
    team_improvement: str | None = None
    process_organization: int | None = None
    process_obstacles: str | None = None
    contribution_valued: ContributionValue | None = None
    improvement_ideas: str | None = None
    created_at: datetime
    updated_at: datetime
    can_edit: bool
    is_complete: bool


class RespondentOut(ApiModel):
    id: int
    first_name: str
    last_name: str | None = None
    username: str | None = None


class AdminSurveyOut(SurveyOut):
    user: RespondentOut


class ProjectOut(ApiModel):
    id: int
    name: str
    created_at: datetime
    responses_count: int
    last_response_at: datetime | None = None


class AveragesOut(ApiModel):
    project_recommendation: float | None = None
    manager_effectiveness: float | None = None
    team_comfort: float | None = None
    process_organization: float | None = None


class ContributionBreakdownOut(ApiModel):
    yes: int = 0
    partial: int = 0
    no: int = 0


class AdminProjectOut(ProjectOut):
    unique_respondents: int
    averages: AveragesOut
    contribution_breakdown: ContributionBreakdownOut


def survey_out(survey: Survey, *, can_edit: bool) -> SurveyOut:
    return SurveyOut(
        id=survey.id,
        user_id=survey.user_id,
        project_id=survey.project_id,
        project_name=survey.project.name,
        survey_date=survey.survey_date,
        created_at=_utc(survey.created_at),
        updated_at=_utc(survey.updated_at),
        can_edit=can_edit,
        is_complete=survey.is_complete,
        **{str(field): survey.get_answer(field) for field in AnswerField},
    )


def admin_survey_out(survey: Survey, *, can_edit: bool) -> AdminSurveyOut:
    base = survey_out(survey, can_edit=can_edit)
    return AdminSurveyOut(
        **base.model_dump(),
        user=RespondentOut(
            id=survey.user.id,
            first_name=survey.user.first_name,
            last_name=survey.user.last_name,
            username=survey.user.username,
        ),
    )


def project_out(summary: ProjectSummary) -> ProjectOut:
    return ProjectOut(
        id=summary.id,
        name=summary.name,
        created_at=_utc(summary.created_at),
        responses_count=summary.responses_count,
        last_response_at=_utc(summary.last_response_at),
    )


def admin_project_out(stats: ProjectStats) -> AdminProjectOut:
    return AdminProjectOut(
        id=stats.id,
        name=stats.name,
        created_at=_utc(stats.created_at),
        responses_count=stats.responses_count,
        last_response_at=_utc(stats.last_response_at),
        unique_respondents=stats.unique_respondents,
        averages=AveragesOut(**{str(f): v for f, v in stats.averages.items()}),
        contribution_breakdown=ContributionBreakdownOut(
            **{str(k): v for k, v in stats.contribution_breakdown.items()}
        ),
    )


# --- Module Notes -----------------------------------------------------------
# Response models are serialized by alias (FastAPI default), so Python code stays snake_case
# while the Mini-App client keeps its camelCase contract.

"""
enps_survey.api.routers.surveys

Survey endpoints for Mini-App users.

Responsibilities:
- List and fetch the caller's own surveys.
- Start (get-or-create) the survey for a project and date.
- Apply partial answer updates inside the edit window.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_200_OK, HTTP_201_CREATED

from enps_survey.api.deps import db_session, settings_dep
from enps_survey.api.schemas import (
    ApiModel,
    SurveyAnswersIn,
    SurveyCreateIn,
    SurveyOut,
    survey_out,
)
from enps_survey.auth.deps import get_current_user
from enps_survey.auth.models import TelegramUser
from enps_survey.services.survey_service import SurveyService
from enps_survey.settings import Settings

router = APIRouter(prefix="/api/surveys", tags=["surveys"])


class SurveyListResponse(ApiModel):
    surveys: list[SurveyOut]


class SurveyResponse(ApiModel):
    survey: SurveyOut


class SurveyCreationResponse(ApiModel):
    record: SurveyOut
    was_created: bool


def _service(session: AsyncSession, settings: Settings) -> SurveyService:
    return SurveyService(session=session, settings=settings)


@router.get("", response_model=SurveyListResponse)
async def list_surveys(
    project_id: int | None = Query(default=None, alias="projectId"),
    user: TelegramUser = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> SurveyListResponse:
    svc = _service(session, settings)
    surveys = await svc.list_surveys(user_id=user.id, project_id=project_id)
    return SurveyListResponse(surveys=[survey_out(s, can_edit=svc.can_edit(s)) for s in surveys])


@router.get("/{survey_id}", response_model=SurveyResponse)
async def get_survey(
    survey_id: int,
    user: TelegramUser = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> SurveyResponse:
    svc = _service(session, settings)
    survey = await svc.get_survey(survey_id=survey_id, user_id=user.id)
    return SurveyResponse(survey=survey_out(survey, can_edit=svc.can_edit(survey)))


@router.post("", response_model=SurveyCreationResponse, status_code=HTTP_201_CREATED)
async def start_survey(
    body: SurveyCreateIn,
    response: Response,
    user: TelegramUser = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> SurveyCreationResponse:
    svc = _service(session, settings)
    survey, was_created = await svc.ensure_survey(
        user_id=user.id, project_id=body.project_id, survey_date=body.survey_date
    )
    if not was_created:
        response.status_code = HTTP_200_OK
    return SurveyCreationResponse(
        record=survey_out(survey, can_edit=svc.can_edit(survey)), was_created=was_created
    )


@router.patch("/{survey_id}", response_model=SurveyResponse)
async def update_survey(
    survey_id: int,
    body: SurveyAnswersIn,
    user: TelegramUser = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> SurveyResponse:
    svc = _service(session, settings)
    survey = await svc.update_survey(survey_id=survey_id, user_id=user.id, updates=body.provided())
    return SurveyResponse(survey=survey_out(survey, can_edit=svc.can_edit(survey)))

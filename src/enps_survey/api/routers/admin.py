"""
enps_survey.api.routers.admin

Admin endpoints (static admin token).

Responsibilities:
- Dashboard stats per project plus the portfolio-wide score.
- Project rename/delete and per-project response listing.
- Survey edit without the edit window, and survey deletion.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_204_NO_CONTENT, HTTP_404_NOT_FOUND, HTTP_503_SERVICE_UNAVAILABLE

from enps_survey.api.deps import db_session, settings_dep
from enps_survey.api.schemas import (
    AdminProjectOut,
    AdminSurveyOut,
    ApiModel,
    ProjectIn,
    ProjectOut,
    SurveyAnswersIn,
    SurveyOut,
    admin_project_out,
    admin_survey_out,
    project_out,
    survey_out,
)
from enps_survey.auth.deps import require_admin
from enps_survey.services.project_service import ProjectService
from enps_survey.services.statistics import StatisticsService, portfolio_score
from enps_survey.services.survey_service import SurveyService
from enps_survey.settings import Settings

router = APIRouter(prefix="/api/admin", tags=["admin"])
protected = APIRouter(dependencies=[Depends(require_admin)])


class AdminProjectListResponse(ApiModel):
    projects: list[AdminProjectOut]
    overall_score: float | None = None


class AdminResponsesResponse(ApiModel):
    surveys: list[AdminSurveyOut]


class ProjectResponse(ApiModel):
    project: ProjectOut


class SurveyResponse(ApiModel):
    survey: SurveyOut


class DebugTokenResponse(ApiModel):
    token: str


@router.get("/debug-token", response_model=DebugTokenResponse)
async def debug_token(settings: Settings = Depends(settings_dep)) -> DebugTokenResponse:
    # Local-development convenience only; hidden unless insecure init data is allowed.
    if not settings.allow_insecure_init_data:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Not found")
    if not settings.admin_token:
        raise HTTPException(
            status_code=HTTP_503_SERVICE_UNAVAILABLE, detail="Admin token is not configured"
        )
    return DebugTokenResponse(token=settings.admin_token)


@protected.get("/projects", response_model=AdminProjectListResponse)
async def list_admin_projects(
    session: AsyncSession = Depends(db_session),
) -> AdminProjectListResponse:
    stats = await StatisticsService(session=session).project_stats()
    return AdminProjectListResponse(
        projects=[admin_project_out(s) for s in stats],
        overall_score=portfolio_score(stats),
    )


@protected.patch("/projects/{project_id}", response_model=ProjectResponse)
async def rename_project(
    project_id: int,
    body: ProjectIn,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> ProjectResponse:
    project = await ProjectService(session=session, settings=settings).rename(
        project_id=project_id, name=body.name
    )
    return ProjectResponse(project=project_out(project))


@protected.delete("/projects/{project_id}", status_code=HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: int,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> Response:
    await ProjectService(session=session, settings=settings).delete(project_id=project_id)
    return Response(status_code=HTTP_204_NO_CONTENT)


@protected.get("/projects/{project_id}/responses", response_model=AdminResponsesResponse)
async def list_project_responses(
    project_id: int,
    completed: bool = Query(default=False),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> AdminResponsesResponse:
    svc = SurveyService(session=session, settings=settings)
    surveys = await svc.list_project_responses(project_id=project_id, completed_only=completed)
    return AdminResponsesResponse(
        surveys=[admin_survey_out(s, can_edit=svc.can_edit(s)) for s in surveys]
    )


@protected.patch("/surveys/{survey_id}", response_model=SurveyResponse)
async def admin_update_survey(
    survey_id: int,
    body: SurveyAnswersIn,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> SurveyResponse:
    svc = SurveyService(session=session, settings=settings)
    survey = await svc.admin_update_survey(survey_id=survey_id, updates=body.provided())
    return SurveyResponse(survey=survey_out(survey, can_edit=svc.can_edit(survey)))


@protected.delete("/surveys/{survey_id}", status_code=HTTP_204_NO_CONTENT)
async def delete_survey(
    survey_id: int,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> Response:
    await SurveyService(session=session, settings=settings).delete_survey(survey_id=survey_id)
    return Response(status_code=HTTP_204_NO_CONTENT)


router.include_router(protected)


# --- Module Notes -----------------------------------------------------------
# `canEdit` in admin payloads still reports the user-facing window; admins are not bound by it.

"""
enps_survey.api.routers.projects

Project endpoints for Mini-App users.

Responsibilities:
- Search projects by name.
- Get-or-create a project by name (201 when created, 200 when it already existed).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_200_OK, HTTP_201_CREATED

from enps_survey.api.deps import db_session, settings_dep
from enps_survey.api.schemas import ApiModel, ProjectIn, ProjectOut, project_out
from enps_survey.auth.deps import get_current_user
from enps_survey.auth.models import TelegramUser
from enps_survey.services.project_service import ProjectService
from enps_survey.settings import Settings

router = APIRouter(prefix="/api/projects", tags=["projects"])


class ProjectListResponse(ApiModel):
    projects: list[ProjectOut]


class ProjectResponse(ApiModel):
    project: ProjectOut


@router.get("", response_model=ProjectListResponse, dependencies=[Depends(get_current_user)])
async def list_projects(
    search: str | None = Query(default=None, max_length=120),
    limit: int | None = Query(default=None),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> ProjectListResponse:
    projects = await ProjectService(session=session, settings=settings).search(
        search=search, limit=limit
    )
    return ProjectListResponse(projects=[project_out(p) for p in projects])


@router.post("", response_model=ProjectResponse, status_code=HTTP_201_CREATED)
async def create_project(
    body: ProjectIn,
    response: Response,
    user: TelegramUser = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> ProjectResponse:
    project, created = await ProjectService(session=session, settings=settings).create(
        name=body.name, user_id=user.id
    )
    if not created:
        response.status_code = HTTP_200_OK
    return ProjectResponse(project=project_out(project))

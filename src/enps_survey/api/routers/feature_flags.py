from __future__ import annotations

from fastapi import APIRouter, Depends

from enps_survey.api.deps import settings_dep
from enps_survey.api.schemas import ApiModel
from enps_survey.auth.deps import get_current_user
from enps_survey.settings import Settings

router = APIRouter(
    prefix="/api/feature-flags",
    tags=["feature-flags"],
    dependencies=[Depends(get_current_user)],
)


class FeatureFlagsResponse(ApiModel):
    feature_flags: dict[str, bool]


@router.get("", response_model=FeatureFlagsResponse)
async def get_feature_flags(settings: Settings = Depends(settings_dep)) -> FeatureFlagsResponse:
    return FeatureFlagsResponse(feature_flags=settings.resolved_feature_flags)

"""
enps_survey.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Convert `x-telegram-init-data` (or `x-debug-user` in insecure mode) into a `TelegramUser`.
- Upsert the caller into `users` on every authenticated request.
- Gate admin endpoints behind the static admin token.
"""

from __future__ import annotations

import hmac
import json

import structlog
from fastapi import Depends, Header, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_503_SERVICE_UNAVAILABLE

from enps_survey.api.deps import db_session, settings_dep
from enps_survey.auth.models import TelegramUser
from enps_survey.auth.telegram import InitDataValidationError, validate_init_data
from enps_survey.db.repositories.users import UserRepo
from enps_survey.settings import Settings

_bearer = HTTPBearer(auto_error=False)


def _debug_user(raw: str) -> TelegramUser:
    try:
        user = TelegramUser.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as e:
        raise HTTPException(
            status_code=HTTP_401_UNAUTHORIZED, detail="Failed to parse debug user payload"
        ) from e
    if not user.first_name:
        raise HTTPException(
            status_code=HTTP_401_UNAUTHORIZED, detail="Failed to parse debug user payload"
        )
    return user


def resolve_telegram_user(
    *, init_data: str | None, debug_user: str | None, settings: Settings
) -> TelegramUser:
    if not init_data:
        if not settings.allow_insecure_init_data:
            raise HTTPException(
                status_code=HTTP_401_UNAUTHORIZED, detail="Missing Telegram init data header"
            )
        if not debug_user:
            raise HTTPException(
                status_code=HTTP_401_UNAUTHORIZED,
                detail="Missing debug user header in insecure mode",
            )
        return _debug_user(debug_user)

    if not settings.bot_token:
        raise HTTPException(
            status_code=HTTP_401_UNAUTHORIZED,
            detail="BOT_TOKEN must be provided unless ALLOW_INSECURE_INIT_DATA is true",
        )
    try:
        return validate_init_data(init_data, settings.bot_token).user
    except InitDataValidationError as e:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail=str(e)) from e


async def get_current_user(
    x_telegram_init_data: str | None = Header(default=None),
    x_debug_user: str | None = Header(default=None),
    settings: Settings = Depends(settings_dep),
    session: AsyncSession = Depends(db_session),
) -> TelegramUser:
    user = resolve_telegram_user(
        init_data=x_telegram_init_data, debug_user=x_debug_user, settings=settings
    )
    await UserRepo(session).upsert(user)
    await session.commit()
    structlog.contextvars.bind_contextvars(user_id=user.id)
    return user


def require_admin(
    x_admin_token: str | None = Header(default=None),
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(settings_dep),
) -> None:
    if not settings.admin_token:
        raise HTTPException(
            status_code=HTTP_503_SERVICE_UNAVAILABLE, detail="Admin access is not configured"
        )
    token = x_admin_token or (creds.credentials.strip() if creds is not None else None)
    if not token or not hmac.compare_digest(token.encode(), settings.admin_token.encode()):
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Invalid admin token")


# --- Module Notes -----------------------------------------------------------
# Admin callers have no Telegram identity; admin routes depend on `require_admin` only.

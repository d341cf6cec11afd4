"""
enps_survey.api.errors

Exception handlers rendering every failure as `{error, details?}`.

Responsibilities:
- Map service errors to their declared HTTP status.
- Report request validation failures as 400 with pydantic error details.
- Normalise HTTPException bodies and hide unhandled errors behind a 500.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_500_INTERNAL_SERVER_ERROR

from enps_survey.observability.logging import get_logger
from enps_survey.services.errors import ServiceError

log = get_logger(__name__)


def error_response(status_code: int, error: str, details: Any = None) -> JSONResponse:
    body: dict[str, Any] = {"error": error}
    if details is not None:
        body["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content=body)


async def _service_error(_: Request, exc: ServiceError) -> JSONResponse:
    return error_response(exc.status_code, exc.message, exc.details)


async def _validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(HTTP_400_BAD_REQUEST, "Invalid request payload", exc.errors())


async def _http_error(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    response = error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def _unhandled_error(_: Request, exc: Exception) -> JSONResponse:
    log.exception("request.unhandled_error", error=str(exc))
    return error_response(HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, _service_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error)

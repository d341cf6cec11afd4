"""
enps_survey.services.errors

Service-layer exception hierarchy.

Responsibilities:
- Give each business failure a type and an HTTP status so the API layer can render
  `{error, details?}` without inspecting messages.
"""

from __future__ import annotations

from typing import Any

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
)


class ServiceError(Exception):
    status_code: int = HTTP_400_BAD_REQUEST

    def __init__(self, message: str, *, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class NotFoundError(ServiceError):
    status_code = HTTP_404_NOT_FOUND


class FeatureDisabledError(ServiceError):
    status_code = HTTP_403_FORBIDDEN


class EditWindowExpiredError(ServiceError):
    status_code = HTTP_403_FORBIDDEN


class ConflictError(ServiceError):
    status_code = HTTP_409_CONFLICT

"""
enps_survey.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`TelegramUser`) injected into endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, StrictInt


class TelegramUser(BaseModel):
    """
    Telegram user object as sent in Mini-App init data (snake_case, Telegram's own shape).
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: StrictInt
    first_name: str = ""
    last_name: str | None = None
    username: str | None = None
    language_code: str | None = None
    photo_url: str | None = None


# --- Module Notes -----------------------------------------------------------
# Unknown Telegram fields (is_premium, allows_write_to_pm, ...) are ignored on purpose.

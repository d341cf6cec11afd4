"""
enps_survey.auth.telegram

Telegram Mini-App init-data validation.

Responsibilities:
- Parse the URL-encoded init-data string sent by the WebApp.
- Verify its HMAC-SHA256 signature against the bot token.
- Extract the signed Telegram user.

Note:
- The current scheme derives the secret as HMAC_SHA256("WebAppData", bot_token); the
  older SHA256(bot_token) secret is still accepted for clients signed that way.
"""

from __future__ import annotations

import hashlib
import hmac
import json
from dataclasses import dataclass
from urllib.parse import parse_qsl

from pydantic import ValidationError

from enps_survey.auth.models import TelegramUser


class InitDataValidationError(Exception):
    pass


@dataclass(frozen=True, slots=True)
class TelegramAuthPayload:
    user: TelegramUser
    query: dict[str, str]


def parse_init_data(raw: str) -> dict[str, str]:
    return dict(parse_qsl(raw, keep_blank_values=True))


def data_check_string(fields: dict[str, str]) -> str:
    return "\n".join(f"{key}={fields[key]}" for key in sorted(fields) if key != "hash")


def _candidate_secrets(bot_token: str) -> list[bytes]:
    webapp_secret = hmac.new(b"WebAppData", bot_token.encode(), hashlib.sha256).digest()
    legacy_secret = hashlib.sha256(bot_token.encode()).digest()
    return [webapp_secret, legacy_secret]


def sign_init_data(fields: dict[str, str], bot_token: str) -> str:
    """Hex signature for `fields` using the WebAppData-derived secret."""
    secret = _candidate_secrets(bot_token)[0]
    return hmac.new(secret, data_check_string(fields).encode(), hashlib.sha256).hexdigest()


def validate_init_data(raw: str, bot_token: str) -> TelegramAuthPayload:
    fields = parse_init_data(raw)
    hash_hex = fields.get("hash")
    if not hash_hex:
        raise InitDataValidationError("Missing hash in init data")

    try:
        expected = bytes.fromhex(hash_hex)
    except ValueError as e:
        raise InitDataValidationError("Invalid init data hash") from e

    payload = data_check_string(fields).encode()
    if not any(
        hmac.compare_digest(hmac.new(secret, payload, hashlib.sha256).digest(), expected)
        for secret in _candidate_secrets(bot_token)
    ):
        raise InitDataValidationError("Invalid init data hash")

    user_raw = fields.get("user")
    if not user_raw:
        raise InitDataValidationError("Missing user information in init data")

    try:
        user = TelegramUser.model_validate(json.loads(user_raw))
    except json.JSONDecodeError as e:
        raise InitDataValidationError("Failed to parse Telegram user payload") from e
    except ValidationError as e:
        raise InitDataValidationError("Invalid Telegram user payload") from e

    return TelegramAuthPayload(user=user, query=fields)


# --- Module Notes -----------------------------------------------------------
# `sign_init_data` exists for tests and local tooling that need to mint valid init data.

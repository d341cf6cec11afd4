"""
enps_survey.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (bot token, admin token).
- Resolve the datastore (Postgres vs local SQLite) once, at process start.
- Offer a cached settings instance for the process entrypoint.
"""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url

DEFAULT_FEATURE_FLAGS: dict[str, bool] = {
    "analyticsDashboard": True,
    "projectCreation": True,
    "responseEditing": True,
}

_LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})


class Settings(BaseSettings):
    """
    Env names match the deployment contract (PORT, BOT_TOKEN, DATABASE_URL, ...),
    so no prefix is applied.
    """

    model_config = SettingsConfigDict(case_sensitive=False, extra="ignore")

    environment: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "enps-survey"
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 3000

    # Auth
    bot_token: str = Field(default="", repr=False)
    allow_insecure_init_data: bool = False
    admin_token: str = Field(default="", repr=False)

    # Persistence
    database_url: str | None = Field(default=None, repr=False)
    database_file: str = "data/enps.sqlite"
    db_connect_attempts: int = Field(default=5, ge=1)
    db_connect_backoff_seconds: float = Field(default=1.0, ge=0)
    db_auto_create: bool = True

    # Survey rules
    edit_window_hours: float = Field(default=24, gt=0)

    # Overrides merged on top of DEFAULT_FEATURE_FLAGS; parsed from a JSON object.
    feature_flags: dict[str, bool] = Field(default_factory=dict)

    @property
    def edit_window(self) -> timedelta:
        return timedelta(hours=self.edit_window_hours)

    @property
    def resolved_feature_flags(self) -> dict[str, bool]:
        return {**DEFAULT_FEATURE_FLAGS, **self.feature_flags}

    def is_feature_enabled(self, name: str) -> bool:
        return self.resolved_feature_flags.get(name, False)

    @property
    def uses_postgres(self) -> bool:
        return bool(self.database_url)

    @property
    def sqlalchemy_url(self) -> URL:
        if self.database_url:
            url = make_url(self.database_url)
            # Hosted Postgres URLs come as postgres:// or postgresql://; always use asyncpg.
            return url.set(drivername="postgresql+asyncpg").difference_update_query(["sslmode"])
        return URL.create("sqlite+aiosqlite", database=str(Path(self.database_file)))

    @property
    def connect_args(self) -> dict[str, Any]:
        if not self.database_url:
            return {}
        url = make_url(self.database_url)
        sslmode = url.query.get("sslmode")
        if sslmode == "disable" or (sslmode is None and url.host in _LOCAL_HOSTS):
            return {}
        return {"ssl": "require"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars; request handlers read settings from app.state instead.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Settings are attached to `app.state.settings` by the app factory so tests can inject
# their own instance without touching the environment.

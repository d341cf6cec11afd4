"""
enps_survey.api.app

FastAPI app factory for the survey service.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Select the datastore once (from settings), wait for it, and dispose it on shutdown.
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from enps_survey import __version__
from enps_survey.api.errors import install_exception_handlers
from enps_survey.api.routers.admin import router as admin_router
from enps_survey.api.routers.feature_flags import router as feature_flags_router
from enps_survey.api.routers.health import router as health_router
from enps_survey.api.routers.projects import router as projects_router
from enps_survey.api.routers.surveys import router as surveys_router
from enps_survey.db.init_db import init_db, wait_for_database
from enps_survey.db.session import create_engine, create_sessionmaker
from enps_survey.observability.logging import configure_logging, get_logger
from enps_survey.observability.middleware import RequestContextMiddleware
from enps_survey.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_logs=settings.environment != "dev",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info(
            "startup",
            env=settings.environment,
            backend="postgres" if settings.uses_postgres else "sqlite",
        )
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        try:
            await wait_for_database(
                engine,
                attempts=settings.db_connect_attempts,
                backoff_seconds=settings.db_connect_backoff_seconds,
            )
            if settings.db_auto_create:
                await init_db(engine)
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="eNPS Survey Service",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestContextMiddleware)
    install_exception_handlers(app)
    app.include_router(health_router, tags=["health"])
    app.include_router(feature_flags_router)
    app.include_router(projects_router)
    app.include_router(surveys_router)
    app.include_router(admin_router)

    return app


# --- Module Notes -----------------------------------------------------------
# App composition stays here; business rules live in `services`.

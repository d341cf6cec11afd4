"""
enps_survey.api.__main__

Entrypoint for running the API via `python -m enps_survey.api` (or the `enps-survey` script).

Responsibilities:
- Load settings.
- Create the app.
- Start uvicorn with structlog-compatible logging config.
"""

from __future__ import annotations

import sys

import uvicorn

from enps_survey.api.app import create_app
from enps_survey.settings import get_settings


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)

    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,  # structlog
        lifespan="on",
    )
    server = uvicorn.Server(config)
    server.run()
    # uvicorn returns instead of raising when lifespan startup fails (e.g. DB unreachable
    # after all retries); surface that as a non-zero exit.
    if not server.started:
        sys.exit(1)


if __name__ == "__main__":
    main()

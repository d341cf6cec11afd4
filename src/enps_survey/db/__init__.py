"""
enps_survey.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, and repositories.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The same models back SQLite (local dev/tests) and Postgres (production); the
# backend is chosen from settings when the engine is created.

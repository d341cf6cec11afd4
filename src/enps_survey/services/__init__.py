"""
enps_survey.services

Service-layer package.

Responsibilities:
- Own transaction boundaries and persistence decisions.
- Enforce business rules (edit window, feature flags, idempotent creation).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services should be pure Python and easily testable against a throwaway SQLite database.

"""
enps_survey.auth

Authentication/authorization package.

Responsibilities:
- Telegram Mini-App init-data verification.
- FastAPI auth dependencies (Telegram user + static admin token).
"""

# Package marker.

"""
enps_survey.api

API package for the survey service.

Responsibilities:
- FastAPI app factory and router modules.
- API-layer dependency wiring, request/response models and error rendering.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer should remain thin: request validation + auth + delegation to services.

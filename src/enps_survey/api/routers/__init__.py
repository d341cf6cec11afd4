"""
enps_survey.api.routers

HTTP routers grouped by audience: Mini-App users (`/api/*`) and admins (`/api/admin/*`).
"""

"""
church_api.api

API package for the Church API.

Responsibilities:
- FastAPI app factory and router modules.
- API-layer dependency wiring, pagination and request/response models.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Routers stay thin: request validation + auth dependencies + delegation to services.

"""
church_api.services

Service layer (transaction + persistence owners).

Responsibilities:
- Credential management (registration, login, principal updates).
- Resource services for branches, events, attendance, finances and notifications.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services apply ownership gates once the target record is loaded; role gates are
# applied earlier, by route dependencies.

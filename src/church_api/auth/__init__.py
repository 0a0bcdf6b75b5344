"""
church_api.auth

Authentication/authorization package.

Responsibilities:
- Token codec (JWT issue/verify).
- Identity resolution and FastAPI auth dependencies.
- Authorization gate (role, ownership, role-escalation rules).
- Password hashing.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# `gate` and `jwt` never touch the database, so they can be tested without a session.

"""
church_api.errors

Typed error hierarchy shared by services and the API layer.

Responsibilities:
- Give every failure mode a stable code and HTTP status.
- Keep user-facing messages free of store/internal detail.

Invariants:
- Every error renders as `{"message": ...}` (see `api.error_handlers`).
- 4xx errors are raised at the boundary of an operation and never retried.
"""

from __future__ import annotations

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)


class ChurchApiError(Exception):
    """Base exception for all domain and infrastructure errors."""

    http_status: int = HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict[str, str]:
        return {"message": self.message}


class ValidationFailed(ChurchApiError):
    http_status = HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"


class PasswordMismatch(ValidationFailed):
    code = "PASSWORD_MISMATCH"

    def __init__(self, message: str = "Passwords do not match") -> None:
        super().__init__(message)


class Unauthenticated(ChurchApiError):
    http_status = HTTP_401_UNAUTHORIZED
    code = "UNAUTHENTICATED"


class InvalidCredentials(Unauthenticated):
    code = "INVALID_CREDENTIALS"

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message)


class Forbidden(ChurchApiError):
    http_status = HTTP_403_FORBIDDEN
    code = "FORBIDDEN"

    def __init__(
        self, message: str = "You do not have permission to access this resource"
    ) -> None:
        super().__init__(message)


class NotFound(ChurchApiError):
    http_status = HTTP_404_NOT_FOUND
    code = "NOT_FOUND"

    def __init__(self, resource: str, message: str | None = None) -> None:
        super().__init__(message or f"{resource} not found")
        self.resource = resource


# Duplicate unique fields answer 400 to keep the historical client contract;
# 409 would be the more precise status.
class Conflict(ChurchApiError):
    http_status = HTTP_400_BAD_REQUEST
    code = "CONFLICT"


class DuplicateEmail(Conflict):
    code = "DUPLICATE_EMAIL"

    def __init__(self, message: str = "Email already exists") -> None:
        super().__init__(message)


class Internal(ChurchApiError):
    pass


class BlobStoreUnavailable(Internal):
    code = "BLOB_STORE_UNAVAILABLE"


# --- Module Notes -----------------------------------------------------------
# Token-level failures (`InvalidToken`, `MissingSigningKey`) live in `auth.jwt` and are
# translated into `Unauthenticated` by the identity resolver.

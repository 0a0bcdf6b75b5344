"""
church_api.auth.models

Auth domain models.

Responsibilities:
- Define roles, principal kinds and the caller context injected into endpoints.
"""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass
from typing import Any


class Role(enum.StrEnum):
    user = "user"
    admin = "admin"


class PrincipalKind(enum.StrEnum):
    # Names the table a token subject lives in.
    admin = "admin"
    user = "user"


@dataclass(frozen=True, slots=True)
class CallerContext:
    """
    Authenticated caller identity.

    `record` is the live Admin/User row when the re-fetch strategy resolved the
    caller, and None under claim-trust resolution.
    """

    subject_id: uuid.UUID
    role: Role
    kind: PrincipalKind
    record: Any = None

    @property
    def is_admin(self) -> bool:
        return self.role is Role.admin


# --- Module Notes -----------------------------------------------------------
# Keep this model minimal; it is used across API, services and the authorization gate.

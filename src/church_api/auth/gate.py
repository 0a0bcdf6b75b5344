"""
church_api.auth.gate

Authorization gate: pure allow/deny decisions over a `CallerContext`.

Responsibilities:
- Role gates (admin-only operations).
- Ownership gates (caller must be the owner/sender/recipient of a record).
- Role-escalation prevention on principal updates.

Invariants:
- Deny by default: a missing field or a missing grant is `Forbidden`, never an allow.
- Decisions depend only on their arguments, so repeated checks always agree.
- Role checks run before ownership checks when both apply.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from church_api.auth.models import CallerContext, Role
from church_api.errors import Forbidden

_MISSING = object()


def _owner_value(resource: Any, owner_field: str) -> Any:
    if isinstance(resource, Mapping):
        return resource.get(owner_field, _MISSING)
    return getattr(resource, owner_field, _MISSING)


def is_owner(ctx: CallerContext, resource: Any, owner_field: str) -> bool:
    value = _owner_value(resource, owner_field)
    if value is _MISSING or value is None:
        return False
    # Ids are opaque; equality is the only operation used on them.
    return value == ctx.subject_id


def require_role(ctx: CallerContext, role: Role) -> None:
    if ctx.role is not role:
        raise Forbidden()


def require_ownership(ctx: CallerContext, resource: Any, owner_field: str) -> None:
    if not is_owner(ctx, resource, owner_field):
        raise Forbidden("You are not allowed to modify this resource")


def require_admin_or_owner(ctx: CallerContext, resource: Any, *owner_fields: str) -> None:
    # Admins act regardless of ownership; everyone else must own the record.
    if ctx.is_admin:
        return
    if any(is_owner(ctx, resource, f) for f in owner_fields):
        return
    raise Forbidden("You are not allowed to modify this resource")


def role_change_allowed(ctx: CallerContext, requested_role: Role | None) -> bool:
    if requested_role is None or requested_role is ctx.role:
        return True
    return ctx.is_admin


def require_role_unless_self_field(ctx: CallerContext, requested_role: Role | None) -> None:
    if not role_change_allowed(ctx, requested_role):
        raise Forbidden("Not authorized to change role")


# --- Module Notes -----------------------------------------------------------
# Route-level role gates are wired through `auth.deps.require_role`; ownership gates are
# applied by services once the target record has been loaded.

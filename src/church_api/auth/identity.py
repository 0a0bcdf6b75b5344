"""
church_api.auth.identity

Identity resolution: bearer token -> `CallerContext`.

Responsibilities:
- Verify the token through the codec.
- Resolve verified claims into a caller context using one of two strategies:
  - claim trust: use `{sub, role, kind}` from the token as-is;
  - re-fetch: load the live Admin/User record and take the role from it.
- Collapse every failure into `Unauthenticated` with a fixed, detail-free message.

Staleness:
- Under claim trust a deleted or demoted principal keeps its access until the
  token expires (at most `token_ttl_minutes`). Re-fetch has no such window.
"""

from __future__ import annotations

import uuid
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Protocol

from church_api.auth.jwt import InvalidToken, JwtConfig, TokenClaims, decode_and_validate
from church_api.auth.models import CallerContext, PrincipalKind, Role
from church_api.errors import Unauthenticated
from church_api.observability.logging import get_logger

log = get_logger(__name__)

MISSING_TOKEN = "No token provided"
INVALID_TOKEN = "Invalid or expired token"
PRINCIPAL_GONE = "Authentication failed"

PrincipalLoader = Callable[[uuid.UUID], Awaitable[Any]]


class IdentityResolver(Protocol):
    async def resolve(self, claims: TokenClaims) -> CallerContext: ...


class ClaimTrustResolver:
    async def resolve(self, claims: TokenClaims) -> CallerContext:
        return CallerContext(subject_id=claims.subject, role=claims.role, kind=claims.kind)


class RefetchResolver:
    """
    Loads the principal behind a token on every request.

    `loaders` maps each principal kind to a lookup by id; a kind without a
    loader is treated like a vanished record.
    """

    def __init__(self, loaders: Mapping[PrincipalKind, PrincipalLoader]) -> None:
        self._loaders = dict(loaders)

    async def resolve(self, claims: TokenClaims) -> CallerContext:
        loader = self._loaders.get(claims.kind)
        record = await loader(claims.subject) if loader is not None else None
        if record is None:
            log.warning("principal_not_found", subject=str(claims.subject), kind=claims.kind.value)
            raise Unauthenticated(PRINCIPAL_GONE)
        # The live record wins over the token: demotions apply immediately.
        role = Role(record.role)
        return CallerContext(subject_id=record.id, role=role, kind=claims.kind, record=record)


async def resolve_caller(
    token: str | None,
    *,
    cfg: JwtConfig,
    resolver: IdentityResolver,
) -> CallerContext:
    if not token:
        raise Unauthenticated(MISSING_TOKEN)
    try:
        claims = decode_and_validate(cfg=cfg, token=token)
    except InvalidToken as e:
        # Keep the verification detail in logs only.
        log.info("token_rejected", reason=str(e))
        raise Unauthenticated(INVALID_TOKEN) from e
    return await resolver.resolve(claims)


# --- Module Notes -----------------------------------------------------------
# Both strategies share `resolve_caller`, so missing/malformed/expired tokens fail the
# same way no matter which strategy the deployment selects (`settings.identity_strategy`).

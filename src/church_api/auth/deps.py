"""
church_api.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Convert a bearer token into a typed `CallerContext`.
- Enforce role gates via reusable dependency factories.
"""

from __future__ import annotations

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from church_api.api.deps import db_session, settings_dep
from church_api.auth import gate
from church_api.auth.identity import (
    ClaimTrustResolver,
    IdentityResolver,
    RefetchResolver,
    resolve_caller,
)
from church_api.auth.jwt import JwtConfig
from church_api.auth.models import CallerContext, PrincipalKind, Role
from church_api.db.repositories.principals import AdminRepo, UserRepo
from church_api.services.credentials import CredentialService
from church_api.settings import Settings

_bearer = HTTPBearer(auto_error=False)


def jwt_config_dep(request: Request) -> JwtConfig:
    # Built once in `create_app`; immutable for the life of the process.
    return request.app.state.jwt_config  # type: ignore[attr-defined]


def identity_resolver(
    settings: Settings = Depends(settings_dep),
    session: AsyncSession = Depends(db_session),
) -> IdentityResolver:
    if settings.identity_strategy == "claims":
        return ClaimTrustResolver()
    return RefetchResolver(
        {
            PrincipalKind.admin: AdminRepo(session).get,
            PrincipalKind.user: UserRepo(session).get,
        }
    )


async def get_caller(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    cfg: JwtConfig = Depends(jwt_config_dep),
    resolver: IdentityResolver = Depends(identity_resolver),
) -> CallerContext:
    token = creds.credentials if creds is not None else None
    caller = await resolve_caller(token, cfg=cfg, resolver=resolver)
    structlog.contextvars.bind_contextvars(
        caller_id=str(caller.subject_id), caller_role=str(caller.role)
    )
    return caller


async def get_optional_caller(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    cfg: JwtConfig = Depends(jwt_config_dep),
    resolver: IdentityResolver = Depends(identity_resolver),
) -> CallerContext | None:
    # No header means anonymous; a header that fails verification is still a 401.
    if creds is None or not creds.credentials:
        return None
    return await resolve_caller(creds.credentials, cfg=cfg, resolver=resolver)


def credential_service(
    settings: Settings = Depends(settings_dep),
    session: AsyncSession = Depends(db_session),
    cfg: JwtConfig = Depends(jwt_config_dep),
) -> CredentialService:
    return CredentialService(session=session, jwt_cfg=cfg, bcrypt_rounds=settings.bcrypt_rounds)


def require_role(role: Role):
    def _dep(caller: CallerContext = Depends(get_caller)) -> CallerContext:
        gate.require_role(caller, role)
        return caller

    return _dep


require_admin = require_role(Role.admin)


# --- Module Notes -----------------------------------------------------------
# FastAPI caches dependencies per request, so `get_caller` runs once even when a route
# declares both `require_admin` and `get_caller`.

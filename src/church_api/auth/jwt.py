"""
church_api.auth.jwt

JWT issuing and validation helpers (the token codec).

Responsibilities:
- Issue signed identity tokens carrying subject id, role and principal kind.
- Decode and validate tokens with strict claim requirements (iss/aud/exp/iat/sub/role/kind).

Note:
- Every token carries the same claim set regardless of principal type.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError

from church_api.auth.models import PrincipalKind, Role
from church_api.settings import Settings


@dataclass(frozen=True, slots=True)
class JwtConfig:
    # Algorithm/issuer/audience are enforced during decoding.
    alg: str
    issuer: str
    audience: str
    secret: str = field(default="", repr=False)
    ttl: timedelta = timedelta(hours=1)


@dataclass(frozen=True, slots=True)
class TokenClaims:
    subject: uuid.UUID
    role: Role
    kind: PrincipalKind
    expires_at: datetime


class InvalidToken(Exception):
    pass


class MissingSigningKey(RuntimeError):
    pass


def config_from_settings(settings: Settings) -> JwtConfig:
    if not settings.jwt_secret:
        raise MissingSigningKey("CHURCH_JWT_SECRET must be set before the API can serve requests")
    return JwtConfig(
        alg=settings.jwt_alg,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        secret=settings.jwt_secret,
        ttl=timedelta(minutes=settings.token_ttl_minutes),
    )


def issue_token(
    *,
    cfg: JwtConfig,
    subject: uuid.UUID,
    role: Role,
    kind: PrincipalKind,
    ttl: timedelta | None = None,
) -> str:
    if kind is PrincipalKind.admin and role is not Role.admin:
        raise ValueError("admin principals always carry the admin role")
    now = datetime.now(tz=UTC)
    payload: dict[str, Any] = {
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "sub": str(subject),
        "role": role.value,
        "kind": kind.value,
        "iat": int(now.timestamp()),
        "exp": int((now + (ttl if ttl is not None else cfg.ttl)).timestamp()),
    }
    return jwt.encode(payload, cfg.secret, algorithm=cfg.alg)


def decode_and_validate(*, cfg: JwtConfig, token: str) -> TokenClaims:
    try:
        # jwt.decode enforces signature + registered claims (issuer/audience/exp, etc.).
        payload = jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            issuer=cfg.issuer,
            audience=cfg.audience,
            options={
                "require": ["exp", "iat", "iss", "aud", "sub", "role", "kind"],
            },
        )
    except InvalidTokenError as e:
        raise InvalidToken(str(e)) from e

    try:
        claims = TokenClaims(
            subject=uuid.UUID(str(payload["sub"])),
            role=Role(payload["role"]),
            kind=PrincipalKind(payload["kind"]),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC),
        )
    except (TypeError, ValueError) as e:
        raise InvalidToken(f"malformed identity claims: {e}") from e

    if claims.kind is PrincipalKind.admin and claims.role is not Role.admin:
        raise InvalidToken("admin token without admin role")
    return claims


# --- Module Notes -----------------------------------------------------------
# Token issuing is used by `services.credentials` (registration and login); decoding is
# used only by `auth.identity.resolve_caller`. Nothing else should parse token internals.

"""
tests.test_jwt

Token codec: issue/decode round trip and every rejection path.
"""

from __future__ import annotations

import uuid
from datetime import timedelta

import jwt as pyjwt
import pytest

from church_api.auth.jwt import (
    InvalidToken,
    JwtConfig,
    MissingSigningKey,
    config_from_settings,
    decode_and_validate,
    issue_token,
)
from church_api.auth.models import PrincipalKind, Role
from church_api.settings import Settings


def _cfg(**overrides) -> JwtConfig:
    base = {"alg": "HS256", "issuer": "church-api", "audience": "church-api-clients"}
    base.update(overrides)
    return JwtConfig(secret=base.pop("secret", "unit-test-secret"), **base)


def test_issue_then_decode_returns_identity() -> None:
    cfg = _cfg()
    subject = uuid.uuid4()
    token = issue_token(cfg=cfg, subject=subject, role=Role.user, kind=PrincipalKind.user)

    claims = decode_and_validate(cfg=cfg, token=token)
    assert claims.subject == subject
    assert claims.role is Role.user
    assert claims.kind is PrincipalKind.user


def test_expired_token_is_rejected() -> None:
    cfg = _cfg()
    token = issue_token(
        cfg=cfg,
        subject=uuid.uuid4(),
        role=Role.admin,
        kind=PrincipalKind.admin,
        ttl=timedelta(seconds=-1),
    )
    with pytest.raises(InvalidToken):
        decode_and_validate(cfg=cfg, token=token)


def test_wrong_secret_is_rejected() -> None:
    token = issue_token(
        cfg=_cfg(), subject=uuid.uuid4(), role=Role.user, kind=PrincipalKind.user
    )
    with pytest.raises(InvalidToken):
        decode_and_validate(cfg=_cfg(secret="another-secret"), token=token)


def test_wrong_audience_is_rejected() -> None:
    token = issue_token(
        cfg=_cfg(), subject=uuid.uuid4(), role=Role.user, kind=PrincipalKind.user
    )
    with pytest.raises(InvalidToken):
        decode_and_validate(cfg=_cfg(audience="someone-else"), token=token)


@pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b.c"])
def test_garbage_is_rejected(token: str) -> None:
    with pytest.raises(InvalidToken):
        decode_and_validate(cfg=_cfg(), token=token)


def _raw(cfg: JwtConfig, **claims) -> str:
    payload = {"iss": cfg.issuer, "aud": cfg.audience, "iat": 1, "exp": 4102444800}
    payload.update(claims)
    return pyjwt.encode(payload, cfg.secret, algorithm=cfg.alg)


def test_missing_role_claim_is_rejected() -> None:
    cfg = _cfg()
    with pytest.raises(InvalidToken):
        decode_and_validate(cfg=cfg, token=_raw(cfg, sub=str(uuid.uuid4()), kind="user"))


def test_non_uuid_subject_is_rejected() -> None:
    cfg = _cfg()
    with pytest.raises(InvalidToken):
        decode_and_validate(cfg=cfg, token=_raw(cfg, sub="42", role="user", kind="user"))


def test_unknown_role_is_rejected() -> None:
    cfg = _cfg()
    token = _raw(cfg, sub=str(uuid.uuid4()), role="superuser", kind="user")
    with pytest.raises(InvalidToken):
        decode_and_validate(cfg=cfg, token=token)


def test_admin_kind_requires_admin_role() -> None:
    cfg = _cfg()
    token = _raw(cfg, sub=str(uuid.uuid4()), role="user", kind="admin")
    with pytest.raises(InvalidToken):
        decode_and_validate(cfg=cfg, token=token)

    with pytest.raises(ValueError):
        issue_token(cfg=cfg, subject=uuid.uuid4(), role=Role.user, kind=PrincipalKind.admin)


def test_config_requires_secret() -> None:
    with pytest.raises(MissingSigningKey):
        config_from_settings(Settings(jwt_secret=""))

    cfg = config_from_settings(Settings(jwt_secret="s3cret", token_ttl_minutes=15))
    assert cfg.ttl == timedelta(minutes=15)
    assert "s3cret" not in repr(cfg)

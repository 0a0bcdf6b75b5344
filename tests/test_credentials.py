"""
tests.test_credentials

Credential manager: hashing, registration, authentication and principal updates.
"""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from church_api.auth.jwt import JwtConfig, decode_and_validate
from church_api.auth.models import CallerContext, PrincipalKind, Role
from church_api.auth.passwords import hash_password, verify_password
from church_api.db.repositories.principals import UserRepo
from church_api.errors import (
    Conflict,
    DuplicateEmail,
    Forbidden,
    InvalidCredentials,
    PasswordMismatch,
    ValidationFailed,
)
from church_api.services import credentials
from church_api.services.credentials import CredentialService
from helpers import PASSWORD


def _svc(session: AsyncSession, jwt_cfg: JwtConfig) -> CredentialService:
    return CredentialService(session=session, jwt_cfg=jwt_cfg, bcrypt_rounds=4)


def _caller(principal, kind: PrincipalKind = PrincipalKind.user) -> CallerContext:
    return CallerContext(subject_id=principal.id, role=principal.role, kind=kind)


def test_hash_is_salted_and_verifiable() -> None:
    first = hash_password("hunter22", rounds=4)
    second = hash_password("hunter22", rounds=4)
    assert first != second
    assert verify_password("hunter22", first)
    assert not verify_password("hunter23", first)
    assert not verify_password("hunter22", "not-a-bcrypt-hash")


def test_overlong_password_is_rejected() -> None:
    with pytest.raises(ValidationFailed):
        hash_password("x" * 73, rounds=4)


@pytest.mark.asyncio
async def test_register_then_authenticate(session: AsyncSession, jwt_cfg: JwtConfig) -> None:
    svc = _svc(session, jwt_cfg)
    issued = await svc.register_user(
        username="ruth",
        email="Ruth@GraceChurch.org",
        password=PASSWORD,
        confirm_password=PASSWORD,
    )
    assert issued.principal.email == "ruth@gracechurch.org"
    assert issued.principal.password_hash != PASSWORD

    claims = decode_and_validate(cfg=jwt_cfg, token=issued.token)
    assert claims.subject == issued.principal.id
    assert claims.kind is PrincipalKind.user

    again = await svc.authenticate(
        kind=PrincipalKind.user, email="ruth@gracechurch.org", password=PASSWORD
    )
    assert again.principal.id == issued.principal.id


@pytest.mark.asyncio
async def test_password_mismatch_writes_nothing(session: AsyncSession, jwt_cfg: JwtConfig) -> None:
    svc = _svc(session, jwt_cfg)
    with pytest.raises(PasswordMismatch):
        await svc.register_user(
            username="ruth",
            email="ruth@gracechurch.org",
            password=PASSWORD,
            confirm_password=PASSWORD + "!",
        )
    assert await UserRepo(session).count() == 0


@pytest.mark.asyncio
async def test_duplicate_email(session: AsyncSession, jwt_cfg: JwtConfig) -> None:
    svc = _svc(session, jwt_cfg)
    kwargs = {"username": "ruth", "password": PASSWORD, "confirm_password": PASSWORD}
    await svc.register_user(email="ruth@gracechurch.org", **kwargs)
    with pytest.raises(DuplicateEmail):
        await svc.register_user(email="RUTH@gracechurch.org", **kwargs)
    assert await UserRepo(session).count() == 1


@pytest.mark.asyncio
async def test_unique_index_catches_lost_race(
    session: AsyncSession, jwt_cfg: JwtConfig, monkeypatch: pytest.MonkeyPatch
) -> None:
    svc = _svc(session, jwt_cfg)
    kwargs = {"username": "ruth", "password": PASSWORD, "confirm_password": PASSWORD}
    await svc.register_user(email="ruth@gracechurch.org", **kwargs)

    # Both requests pass the advisory check; only the store can tell them apart.
    async def never_taken(self, email, *, exclude_id=None):
        return False

    monkeypatch.setattr(UserRepo, "email_taken", never_taken)
    with pytest.raises(DuplicateEmail):
        await svc.register_user(email="ruth@gracechurch.org", **kwargs)
    assert await UserRepo(session).count() == 1


@pytest.mark.asyncio
async def test_authentication_failures_are_uniform(
    session: AsyncSession, jwt_cfg: JwtConfig
) -> None:
    svc = _svc(session, jwt_cfg)
    await svc.register_user(
        username="ruth", email="ruth@gracechurch.org", password=PASSWORD, confirm_password=PASSWORD
    )

    with pytest.raises(InvalidCredentials) as wrong_password:
        await svc.authenticate(
            kind=PrincipalKind.user, email="ruth@gracechurch.org", password="wrong-password"
        )
    with pytest.raises(InvalidCredentials) as unknown_email:
        await svc.authenticate(
            kind=PrincipalKind.user, email="nobody@gracechurch.org", password=PASSWORD
        )
    assert wrong_password.value.message == unknown_email.value.message
    assert wrong_password.value.http_status == 401


@pytest.mark.asyncio
async def test_admin_role_registration_needs_admin_caller(
    session: AsyncSession, jwt_cfg: JwtConfig
) -> None:
    svc = _svc(session, jwt_cfg)
    kwargs = {"username": "eli", "password": PASSWORD, "confirm_password": PASSWORD}
    with pytest.raises(Forbidden):
        await svc.register_user(email="eli@gracechurch.org", role=Role.admin, **kwargs)

    boss = await svc.register_admin(
        username="boss", email="boss@gracechurch.org", password=PASSWORD, confirm_password=PASSWORD
    )
    issued = await svc.register_user(
        email="eli@gracechurch.org",
        role=Role.admin,
        caller=_caller(boss.principal, PrincipalKind.admin),
        **kwargs,
    )
    assert issued.principal.role is Role.admin


@pytest.mark.asyncio
async def test_admin_bootstrap_then_admin_only(session: AsyncSession, jwt_cfg: JwtConfig) -> None:
    svc = _svc(session, jwt_cfg)
    kwargs = {"username": "a", "password": PASSWORD, "confirm_password": PASSWORD}
    first = await svc.register_admin(email="first@gracechurch.org", **kwargs)

    with pytest.raises(Forbidden):
        await svc.register_admin(email="second@gracechurch.org", **kwargs)

    second = await svc.register_admin(
        email="second@gracechurch.org",
        caller=_caller(first.principal, PrincipalKind.admin),
        **kwargs,
    )
    assert second.principal.role is Role.admin


@pytest.mark.asyncio
async def test_self_update_drops_role_but_applies_other_fields(
    session: AsyncSession, jwt_cfg: JwtConfig
) -> None:
    svc = _svc(session, jwt_cfg)
    issued = await svc.register_user(
        username="ruth", email="ruth@gracechurch.org", password=PASSWORD, confirm_password=PASSWORD
    )
    user = issued.principal

    updated = await svc.update_user(
        _caller(user), user.id, {"role": Role.admin, "department": "Choir", "age": 30}
    )
    assert updated.role is Role.user
    assert updated.department == "Choir"
    assert updated.age == 30


@pytest.mark.asyncio
async def test_user_cannot_update_someone_else(session: AsyncSession, jwt_cfg: JwtConfig) -> None:
    svc = _svc(session, jwt_cfg)
    kwargs = {"username": "u", "password": PASSWORD, "confirm_password": PASSWORD}
    ruth = (await svc.register_user(email="ruth@gracechurch.org", **kwargs)).principal
    boaz = (await svc.register_user(email="boaz@gracechurch.org", **kwargs)).principal

    with pytest.raises(Forbidden):
        await svc.update_user(_caller(ruth), boaz.id, {"department": "Ushers"})


@pytest.mark.asyncio
async def test_update_to_taken_email(session: AsyncSession, jwt_cfg: JwtConfig) -> None:
    svc = _svc(session, jwt_cfg)
    kwargs = {"username": "u", "password": PASSWORD, "confirm_password": PASSWORD}
    ruth = (await svc.register_user(email="ruth@gracechurch.org", **kwargs)).principal
    await svc.register_user(email="boaz@gracechurch.org", **kwargs)

    with pytest.raises(DuplicateEmail):
        await svc.update_user(_caller(ruth), ruth.id, {"email": "boaz@gracechurch.org"})


@pytest.mark.asyncio
async def test_change_password(session: AsyncSession, jwt_cfg: JwtConfig) -> None:
    svc = _svc(session, jwt_cfg)
    user = (
        await svc.register_user(
            username="ruth",
            email="ruth@gracechurch.org",
            password=PASSWORD,
            confirm_password=PASSWORD,
        )
    ).principal
    old_hash = user.password_hash

    with pytest.raises(PasswordMismatch):
        await svc.change_password(user, new_password="new-password-1", confirmation="nope")
    assert user.password_hash == old_hash

    await svc.change_password(user, new_password="new-password-1", confirmation="new-password-1")
    await svc.authenticate(
        kind=PrincipalKind.user, email="ruth@gracechurch.org", password="new-password-1"
    )


@pytest.mark.asyncio
async def test_admin_role_cannot_be_downgraded(session: AsyncSession, jwt_cfg: JwtConfig) -> None:
    svc = _svc(session, jwt_cfg)
    admin = (
        await svc.register_admin(
            username="boss",
            email="boss@gracechurch.org",
            password=PASSWORD,
            confirm_password=PASSWORD,
        )
    ).principal
    ctx = _caller(admin, PrincipalKind.admin)

    with pytest.raises(Forbidden):
        await svc.update_admin(ctx, admin.id, {"role": Role.user})

    updated = await svc.update_admin(ctx, admin.id, {"username": "shepherd"})
    assert updated.username == "shepherd"


@pytest.mark.asyncio
async def test_get_user_checks_gate_before_lookup(
    session: AsyncSession, jwt_cfg: JwtConfig
) -> None:
    svc = _svc(session, jwt_cfg)
    ruth = (
        await svc.register_user(
            username="ruth",
            email="ruth@gracechurch.org",
            password=PASSWORD,
            confirm_password=PASSWORD,
        )
    ).principal
    # A non-admin probing a random id learns nothing about whether it exists.
    with pytest.raises(Forbidden):
        await svc.get_user(_caller(ruth), uuid.uuid4())


@pytest.mark.asyncio
async def test_null_username_in_patch_is_ignored(session: AsyncSession, jwt_cfg: JwtConfig) -> None:
    svc = _svc(session, jwt_cfg)
    issued = await svc.register_user(
        username="ruth", email="ruth@gracechurch.org", password=PASSWORD, confirm_password=PASSWORD
    )
    user = issued.principal

    updated = await svc.update_user(
        _caller(user), user.id, {"username": None, "department": "Choir"}
    )
    assert updated.username == "ruth"
    assert updated.department == "Choir"


@pytest.mark.asyncio
async def test_last_admin_cannot_be_deleted(session: AsyncSession, jwt_cfg: JwtConfig) -> None:
    svc = _svc(session, jwt_cfg)
    kwargs = {"username": "a", "password": PASSWORD, "confirm_password": PASSWORD}
    first = await svc.register_admin(email="first@gracechurch.org", **kwargs)
    second = await svc.register_admin(
        email="second@gracechurch.org",
        caller=_caller(first.principal, PrincipalKind.admin),
        **kwargs,
    )

    await svc.delete_admin(second.principal.id)
    with pytest.raises(Conflict):
        await svc.delete_admin(first.principal.id)
    assert (await svc.get_admin(first.principal.id)).id == first.principal.id

    # The bootstrap path stays closed.
    with pytest.raises(Forbidden):
        await svc.register_admin(email="third@gracechurch.org", **kwargs)


@pytest.mark.asyncio
async def test_unknown_email_timing_hash_is_computed_off_the_loop(
    session: AsyncSession, jwt_cfg: JwtConfig, monkeypatch: pytest.MonkeyPatch
) -> None:
    calls: list[str] = []
    real = credentials.hash_password_async

    async def recording(password: str, *, rounds: int) -> str:
        calls.append(password)
        return await real(password, rounds=rounds)

    monkeypatch.setattr(credentials, "_DUMMY_HASHES", {})
    monkeypatch.setattr(credentials, "hash_password_async", recording)
    svc = _svc(session, jwt_cfg)

    for _ in range(2):
        with pytest.raises(InvalidCredentials):
            await svc.authenticate(
                kind=PrincipalKind.user, email="nobody@gracechurch.org", password=PASSWORD
            )
    assert calls == ["dummy-password-for-timing"]

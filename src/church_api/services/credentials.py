"""
church_api.services.credentials

Credential manager: registration, login and principal maintenance.

Responsibilities:
- Register admins and users (confirmation check, role gate, uniqueness, hashing).
- Authenticate by email/password and issue tokens.
- Change passwords and apply self/admin updates without allowing role escalation.

Invariants:
- Input checks that need no store access run before any store access.
- The unique index is the final arbiter for duplicate emails; the pre-check is advisory.
- Login failures look identical for unknown emails and wrong passwords.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from church_api.auth import gate
from church_api.auth.jwt import JwtConfig, issue_token
from church_api.auth.models import CallerContext, PrincipalKind, Role
from church_api.auth.passwords import hash_password_async, verify_password_async
from church_api.db.models import Admin, User
from church_api.db.repositories.paging import Page
from church_api.db.repositories.principals import AdminRepo, PrincipalRepo, UserRepo
from church_api.errors import (
    Conflict,
    DuplicateEmail,
    Forbidden,
    InvalidCredentials,
    NotFound,
    PasswordMismatch,
)
from church_api.observability.logging import get_logger

log = get_logger(__name__)

USER_PROFILE_FIELDS = frozenset(
    {"username", "age", "department", "phone_number", "address", "church_branch", "country"}
)
# Profile fields backed by NOT NULL columns; a null in a patch leaves them unchanged.
REQUIRED_USER_FIELDS = frozenset({"username"})


@dataclass(frozen=True, slots=True)
class IssuedCredentials:
    principal: Admin | User
    token: str


def _is_unique_violation(exc: IntegrityError) -> bool:
    # SQLite: "UNIQUE constraint failed"; PostgreSQL: "violates unique constraint".
    return "unique" in str(exc.orig).lower()


_DUMMY_HASHES: dict[int, str] = {}


async def _dummy_hash(rounds: int) -> str:
    # Verified on the unknown-email path so both failure paths cost one bcrypt check.
    if rounds not in _DUMMY_HASHES:
        _DUMMY_HASHES[rounds] = await hash_password_async(
            "dummy-password-for-timing", rounds=rounds
        )
    return _DUMMY_HASHES[rounds]


def check_confirmation(password: str, confirmation: str | None) -> None:
    if confirmation is None or password != confirmation:
        raise PasswordMismatch()


class CredentialService:
    def __init__(
        self,
        *,
        session: AsyncSession,
        jwt_cfg: JwtConfig,
        bcrypt_rounds: int,
    ) -> None:
        self._session = session
        self._jwt_cfg = jwt_cfg
        self._rounds = bcrypt_rounds

        self._admins = AdminRepo(session)
        self._users = UserRepo(session)

    def _repo(self, kind: PrincipalKind) -> PrincipalRepo[Any]:
        return self._admins if kind is PrincipalKind.admin else self._users

    def issue_for(self, principal: Admin | User, kind: PrincipalKind) -> str:
        return issue_token(cfg=self._jwt_cfg, subject=principal.id, role=principal.role, kind=kind)

    # -- registration ---------------------------------------------------------

    async def register_user(
        self,
        *,
        username: str,
        email: str,
        password: str,
        confirm_password: str | None,
        role: Role = Role.user,
        caller: CallerContext | None = None,
        **profile: Any,
    ) -> IssuedCredentials:
        check_confirmation(password, confirm_password)
        if role is Role.admin and (caller is None or not caller.is_admin):
            log.warning("registration_role_denied", email=email, requested_role=role.value)
            raise Forbidden("Only admins can create users with the admin role")

        unknown = set(profile) - USER_PROFILE_FIELDS
        if unknown:
            raise TypeError(f"unexpected profile fields: {sorted(unknown)}")

        return await self._register(
            self._users,
            PrincipalKind.user,
            email=email,
            password=password,
            username=username,
            role=role,
            **profile,
        )

    async def register_admin(
        self,
        *,
        username: str,
        email: str,
        password: str,
        confirm_password: str | None,
        caller: CallerContext | None = None,
    ) -> IssuedCredentials:
        check_confirmation(password, confirm_password)
        # The first admin bootstraps the system; after that only admins add admins.
        if caller is None or not caller.is_admin:
            if await self._admins.count() > 0:
                log.warning("admin_registration_denied", email=email)
                raise Forbidden("Only admins can register new admins")

        return await self._register(
            self._admins,
            PrincipalKind.admin,
            email=email,
            password=password,
            username=username,
        )

    async def _register(
        self,
        repo: PrincipalRepo[Any],
        kind: PrincipalKind,
        *,
        email: str,
        password: str,
        **fields: Any,
    ) -> IssuedCredentials:
        if await repo.email_taken(email):
            log.warning("registration_duplicate_email", kind=kind.value, email=email)
            raise DuplicateEmail()

        password_hash = await hash_password_async(password, rounds=self._rounds)
        try:
            principal = await repo.create(email=email, password_hash=password_hash, **fields)
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            if not _is_unique_violation(e):
                raise
            # Lost the race against a concurrent registration with the same email.
            log.warning("registration_conflict", kind=kind.value, email=email)
            raise DuplicateEmail() from e

        log.info("principal_registered", kind=kind.value, principal_id=str(principal.id))
        return IssuedCredentials(principal=principal, token=self.issue_for(principal, kind))

    # -- authentication -------------------------------------------------------

    async def authenticate(
        self, *, kind: PrincipalKind, email: str, password: str
    ) -> IssuedCredentials:
        principal = await self._repo(kind).get_by_email(email)
        if principal is None:
            await verify_password_async(password, await _dummy_hash(self._rounds))
            log.warning("login_failed", kind=kind.value, reason="unknown_email")
            raise InvalidCredentials()
        if not await verify_password_async(password, principal.password_hash):
            log.warning("login_failed", kind=kind.value, reason="bad_password")
            raise InvalidCredentials()

        log.info("login_succeeded", kind=kind.value, principal_id=str(principal.id))
        return IssuedCredentials(principal=principal, token=self.issue_for(principal, kind))

    # -- maintenance ----------------------------------------------------------

    async def change_password(
        self, principal: Admin | User, *, new_password: str, confirmation: str | None
    ) -> None:
        check_confirmation(new_password, confirmation)
        principal.password_hash = await hash_password_async(new_password, rounds=self._rounds)
        await self._session.commit()
        log.info("password_changed", principal_id=str(principal.id))

    async def get_user(self, caller: CallerContext, user_id: uuid.UUID) -> User:
        gate.require_admin_or_owner(caller, {"id": user_id}, "id")
        user = await self._users.get(user_id)
        if user is None:
            raise NotFound("User")
        return user

    async def get_admin(self, admin_id: uuid.UUID) -> Admin:
        admin = await self._admins.get(admin_id)
        if admin is None:
            raise NotFound("Admin")
        return admin

    async def list_users(self, *, page: int, limit: int) -> Page[User]:
        return await self._users.list_page(page=page, limit=limit)

    async def list_admins(self, *, page: int, limit: int) -> Page[Admin]:
        return await self._admins.list_page(page=page, limit=limit)

    async def update_user(
        self, caller: CallerContext, user_id: uuid.UUID, patch: dict[str, Any]
    ) -> User:
        """
        Apply a self/admin update to a user.

        A role change the caller may not make is dropped; every other
        permitted field in the same patch still applies.
        """

        patch = dict(patch)
        password = patch.pop("password", None)
        confirmation = patch.pop("confirm_password", None)
        if password is not None:
            check_confirmation(password, confirmation)

        gate.require_admin_or_owner(caller, {"id": user_id}, "id")
        user = await self._users.get(user_id)
        if user is None:
            raise NotFound("User")

        requested_role = patch.pop("role", None)
        if requested_role is not None:
            requested_role = Role(requested_role)
            if gate.role_change_allowed(caller, requested_role):
                user.role = requested_role
            else:
                log.warning(
                    "role_change_dropped",
                    caller_id=str(caller.subject_id),
                    user_id=str(user_id),
                    requested_role=requested_role.value,
                )

        email = patch.pop("email", None)
        if email is not None:
            await self._apply_email(self._users, user, email)

        for field, value in patch.items():
            if field not in USER_PROFILE_FIELDS:
                continue
            if value is None and field in REQUIRED_USER_FIELDS:
                continue
            setattr(user, field, value)

        if password is not None:
            user.password_hash = await hash_password_async(password, rounds=self._rounds)

        await self._commit_principal_update()
        log.info("user_updated", user_id=str(user_id), by=str(caller.subject_id))
        return user

    async def update_admin(
        self, caller: CallerContext, admin_id: uuid.UUID, patch: dict[str, Any]
    ) -> Admin:
        gate.require_role(caller, Role.admin)
        patch = dict(patch)
        role = patch.pop("role", None)
        if role is not None and Role(role) is not Role.admin:
            log.warning("admin_role_change_denied", admin_id=str(admin_id))
            raise Forbidden("Not authorized to update admin role")

        password = patch.pop("password", None)
        confirmation = patch.pop("confirm_password", None)
        if password is not None:
            check_confirmation(password, confirmation)

        admin = await self._admins.get(admin_id)
        if admin is None:
            raise NotFound("Admin")

        email = patch.pop("email", None)
        if email is not None:
            await self._apply_email(self._admins, admin, email)
        if patch.get("username") is not None:
            admin.username = patch["username"]
        if password is not None:
            admin.password_hash = await hash_password_async(password, rounds=self._rounds)

        await self._commit_principal_update()
        log.info("admin_updated", admin_id=str(admin_id), by=str(caller.subject_id))
        return admin

    async def delete_user(self, user_id: uuid.UUID) -> User:
        user = await self._users.get(user_id)
        if user is None:
            raise NotFound("User")
        await self._delete(self._users, user, "User")
        return user

    async def delete_admin(self, admin_id: uuid.UUID) -> Admin:
        admin = await self._admins.get(admin_id)
        if admin is None:
            raise NotFound("Admin")
        if await self._admins.count() <= 1:
            # Registration reopens to anonymous callers once no admin is left.
            log.warning("last_admin_delete_denied", admin_id=str(admin_id))
            raise Conflict("Cannot delete the last admin")
        await self._delete(self._admins, admin, "Admin")
        return admin

    async def _apply_email(
        self, repo: PrincipalRepo[Any], principal: Admin | User, email: str
    ) -> None:
        if await repo.email_taken(email, exclude_id=principal.id):
            raise DuplicateEmail()
        principal.email = email.strip().lower()

    async def _commit_principal_update(self) -> None:
        try:
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            if not _is_unique_violation(e):
                raise
            raise DuplicateEmail() from e

    async def _delete(self, repo: PrincipalRepo[Any], principal: Admin | User, label: str) -> None:
        try:
            await repo.delete(principal)
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            raise Conflict(f"{label} is still referenced by other records") from e
        log.info("principal_deleted", kind=label.lower(), principal_id=str(principal.id))


# --- Module Notes -----------------------------------------------------------
# Route handlers own the HTTP shape; this service owns transactions (commit/rollback)
# for every principal write.

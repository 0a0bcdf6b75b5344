"""
church_api.api.routers.users

User principal endpoints.

Responsibilities:
- Public registration (an admin-role account needs an admin caller) and login.
- Self-or-admin profile reads, updates and password changes.
- Admin-only listing and deletion.

Note:
- `/getall` and `/me` are declared before `/{user_id}` so they are not captured by it.
"""

from __future__ import annotations

import uuid
from typing import Any

from fastapi import APIRouter, Depends
from starlette.status import HTTP_201_CREATED

from church_api.api.pagination import PageParams, page_envelope, page_params
from church_api.api.schemas import (
    LoginRequest,
    MessageResponse,
    PasswordChangeRequest,
    UserAuthResponse,
    UserOut,
    UserRegisterRequest,
    UserUpdateRequest,
    to_wire,
)
from church_api.auth.deps import (
    credential_service,
    get_caller,
    get_optional_caller,
    require_admin,
)
from church_api.auth.models import CallerContext, PrincipalKind
from church_api.services.credentials import CredentialService

router = APIRouter(prefix="/api/user", tags=["users"])


class UserEnvelope(MessageResponse):
    user: UserOut


@router.post("/register", response_model=UserAuthResponse, status_code=HTTP_201_CREATED)
async def register_user(
    body: UserRegisterRequest,
    caller: CallerContext | None = Depends(get_optional_caller),
    svc: CredentialService = Depends(credential_service),
) -> UserAuthResponse:
    profile = body.model_dump(
        exclude={"username", "email", "password", "confirm_password", "role"},
        exclude_none=True,
    )
    issued = await svc.register_user(
        username=body.username,
        email=body.email,
        password=body.password,
        confirm_password=body.confirm_password,
        role=body.role,
        caller=caller,
        **profile,
    )
    return UserAuthResponse(
        message="User registered successfully",
        token=issued.token,
        user=UserOut.model_validate(issued.principal),
    )


@router.post("/login", response_model=UserAuthResponse)
async def login_user(
    body: LoginRequest,
    svc: CredentialService = Depends(credential_service),
) -> UserAuthResponse:
    issued = await svc.authenticate(
        kind=PrincipalKind.user, email=body.email, password=body.password
    )
    return UserAuthResponse(
        message="Login successful",
        token=issued.token,
        user=UserOut.model_validate(issued.principal),
    )


@router.get("/getall", dependencies=[Depends(require_admin)])
async def list_users(
    params: PageParams = Depends(page_params),
    svc: CredentialService = Depends(credential_service),
) -> dict[str, Any]:
    page = await svc.list_users(page=params.page, limit=params.limit)
    return page_envelope(page, "users", lambda u: to_wire(UserOut, u))


@router.get("/me", response_model=UserOut)
async def get_me(
    caller: CallerContext = Depends(get_caller),
    svc: CredentialService = Depends(credential_service),
) -> UserOut:
    return UserOut.model_validate(await svc.get_user(caller, caller.subject_id))


@router.get("/{user_id}", response_model=UserOut)
async def get_user(
    user_id: uuid.UUID,
    caller: CallerContext = Depends(get_caller),
    svc: CredentialService = Depends(credential_service),
) -> UserOut:
    return UserOut.model_validate(await svc.get_user(caller, user_id))


@router.put("/update/{user_id}", response_model=UserEnvelope)
async def update_user(
    user_id: uuid.UUID,
    body: UserUpdateRequest,
    caller: CallerContext = Depends(get_caller),
    svc: CredentialService = Depends(credential_service),
) -> UserEnvelope:
    user = await svc.update_user(caller, user_id, body.model_dump(exclude_unset=True))
    return UserEnvelope(message="User updated successfully", user=UserOut.model_validate(user))


@router.put("/{user_id}/password", response_model=MessageResponse)
async def change_password(
    user_id: uuid.UUID,
    body: PasswordChangeRequest,
    caller: CallerContext = Depends(get_caller),
    svc: CredentialService = Depends(credential_service),
) -> MessageResponse:
    user = await svc.get_user(caller, user_id)
    await svc.change_password(
        user, new_password=body.new_password, confirmation=body.confirm_password
    )
    return MessageResponse(message="Password updated successfully")


@router.delete("/{user_id}", response_model=MessageResponse, dependencies=[Depends(require_admin)])
async def delete_user(
    user_id: uuid.UUID,
    svc: CredentialService = Depends(credential_service),
) -> MessageResponse:
    await svc.delete_user(user_id)
    return MessageResponse(message="User deleted successfully")

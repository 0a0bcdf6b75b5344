"""
church_api.api.routers.admins

Admin principal endpoints.

Responsibilities:
- Registration (bootstrap for the first admin, admin-only afterwards) and login.
- Admin-only listing, lookup, update and deletion of admin accounts.
"""

from __future__ import annotations

import uuid
from typing import Any

from fastapi import APIRouter, Depends
from starlette.status import HTTP_201_CREATED

from church_api.api.pagination import PageParams, page_envelope, page_params
from church_api.api.schemas import (
    AdminAuthResponse,
    AdminOut,
    AdminRegisterRequest,
    AdminUpdateRequest,
    LoginRequest,
    MessageResponse,
    to_wire,
)
from church_api.auth.deps import credential_service, get_optional_caller, require_admin
from church_api.auth.models import CallerContext, PrincipalKind
from church_api.services.credentials import CredentialService

router = APIRouter(prefix="/api/admins", tags=["admins"])


class AdminEnvelope(MessageResponse):
    admin: AdminOut


@router.post("/register", response_model=AdminAuthResponse, status_code=HTTP_201_CREATED)
async def register_admin(
    body: AdminRegisterRequest,
    caller: CallerContext | None = Depends(get_optional_caller),
    svc: CredentialService = Depends(credential_service),
) -> AdminAuthResponse:
    issued = await svc.register_admin(
        username=body.username,
        email=body.email,
        password=body.password,
        confirm_password=body.confirm_password,
        caller=caller,
    )
    return AdminAuthResponse(
        message="Admin registered successfully",
        token=issued.token,
        admin=AdminOut.model_validate(issued.principal),
    )


@router.post("/login", response_model=AdminAuthResponse)
async def login_admin(
    body: LoginRequest,
    svc: CredentialService = Depends(credential_service),
) -> AdminAuthResponse:
    issued = await svc.authenticate(
        kind=PrincipalKind.admin, email=body.email, password=body.password
    )
    return AdminAuthResponse(
        message="Login successful",
        token=issued.token,
        admin=AdminOut.model_validate(issued.principal),
    )


@router.get("/", dependencies=[Depends(require_admin)])
async def list_admins(
    params: PageParams = Depends(page_params),
    svc: CredentialService = Depends(credential_service),
) -> dict[str, Any]:
    page = await svc.list_admins(page=params.page, limit=params.limit)
    return page_envelope(page, "admins", lambda a: to_wire(AdminOut, a))


@router.get("/{admin_id}", response_model=AdminOut, dependencies=[Depends(require_admin)])
async def get_admin(
    admin_id: uuid.UUID,
    svc: CredentialService = Depends(credential_service),
) -> AdminOut:
    return AdminOut.model_validate(await svc.get_admin(admin_id))


@router.put("/update/{admin_id}", response_model=AdminEnvelope)
async def update_admin(
    admin_id: uuid.UUID,
    body: AdminUpdateRequest,
    caller: CallerContext = Depends(require_admin),
    svc: CredentialService = Depends(credential_service),
) -> AdminEnvelope:
    admin = await svc.update_admin(caller, admin_id, body.model_dump(exclude_unset=True))
    return AdminEnvelope(message="Admin updated successfully", admin=AdminOut.model_validate(admin))


@router.delete("/{admin_id}", response_model=MessageResponse, dependencies=[Depends(require_admin)])
async def delete_admin(
    admin_id: uuid.UUID,
    svc: CredentialService = Depends(credential_service),
) -> MessageResponse:
    await svc.delete_admin(admin_id)
    return MessageResponse(message="Admin deleted successfully")

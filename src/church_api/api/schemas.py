"""
church_api.api.schemas

Shared request/response models.

Responsibilities:
- Provide the camelCase wire base (`ApiModel`) used by every router.
- Define principal payloads (registration, login, profile updates) and their
  public projections. Password hashes are never part of a response model.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from church_api.auth.models import PrincipalKind, Role


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(ApiModel):
    message: str


class Address(ApiModel):
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None


# -- inbound ------------------------------------------------------------------


class LoginRequest(ApiModel):
    email: EmailStr
    password: str = Field(min_length=1)


class AdminRegisterRequest(ApiModel):
    username: str = Field(min_length=1, max_length=128)
    email: EmailStr
    password: str = Field(min_length=8)
    confirm_password: str | None = None


class UserRegisterRequest(AdminRegisterRequest):
    role: Role = Role.user
    age: int | None = Field(default=None, ge=18)
    department: str | None = None
    phone_number: str | None = None
    address: Address | None = None
    church_branch: str | None = None
    country: str | None = None


class AdminUpdateRequest(ApiModel):
    username: str | None = Field(default=None, min_length=1, max_length=128)
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=8)
    confirm_password: str | None = None
    role: Role | None = None

    @field_validator("username", "email", "password", "role", mode="before")
    @classmethod
    def _no_explicit_null(cls, value: Any) -> Any:
        # Omit a field to leave it unchanged; null is not a way to clear it.
        if value is None:
            raise ValueError("must not be null")
        return value


class UserUpdateRequest(AdminUpdateRequest):
    age: int | None = Field(default=None, ge=18)
    department: str | None = None
    phone_number: str | None = None
    address: Address | None = None
    church_branch: str | None = None
    country: str | None = None


class PasswordChangeRequest(ApiModel):
    new_password: str = Field(min_length=8)
    confirm_password: str | None = None


# -- outbound -----------------------------------------------------------------


class AdminOut(ApiModel):
    id: uuid.UUID
    username: str
    email: str
    role: Role
    created_at: datetime
    updated_at: datetime


class UserOut(AdminOut):
    age: int | None = None
    department: str | None = None
    phone_number: str | None = None
    address: Address | None = None
    church_branch: str | None = None
    country: str | None = None


class AdminAuthResponse(ApiModel):
    message: str
    token: str
    admin: AdminOut


class UserAuthResponse(ApiModel):
    message: str
    token: str
    user: UserOut


class WhoAmIResponse(ApiModel):
    id: uuid.UUID
    role: Role
    kind: PrincipalKind


def to_wire(model: type[ApiModel], obj: Any) -> dict[str, Any]:
    return model.model_validate(obj).model_dump(by_alias=True, mode="json")

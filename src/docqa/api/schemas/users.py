"""User DTOs — pure Pydantic, zero ORM imports."""
from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, field_validator
from docqa.domain.statuses import UserRole


class UserRegister(BaseModel):
    name: str
    email: str
    role: UserRole = UserRole.VIEWER

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be empty")
        return v.strip()

    @field_validator("email")
    @classmethod
    def email_looks_valid(cls, v: str) -> str:
        v = v.strip().lower()
        local, _, domain = v.partition("@")
        if not local or "." not in domain:
            raise ValueError("email must be a valid address")
        return v


class UserUpdate(BaseModel):
    name: str | None = None
    role: UserRole | None = None
    is_active: bool | None = None


class UserRead(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    email: str
    name: str
    role: UserRole
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserList(BaseModel):
    items: list[UserRead]
    total: int

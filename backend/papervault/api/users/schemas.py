"""Pydantic request/response schemas for auth and Users API."""
from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from ...domain.enums import Grade, Role

NonAdminRole = Literal["High School", "College", "University"]


def _blank_to_none(v):
    return None if isinstance(v, str) and not v.strip() else v


class SignUpIn(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    role: NonAdminRole
    grade: Optional[Grade] = None

    blank_to_none = field_validator("grade", mode="before")(_blank_to_none)


class SignInIn(BaseModel):
    email: EmailStr


class ProfileUpdateIn(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    role: Optional[Role] = None
    grade: Optional[Grade] = None

    blank_to_none = field_validator("name", "role", "grade", mode="before")(_blank_to_none)


class RoleUpdateIn(BaseModel):
    role: Role
    grade: Optional[Grade] = None

    blank_to_none = field_validator("grade", mode="before")(_blank_to_none)


class UserOut(BaseModel):
    id: str
    name: str
    email: str
    role: Role
    grade: Optional[Grade]
    created_at: Optional[datetime]


class SessionOut(BaseModel):
    token: str
    user: UserOut

"""Pydantic request/response schemas for the contact-admin form."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


class SuggestionIn(BaseModel):
    name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[EmailStr] = None
    subject: str = Field(..., min_length=5, max_length=100)
    message: str = Field(..., min_length=10, max_length=1000)

    @field_validator("name", "email", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        return None if isinstance(v, str) and not v.strip() else v


class SuggestionReadIn(BaseModel):
    is_read: bool = True


class SuggestionOut(BaseModel):
    id: str
    name: Optional[str]
    email: Optional[str]
    user_id: Optional[str]
    subject: str
    message: str
    is_read: bool
    created_at: datetime

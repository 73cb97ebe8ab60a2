"""Domain dataclasses for comments and admin suggestions."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .enums import Role


@dataclass(slots=True)
class Comment:
    id: str
    paper_id: str
    user_id: str
    user_name: str
    user_role: Optional[Role]
    text: str
    created_at: datetime


@dataclass(slots=True)
class Suggestion:
    id: str
    subject: str
    message: str
    created_at: datetime
    name: Optional[str] = None
    email: Optional[str] = None
    user_id: Optional[str] = None
    is_read: bool = False

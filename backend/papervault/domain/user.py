"""Domain dataclasses for users and the request viewer."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Optional

from .enums import Grade, Role


@dataclass(slots=True)
class User:
    id: str
    name: str
    email: str
    role: Role
    grade: Optional[Grade] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class Viewer:
    """Who is looking at a listing; anonymous viewers have no user."""

    user: Optional[User] = None
    bookmarks: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def is_anonymous(self) -> bool:
        return self.user is None

    @property
    def role(self) -> Optional[Role]:
        return self.user.role if self.user else None

    @property
    def grade(self) -> Optional[Grade]:
        return self.user.grade if self.user else None


ANONYMOUS = Viewer()

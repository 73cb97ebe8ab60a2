"""Educational levels, user roles and high-school grades."""
from __future__ import annotations

from enum import Enum


class Level(str, Enum):
    HIGH_SCHOOL = "High School"
    COLLEGE = "College"
    UNIVERSITY = "University"


class Role(str, Enum):
    HIGH_SCHOOL = "High School"
    COLLEGE = "College"
    UNIVERSITY = "University"
    ADMIN = "Admin"

    @property
    def is_admin(self) -> bool:
        return self is Role.ADMIN

    def as_level(self) -> Level | None:
        """The paper level a non-admin role maps to."""
        if self is Role.ADMIN:
            return None
        return Level(self.value)


class Grade(str, Enum):
    GRADE_10 = "Grade 10"
    GRADE_11 = "Grade 11"
    GRADE_12 = "Grade 12"


"""Pydantic request/response schemas for Papers API."""
from __future__ import annotations

from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...domain.enums import Grade, Level, Role

MIN_YEAR = 2000


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


def _unselected_to_none(v: Any) -> Any:
    """Select boxes send "all" or "any" when nothing is chosen."""
    if isinstance(v, str) and v.strip().lower() in ("", "all", "any"):
        return None
    return v


class PaperFilterIn(BaseModel):
    query: Optional[str] = Field(default=None, max_length=200)
    level: Optional[Level] = None
    subject: Optional[str] = Field(default=None, max_length=200)
    year: Optional[int] = Field(default=None, ge=1900, le=2100)
    grade: Optional[Grade] = None

    blank_to_none = field_validator("query", "subject", mode="before")(_blank_to_none)
    unselected_to_none = field_validator("level", "year", "grade", mode="before")(_unselected_to_none)


class PaperUploadIn(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = Field(default=None, max_length=2000)
    level: Level
    subject: str = Field(..., min_length=1, max_length=200)
    year: int
    grade: Optional[Grade] = None

    blank_to_none = field_validator("description", mode="before")(_blank_to_none)
    unselected_to_none = field_validator("grade", mode="before")(_unselected_to_none)

    @field_validator("title", "subject")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("year")
    @classmethod
    def _year_range(cls, v: int) -> int:
        latest = date.today().year + 1
        if not MIN_YEAR <= v <= latest:
            raise ValueError(f"year must be between {MIN_YEAR} and {latest}")
        return v

    @model_validator(mode="after")
    def _grade_matches_level(self) -> "PaperUploadIn":
        if self.level is Level.HIGH_SCHOOL and self.grade is None:
            raise ValueError("Grade is required for High School level papers")
        if self.level is not Level.HIGH_SCHOOL:
            self.grade = None
        return self


class PaperOut(BaseModel):
    id: str
    title: str
    description: Optional[str]
    level: Level
    grade: Optional[Grade]
    subject: str
    year: int
    average_rating: float
    ratings_count: int
    uploader_id: str
    file_name: Optional[str]
    file_url: Optional[str]
    file_size: Optional[int]
    questions: List[Dict[str, Any]]
    is_bookmarked: bool
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


class PaperListOut(BaseModel):
    items: List[PaperOut]
    total: int
    available_subjects: List[str]
    available_years: List[int]
    message: Optional[str] = None


class RatingIn(BaseModel):
    value: int = Field(..., strict=True, ge=1, le=5)


class RatingOut(BaseModel):
    average_rating: float
    ratings_count: int
    user_rating: Optional[int] = None


class BookmarkOut(BaseModel):
    paper_id: str
    is_bookmarked: bool


class CommentIn(BaseModel):
    text: str = Field(..., min_length=1, max_length=1000)

    @field_validator("text")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Comment cannot be empty")
        return v


class CommentOut(BaseModel):
    id: str
    paper_id: str
    user_id: str
    user_name: str
    user_role: Optional[Role]
    text: str
    created_at: datetime


def dump(model: type[BaseModel], obj: Any) -> Dict[str, Any]:
    data = asdict(obj) if is_dataclass(obj) else obj
    return model.model_validate(data).model_dump(mode="json")

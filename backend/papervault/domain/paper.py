"""Domain dataclass for Paper entities (DB-agnostic)."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from .enums import Grade, Level


@dataclass(slots=True)
class Paper:
    id: str
    title: str
    level: Level
    subject: str
    year: int
    uploader_id: str
    description: Optional[str] = None
    grade: Optional[Grade] = None
    average_rating: float = 0.0
    ratings_count: int = 0
    file_name: Optional[str] = None
    file_path: Optional[str] = None
    file_url: Optional[str] = None
    file_size: Optional[int] = None
    questions: List[Dict] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    is_bookmarked: bool = False


@dataclass(slots=True)
class RatingSummary:
    average_rating: float
    ratings_count: int
    user_rating: Optional[int] = None

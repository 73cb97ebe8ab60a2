"""Paper ORM model compatible with PostgreSQL(Supabase) and SQLite."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import Enum, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from ..base import Base, utcnow
from ...domain.enums import Grade, Level


def _enum(cls):
    return Enum(cls, native_enum=False, length=20, values_callable=lambda e: [m.value for m in e])


class PaperModel(Base):
    __tablename__ = "papers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)  # UUID string
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, default=None)
    level: Mapped[Level] = mapped_column(_enum(Level), nullable=False, index=True)
    grade: Mapped[Optional[Grade]] = mapped_column(_enum(Grade), default=None)
    subject: Mapped[str] = mapped_column(String(200), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)

    average_rating: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    ratings_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # Bumped on every UPDATE; a stale row makes the flush raise StaleDataError.
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    uploader_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    file_name: Mapped[Optional[str]] = mapped_column(String(500), default=None)
    file_path: Mapped[Optional[str]] = mapped_column(String(1000), default=None)
    file_url: Mapped[Optional[str]] = mapped_column(String(1000), default=None)
    file_size: Mapped[Optional[int]] = mapped_column(Integer, default=None)
    questions: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, default=list)

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False, index=True)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow, nullable=False)

    __mapper_args__ = {"version_id_col": version}

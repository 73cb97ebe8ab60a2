"""SQLAlchemy-backed Paper repository returning dataclasses."""
from __future__ import annotations

import uuid
from typing import Iterable, Iterator, List, Optional, Sequence

from sqlalchemy import Select, delete, select
from sqlalchemy.orm import Session

from ..models import BookmarkModel, CommentModel, PaperModel, RatingLogModel
from ...domain.paper import Paper

# Upper bound on ids per batch lookup; callers chunk larger sets.
ID_BATCH_LIMIT = 30


def chunked(ids: Sequence[str], size: int = ID_BATCH_LIMIT) -> Iterator[Sequence[str]]:
    for start in range(0, len(ids), size):
        yield ids[start:start + size]


def to_domain(m: PaperModel) -> Paper:
    return Paper(
        id=m.id,
        title=m.title,
        description=m.description,
        level=m.level,
        grade=m.grade,
        subject=m.subject,
        year=m.year,
        uploader_id=m.uploader_id,
        average_rating=m.average_rating or 0.0,
        ratings_count=m.ratings_count or 0,
        file_name=m.file_name,
        file_path=m.file_path,
        file_url=m.file_url,
        file_size=m.file_size,
        questions=list(m.questions or []),
        created_at=m.created_at,
        updated_at=m.updated_at,
    )


class PaperRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list(self, *, limit: int | None = None) -> List[Paper]:
        stmt: Select = select(PaperModel).order_by(PaperModel.created_at.desc())
        if limit:
            stmt = stmt.limit(limit)
        return [to_domain(m) for m in self.session.scalars(stmt).all()]

    def get(self, paper_id: str) -> Optional[Paper]:
        m = self.session.get(PaperModel, paper_id)
        return to_domain(m) if m else None

    def exists(self, paper_id: str) -> bool:
        stmt = select(PaperModel.id).where(PaperModel.id == paper_id).limit(1)
        return self.session.scalars(stmt).first() is not None

    def get_many(self, paper_ids: Iterable[str]) -> List[Paper]:
        ids = list(paper_ids)
        if len(ids) > ID_BATCH_LIMIT:
            raise ValueError(f"at most {ID_BATCH_LIMIT} ids per batch, got {len(ids)}")
        if not ids:
            return []
        stmt = select(PaperModel).where(PaperModel.id.in_(ids))
        return [to_domain(m) for m in self.session.scalars(stmt).all()]

    def create(self, data: Paper) -> Paper:
        m = PaperModel(
            id=data.id or str(uuid.uuid4()),
            title=data.title,
            description=data.description,
            level=data.level,
            grade=data.grade,
            subject=data.subject,
            year=data.year,
            uploader_id=data.uploader_id,
            average_rating=0.0,
            ratings_count=0,
            file_name=data.file_name,
            file_path=data.file_path,
            file_url=data.file_url,
            file_size=data.file_size,
            questions=list(data.questions or []),
        )
        if data.created_at is not None:
            m.created_at = data.created_at
        self.session.add(m)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(m)
        return to_domain(m)

    def delete(self, paper_id: str) -> bool:
        m = self.session.get(PaperModel, paper_id)
        if not m:
            return False
        for dependent in (RatingLogModel, BookmarkModel, CommentModel):
            self.session.execute(delete(dependent).where(dependent.paper_id == paper_id))
        self.session.delete(m)
        self.session.commit()
        return True

"""Bookmark set operations; each toggle is one atomic statement plus commit."""
from __future__ import annotations

from typing import List

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models import BookmarkModel


class BookmarkRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def ids_for(self, user_id: str) -> List[str]:
        stmt = select(BookmarkModel.paper_id).where(BookmarkModel.user_id == user_id).order_by(BookmarkModel.id)
        return list(self.session.scalars(stmt).all())

    def contains(self, user_id: str, paper_id: str) -> bool:
        stmt = select(BookmarkModel.id).where(
            BookmarkModel.user_id == user_id, BookmarkModel.paper_id == paper_id
        ).limit(1)
        return self.session.scalars(stmt).first() is not None

    def toggle(self, user_id: str, paper_id: str) -> bool:
        """Remove if present, add otherwise. Returns the new membership."""
        try:
            removed = self.session.execute(
                delete(BookmarkModel).where(
                    BookmarkModel.user_id == user_id, BookmarkModel.paper_id == paper_id
                )
            ).rowcount
            if removed:
                self.session.commit()
                return False
            self.session.add(BookmarkModel(user_id=user_id, paper_id=paper_id))
            self.session.commit()
            return True
        except IntegrityError:
            # Either a concurrent toggle inserted the row first, or the paper
            # or user vanished under us. Report what is actually stored.
            self.session.rollback()
            return self.contains(user_id, paper_id)
        except Exception:
            self.session.rollback()
            raise

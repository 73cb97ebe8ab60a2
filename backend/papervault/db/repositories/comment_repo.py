"""Comment repository (append-only)."""
from __future__ import annotations

import uuid
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import CommentModel
from ...domain.comment import Comment
from ...domain.user import User


def to_domain(m: CommentModel) -> Comment:
    return Comment(
        id=m.id,
        paper_id=m.paper_id,
        user_id=m.user_id,
        user_name=m.user_name,
        user_role=m.user_role,
        text=m.text,
        created_at=m.created_at,
    )


class CommentRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for(self, paper_id: str) -> List[Comment]:
        stmt = (
            select(CommentModel)
            .where(CommentModel.paper_id == paper_id)
            .order_by(CommentModel.created_at.desc(), CommentModel.id)
        )
        return [to_domain(m) for m in self.session.scalars(stmt).all()]

    def create(self, *, paper_id: str, author: User, text: str) -> Comment:
        m = CommentModel(
            id=str(uuid.uuid4()),
            paper_id=paper_id,
            user_id=author.id,
            user_name=author.name,
            user_role=author.role,
            text=text,
        )
        self.session.add(m)
        self.session.commit()
        self.session.refresh(m)
        return to_domain(m)

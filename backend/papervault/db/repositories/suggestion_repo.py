"""Suggestion repository."""
from __future__ import annotations

import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import SuggestionModel
from ...domain.comment import Suggestion


def to_domain(m: SuggestionModel) -> Suggestion:
    return Suggestion(
        id=m.id,
        name=m.name,
        email=m.email,
        user_id=m.user_id,
        subject=m.subject,
        message=m.message,
        is_read=m.is_read,
        created_at=m.created_at,
    )


class SuggestionRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list(self) -> List[Suggestion]:
        stmt = select(SuggestionModel).order_by(SuggestionModel.created_at.desc())
        return [to_domain(m) for m in self.session.scalars(stmt).all()]

    def create(self, *, subject: str, message: str, name: str | None = None,
               email: str | None = None, user_id: str | None = None) -> Suggestion:
        m = SuggestionModel(
            id=str(uuid.uuid4()),
            subject=subject,
            message=message,
            name=name,
            email=email,
            user_id=user_id,
            is_read=False,
        )
        self.session.add(m)
        self.session.commit()
        self.session.refresh(m)
        return to_domain(m)

    def set_read(self, suggestion_id: str, is_read: bool) -> Optional[Suggestion]:
        m = self.session.get(SuggestionModel, suggestion_id)
        if not m:
            return None
        m.is_read = is_read
        self.session.commit()
        self.session.refresh(m)
        return to_domain(m)

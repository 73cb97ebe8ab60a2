"""Contact-form suggestions sent to administrators."""
from __future__ import annotations

from typing import List, Optional

from loguru import logger
from sqlalchemy.orm import Session

from ..db.repositories.suggestion_repo import SuggestionRepository
from ..domain.comment import Suggestion
from ..domain.user import User
from ..errors import NotFound, PermissionDenied, returns_result


class SuggestionService:
    def __init__(self, session: Session) -> None:
        self.repo = SuggestionRepository(session)

    @returns_result
    def send_suggestion(self, *, subject: str, message: str, name: Optional[str] = None,
                        email: Optional[str] = None, sender: Optional[User] = None) -> Suggestion:
        suggestion = self.repo.create(
            subject=subject,
            message=message,
            name=name or (sender.name if sender else None),
            email=email or (sender.email if sender else None),
            user_id=sender.id if sender else None,
        )
        logger.info("suggestion {} received", suggestion.id)
        return suggestion

    @returns_result
    def list_suggestions(self, actor: User) -> List[Suggestion]:
        if not actor.role.is_admin:
            raise PermissionDenied("Admin role required.")
        return self.repo.list()

    @returns_result
    def mark_read(self, actor: User, suggestion_id: str, is_read: bool = True) -> Suggestion:
        if not actor.role.is_admin:
            raise PermissionDenied("Admin role required.")
        suggestion = self.repo.set_read(suggestion_id, is_read)
        if suggestion is None:
            raise NotFound("Suggestion not found.")
        return suggestion

"""Per-user bookmark sets."""
from __future__ import annotations

from typing import FrozenSet, List

from loguru import logger
from sqlalchemy.orm import Session

from ..db.repositories.bookmark_repo import BookmarkRepository
from ..db.repositories.paper_repo import PaperRepository, chunked
from ..db.repositories.user_repo import UserRepository
from ..domain.paper import Paper
from ..errors import NotFound, returns_result


class BookmarkService:
    def __init__(self, session: Session) -> None:
        self.bookmarks = BookmarkRepository(session)
        self.papers = PaperRepository(session)
        self.users = UserRepository(session)

    @returns_result
    def toggle_bookmark(self, paper_id: str, user_id: str) -> bool:
        if not self.users.exists(user_id):
            raise NotFound("User not found.")
        if not self.papers.exists(paper_id):
            raise NotFound("Paper not found.")
        bookmarked = self.bookmarks.toggle(user_id, paper_id)
        logger.info("user {} {} paper {}", user_id, "bookmarked" if bookmarked else "unbookmarked", paper_id)
        return bookmarked

    @returns_result
    def list_bookmarked_papers(self, user_id: str) -> List[Paper]:
        if not self.users.exists(user_id):
            raise NotFound("User not found.")
        ids = self.bookmarks.ids_for(user_id)
        found = {}
        for batch in chunked(ids):
            found.update({p.id: p for p in self.papers.get_many(batch)})
        papers = []
        for paper_id in ids:
            paper = found.get(paper_id)
            if paper is None:
                continue
            paper.is_bookmarked = True
            papers.append(paper)
        return papers

    def bookmarked_ids(self, user_id: str) -> FrozenSet[str]:
        return frozenset(self.bookmarks.ids_for(user_id))

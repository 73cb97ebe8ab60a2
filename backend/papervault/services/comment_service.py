"""Comments on papers: append-only, newest first, with live snapshots."""
from __future__ import annotations

from typing import List, Optional

from loguru import logger
from sqlalchemy.orm import Session

from ..db.repositories.comment_repo import CommentRepository
from ..db.repositories.paper_repo import PaperRepository
from ..db.repositories.user_repo import UserRepository
from ..domain.comment import Comment
from ..errors import NotFound, returns_result
from .comment_feed import CommentFeed, CommentSubscription


class CommentService:
    def __init__(self, session: Session, feed: Optional[CommentFeed] = None) -> None:
        self.session = session
        self.comments = CommentRepository(session)
        self.papers = PaperRepository(session)
        self.users = UserRepository(session)
        self.feed = feed

    @returns_result
    def add_comment(self, paper_id: str, user_id: str, text: str) -> Comment:
        author = self.users.get(user_id)
        if author is None:
            raise NotFound("User not found.")
        if not self.papers.exists(paper_id):
            raise NotFound("Paper not found.")
        comment = self.comments.create(paper_id=paper_id, author=author, text=text)
        logger.info("comment {} added to paper {} by {}", comment.id, paper_id, user_id)
        if self.feed is not None:
            self.feed.publish(paper_id)
        return comment

    @returns_result
    def list_comments(self, paper_id: str) -> List[Comment]:
        if not self.papers.exists(paper_id):
            raise NotFound("Paper not found.")
        return self.comments.list_for(paper_id)

    @returns_result
    def subscribe(self, paper_id: str) -> CommentSubscription:
        if self.feed is None:
            raise RuntimeError("comment feed is not configured")
        if not self.papers.exists(paper_id):
            raise NotFound("Paper not found.")
        return self.feed.subscribe(paper_id, lambda: self._snapshot(paper_id))

    def _snapshot(self, paper_id: str) -> List[Comment]:
        # Each snapshot reads in a new transaction so it sees comments committed since the last one.
        self.session.rollback()
        return self.comments.list_for(paper_id)

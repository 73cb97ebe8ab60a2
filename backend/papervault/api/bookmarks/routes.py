"""Bookmarks blueprint: the signed-in user's saved papers."""
from __future__ import annotations

from flask import Blueprint
from sqlalchemy.orm import Session

from ...auth.jwt import current_user, require_user
from ...db.session import current_db
from ...errors import respond
from ...services.bookmark_service import BookmarkService
from ..papers.routes import render_paper


bp = Blueprint("bookmarks", __name__)


def _service() -> BookmarkService:
    session: Session = current_db().Session()
    return BookmarkService(session)


@bp.get("/")
@require_user
def list_bookmarks():
    result = _service().list_bookmarked_papers(current_user().id)
    return respond(result, render=lambda papers: [render_paper(p) for p in papers])

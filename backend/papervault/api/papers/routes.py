"""Papers blueprint: filtered listing, admin upload/delete, ratings, bookmarks, comments."""
from __future__ import annotations

import json
from typing import Any, Dict, List

from flask import Blueprint, Response, current_app, request, stream_with_context
from sqlalchemy.orm import Session

from ...auth.jwt import current_user, current_viewer, require_admin, require_user
from ...db.session import current_db
from ...domain.comment import Comment
from ...domain.paper import Paper
from ...errors import parse_payload, respond
from ...integrations.storage import current_storage
from ...services.bookmark_service import BookmarkService
from ...services.comment_service import CommentService
from ...services.paper_filter import FilterCriteria, FilterResult
from ...services.paper_service import NewPaper, PaperService, UploadedFile
from ...services.rating_service import RatingService
from .schemas import (
    BookmarkOut,
    CommentIn,
    CommentOut,
    PaperFilterIn,
    PaperListOut,
    PaperOut,
    PaperUploadIn,
    RatingIn,
    RatingOut,
    dump,
)


bp = Blueprint("papers", __name__)


def _session() -> Session:
    return current_db().Session()


def _service() -> PaperService:
    return PaperService(
        _session(),
        storage=current_storage(),
        max_upload_bytes=current_app.config.get("MAX_UPLOAD_BYTES", 5 * 1024 * 1024),
    )


def _comments() -> CommentService:
    return CommentService(_session(), feed=current_app.extensions["comment_feed"])


def render_paper(paper: Paper) -> Dict[str, Any]:
    return dump(PaperOut, paper)


def render_comments(comments: List[Comment]) -> List[Dict[str, Any]]:
    return [dump(CommentOut, c) for c in comments]


def _render_listing(result: FilterResult) -> Dict[str, Any]:
    return PaperListOut(
        items=[PaperOut.model_validate(render_paper(p)) for p in result.items],
        total=len(result.items),
        available_subjects=result.available_subjects,
        available_years=result.available_years,
        message=result.message,
    ).model_dump(mode="json")


@bp.get("/")
def list_papers():
    parsed = parse_payload(PaperFilterIn, request.args.to_dict())
    if not parsed.ok:
        return respond(parsed)
    f = parsed.unwrap()
    criteria = FilterCriteria(query=f.query, level=f.level, subject=f.subject, year=f.year, grade=f.grade)
    return respond(_service().list_papers(criteria, current_viewer()), render=_render_listing)


@bp.get("/<paper_id>")
def get_paper(paper_id: str):
    return respond(_service().get_paper(paper_id, current_viewer()), render=render_paper)


@bp.post("/")
@require_admin
def upload_paper():
    parsed = parse_payload(PaperUploadIn, request.form.to_dict())
    if not parsed.ok:
        return respond(parsed)
    meta = parsed.unwrap()

    upload = request.files.get("file")
    file = None
    if upload is not None and upload.filename:
        file = UploadedFile(filename=upload.filename, content_type=upload.mimetype, data=upload.read())

    result = _service().upload_paper(
        NewPaper(
            title=meta.title,
            level=meta.level,
            subject=meta.subject,
            year=meta.year,
            description=meta.description,
            grade=meta.grade,
        ),
        file,
        current_user(),
    )
    return respond(result, 201, render=render_paper)


@bp.delete("/<paper_id>")
@require_admin
def delete_paper(paper_id: str):
    return respond(_service().delete_paper(paper_id, current_user()), render=lambda deleted: {"deleted": deleted})


@bp.get("/<paper_id>/rating")
def get_rating(paper_id: str):
    viewer = current_viewer()
    user_id = viewer.user.id if viewer.user else None
    result = RatingService(_session()).get_rating(paper_id, user_id)
    return respond(result, render=lambda s: dump(RatingOut, s))


@bp.post("/<paper_id>/rating")
@require_user
def rate_paper(paper_id: str):
    parsed = parse_payload(RatingIn, request.get_json(silent=True))
    if not parsed.ok:
        return respond(parsed)
    svc = RatingService(_session(), max_retries=current_app.config.get("RATING_MAX_RETRIES", 5))
    result = svc.submit_rating(paper_id, current_user().id, parsed.unwrap().value)
    return respond(result, render=lambda s: dump(RatingOut, s))


@bp.post("/<paper_id>/bookmark")
@require_user
def toggle_bookmark(paper_id: str):
    result = BookmarkService(_session()).toggle_bookmark(paper_id, current_user().id)
    return respond(result, render=lambda on: BookmarkOut(paper_id=paper_id, is_bookmarked=on).model_dump())


@bp.get("/<paper_id>/comments")
def list_comments(paper_id: str):
    return respond(_comments().list_comments(paper_id), render=render_comments)


@bp.post("/<paper_id>/comments")
@require_user
def add_comment(paper_id: str):
    parsed = parse_payload(CommentIn, request.get_json(silent=True))
    if not parsed.ok:
        return respond(parsed)
    result = _comments().add_comment(paper_id, current_user().id, parsed.unwrap().text)
    return respond(result, 201, render=lambda c: dump(CommentOut, c))


@bp.get("/<paper_id>/comments/stream")
def stream_comments(paper_id: str):
    """Server-sent events: a full comment snapshot on open and after every new comment."""
    result = _comments().subscribe(paper_id)
    if not result.ok:
        return respond(result)
    subscription = result.unwrap()
    heartbeat = current_app.config.get("COMMENT_STREAM_HEARTBEAT") or None

    def events():
        with subscription:
            for snapshot in subscription.stream(heartbeat):
                if snapshot is None:
                    yield ": keep-alive\n\n"
                    continue
                yield f"event: comments\ndata: {json.dumps(render_comments(snapshot))}\n\n"

    return Response(
        stream_with_context(events()),
        mimetype="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )

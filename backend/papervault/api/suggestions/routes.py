"""Suggestions blueprint: contact-admin form and the admin inbox."""
from __future__ import annotations

from flask import Blueprint, request
from sqlalchemy.orm import Session

from ...auth.jwt import current_user, current_viewer, require_admin
from ...db.session import current_db
from ...errors import parse_payload, respond
from ...services.suggestion_service import SuggestionService
from ..papers.schemas import dump
from .schemas import SuggestionIn, SuggestionOut, SuggestionReadIn


bp = Blueprint("suggestions", __name__)


def _service() -> SuggestionService:
    session: Session = current_db().Session()
    return SuggestionService(session)


@bp.post("/")
def send_suggestion():
    parsed = parse_payload(SuggestionIn, request.get_json(silent=True))
    if not parsed.ok:
        return respond(parsed)
    payload = parsed.unwrap()
    result = _service().send_suggestion(
        subject=payload.subject.strip(),
        message=payload.message.strip(),
        name=payload.name,
        email=str(payload.email) if payload.email else None,
        sender=current_viewer().user,
    )
    return respond(result, 201, render=lambda s: dump(SuggestionOut, s))


@bp.get("/")
@require_admin
def list_suggestions():
    result = _service().list_suggestions(current_user())
    return respond(result, render=lambda items: [dump(SuggestionOut, s) for s in items])


@bp.put("/<suggestion_id>/read")
@require_admin
def mark_read(suggestion_id: str):
    parsed = parse_payload(SuggestionReadIn, request.get_json(silent=True))
    if not parsed.ok:
        return respond(parsed)
    result = _service().mark_read(current_user(), suggestion_id, parsed.unwrap().is_read)
    return respond(result, render=lambda s: dump(SuggestionOut, s))

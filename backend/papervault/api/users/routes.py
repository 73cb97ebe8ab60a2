"""Users blueprint: own profile and admin role management."""
from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

from flask import Blueprint, request
from sqlalchemy.orm import Session

from ...auth.jwt import current_user, require_admin, require_user
from ...db.session import current_db
from ...domain.user import User
from ...errors import parse_payload, respond
from ...services.user_service import UserService
from .schemas import ProfileUpdateIn, RoleUpdateIn, UserOut


bp = Blueprint("users", __name__)


def _service() -> UserService:
    session: Session = current_db().Session()
    return UserService(session)


def render_user(user: User) -> Dict[str, Any]:
    return UserOut.model_validate(asdict(user)).model_dump(mode="json")


@bp.get("/me")
@require_user
def get_me():
    return respond(_service().get_user(current_user().id), render=render_user)


@bp.put("/me")
@require_user
def update_me():
    parsed = parse_payload(ProfileUpdateIn, request.get_json(silent=True))
    if not parsed.ok:
        return respond(parsed)
    payload = parsed.unwrap()
    result = _service().update_profile(
        current_user().id,
        name=payload.name.strip() if payload.name else None,
        role=payload.role,
        grade=payload.grade,
    )
    return respond(result, render=render_user)


@bp.get("/")
@require_admin
def list_users():
    return respond(_service().list_users(current_user()), render=lambda users: [render_user(u) for u in users])


@bp.put("/<user_id>/role")
@require_admin
def set_role(user_id: str):
    parsed = parse_payload(RoleUpdateIn, request.get_json(silent=True))
    if not parsed.ok:
        return respond(parsed)
    payload = parsed.unwrap()
    result = _service().set_role(current_user(), user_id, payload.role, payload.grade)
    return respond(result, render=render_user)

"""Auth blueprint: sign-up and sign-in by email, returning a Bearer token."""
from __future__ import annotations

from dataclasses import asdict

from flask import Blueprint, request
from sqlalchemy.orm import Session

from ...auth.jwt import current_user, issue_token
from ...db.session import current_db
from ...domain.enums import Role
from ...domain.user import User
from ...errors import ok, parse_payload, respond
from ...services.user_service import UserService
from ..users.schemas import SessionOut, SignInIn, SignUpIn, UserOut
from ..users.routes import render_user


bp = Blueprint("auth", __name__)


def _service() -> UserService:
    session: Session = current_db().Session()
    return UserService(session)


def _session_for(user: User):
    return SessionOut(token=issue_token(user), user=UserOut.model_validate(asdict(user))).model_dump(mode="json")


@bp.post("/signup")
def sign_up():
    parsed = parse_payload(SignUpIn, request.get_json(silent=True))
    if not parsed.ok:
        return respond(parsed)
    payload = parsed.unwrap()
    result = _service().sign_up(
        name=payload.name.strip(),
        email=str(payload.email),
        role=Role(payload.role),
        grade=payload.grade,
    )
    return respond(result, 201, render=_session_for)


@bp.post("/signin")
def sign_in():
    parsed = parse_payload(SignInIn, request.get_json(silent=True))
    if not parsed.ok:
        return respond(parsed)
    return respond(_service().sign_in(str(parsed.unwrap().email)), render=_session_for)


@bp.get("/me")
def whoami():
    return ok(render_user(current_user()))

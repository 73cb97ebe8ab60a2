"""JWT helpers and Flask decorators for Bearer auth."""
from __future__ import annotations

import functools
import time
from typing import Any, Callable, Dict, Optional

import jwt
from flask import current_app, request

from ..db.session import current_db
from ..domain.user import User, Viewer
from ..errors import PermissionDenied, Unauthenticated
from ..services.user_service import UserService


def encode(payload: Dict[str, Any]) -> str:
    secret = current_app.config.get("JWT_SECRET", "change-me")
    alg = current_app.config.get("JWT_ALG", "HS256")
    return jwt.encode(payload, secret, algorithm=alg)


def decode(token: str) -> Dict[str, Any]:
    secret = current_app.config.get("JWT_SECRET", "change-me")
    alg = current_app.config.get("JWT_ALG", "HS256")
    return jwt.decode(token, secret, algorithms=[alg])


def issue_token(user: User) -> str:
    now = int(time.time())
    ttl = int(current_app.config.get("JWT_TTL_SECONDS", 7 * 24 * 3600))
    return encode({"sub": user.id, "role": user.role.value, "iat": now, "exp": now + ttl})


def bearer_user_id() -> Optional[str]:
    """User id from a valid Bearer token; None when no token was sent."""
    auth = request.headers.get("Authorization", "")
    if not auth:
        return None
    if not auth.startswith("Bearer "):
        raise Unauthenticated("Missing Bearer token")
    try:
        claims = decode(auth.split(" ", 1)[1])
    except jwt.PyJWTError as e:
        raise Unauthenticated(str(e)) from e
    return claims.get("sub")


def _users() -> UserService:
    return UserService(current_db().Session())


VIEWER_ENVIRON_KEY = "papervault.viewer"


def current_viewer() -> Viewer:
    """The request's viewer, resolved once per request."""
    viewer = request.environ.get(VIEWER_ENVIRON_KEY)
    if viewer is None:
        viewer = _users().viewer_for(bearer_user_id())
        request.environ[VIEWER_ENVIRON_KEY] = viewer
    return viewer


def current_user() -> User:
    viewer = current_viewer()
    if viewer.user is None:
        raise Unauthenticated("Please sign in to continue.")
    return viewer.user


def require_user(fn: Callable[..., Any]) -> Callable[..., Any]:
    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any):
        current_user()
        return fn(*args, **kwargs)
    return wrapper


def require_admin(fn: Callable[..., Any]) -> Callable[..., Any]:
    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any):
        if not current_user().role.is_admin:
            raise PermissionDenied("Admin role required.")
        return fn(*args, **kwargs)
    return wrapper

"""Health check endpoints."""
from __future__ import annotations

from flask import Blueprint
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ...db.session import current_db
from ...errors import ok
from ...integrations.supabase_client import current_supabase


bp = Blueprint("health", __name__)


@bp.get("/")
def alive():
    return ok({"status": "ok"})


@bp.get("/db")
def database_status():
    try:
        current_db().Session().execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        return ok({"status": "unavailable", "detail": type(e).__name__}, 503)
    return ok({"status": "ok"})


@bp.get("/supabase")
def supabase_status():
    supabase = current_supabase()
    return ok({
        "anon_initialized": supabase.anon is not None,
        "service_initialized": supabase.service is not None,
    })

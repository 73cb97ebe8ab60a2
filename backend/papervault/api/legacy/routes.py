"""Minimal upload service endpoints kept at the site root.

``POST /upload`` and ``GET /papers`` mirror the stand-alone upload server used
by older admin tooling; uploads need an admin bearer token. ``GET /files/<key>``
serves objects written by the local storage backend.
"""
from __future__ import annotations

from flask import Blueprint, abort, current_app, request, send_file
from sqlalchemy.orm import Session

from ...auth.jwt import current_user, require_admin
from ...db.session import current_db
from ...errors import PermissionDenied, StorageError, ok, parse_payload, respond
from ...integrations.storage import LocalStorage, current_storage
from ...services.paper_service import NewPaper, PaperService, UploadedFile
from ..papers.routes import render_paper
from ..papers.schemas import PaperUploadIn


bp = Blueprint("legacy", __name__)


def _session() -> Session:
    return current_db().Session()


def _service() -> PaperService:
    return PaperService(
        _session(),
        storage=current_storage(),
        max_upload_bytes=current_app.config.get("MAX_UPLOAD_BYTES", 5 * 1024 * 1024),
    )


@bp.post("/upload")
@require_admin
def upload():
    uploader = current_user()
    form = request.form.to_dict()
    claimed = form.pop("uploaderId", None) or form.pop("uploader_id", None)
    if claimed and claimed != uploader.id:
        raise PermissionDenied("uploaderId must match the signed-in admin.")

    parsed = parse_payload(PaperUploadIn, form)
    if not parsed.ok:
        return respond(parsed)
    meta = parsed.unwrap()

    upload = request.files.get("file")
    file = None
    if upload is not None and upload.filename:
        file = UploadedFile(filename=upload.filename, content_type=upload.mimetype, data=upload.read())

    result = _service().upload_paper(
        NewPaper(title=meta.title, level=meta.level, subject=meta.subject, year=meta.year,
                 description=meta.description, grade=meta.grade),
        file,
        uploader,
    )
    return respond(result, render=lambda p: {
        "message": "Paper uploaded successfully!",
        "file_url": p.file_url,
        "paper": render_paper(p),
    })


@bp.get("/papers")
def list_papers():
    offset = request.args.get("offset", 0, type=int)
    limit = request.args.get("limit", 50, type=int)
    result = _service().list_all()
    if not result.ok:
        return respond(result)
    papers = result.unwrap()
    page = papers[max(offset, 0):max(offset, 0) + max(limit, 0)]
    return ok({
        "papers": [render_paper(p) for p in page],
        "total": len(papers),
        "offset": offset,
        "limit": limit,
    })


@bp.get("/files/<path:key>", endpoint="download")
def download(key: str):
    storage = current_storage()
    if not isinstance(storage, LocalStorage):
        abort(404)
    try:
        path = storage.path_for(key)
    except StorageError:
        abort(404)
    if not path.is_file():
        abort(404)
    return send_file(path, mimetype="application/pdf", download_name=path.name)

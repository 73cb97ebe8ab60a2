"""Paper service: listing, lookup, admin upload and deletion."""
from __future__ import annotations

import re
import time
import uuid
from dataclasses import dataclass, replace
from typing import List, Optional

from loguru import logger
from sqlalchemy.orm import Session

from ..db.repositories.paper_repo import PaperRepository
from ..domain.enums import Grade, Level
from ..domain.paper import Paper
from ..domain.user import ANONYMOUS, User, Viewer
from ..errors import NotFound, PermissionDenied, StorageError, ValidationFailed, returns_result
from ..integrations.storage import Storage
from .paper_filter import FilterCriteria, FilterResult, filter_papers

PDF_CONTENT_TYPE = "application/pdf"
DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024


@dataclass(slots=True)
class UploadedFile:
    filename: str
    content_type: Optional[str]
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def is_pdf(self) -> bool:
        return self.content_type == PDF_CONTENT_TYPE or self.filename.lower().endswith(".pdf")


@dataclass(frozen=True, slots=True)
class NewPaper:
    """Validated upload metadata."""

    title: str
    level: Level
    subject: str
    year: int
    description: Optional[str] = None
    grade: Optional[Grade] = None


def storage_key(uploader_id: str, title: str, now_ms: Optional[int] = None) -> str:
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    sanitized = re.sub(r"[^a-zA-Z0-9]", "_", title)
    return f"papers/{uploader_id}/{stamp}_{sanitized}.pdf"


class PaperService:
    def __init__(self, session: Session, storage: Optional[Storage] = None,
                 max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES) -> None:
        self.repo = PaperRepository(session)
        self.storage = storage
        self.max_upload_bytes = max_upload_bytes

    @returns_result
    def list_papers(self, criteria: FilterCriteria, viewer: Viewer = ANONYMOUS) -> FilterResult:
        return filter_papers(self.repo.list(), criteria, viewer)

    @returns_result
    def list_all(self) -> List[Paper]:
        return self.repo.list()

    @returns_result
    def get_paper(self, paper_id: str, viewer: Viewer = ANONYMOUS) -> Paper:
        paper = self.repo.get(paper_id)
        if paper is None:
            raise NotFound("Paper not found.")
        return replace(paper, is_bookmarked=paper.id in viewer.bookmarks)

    @returns_result
    def upload_paper(self, meta: NewPaper, file: Optional[UploadedFile], uploader: User) -> Paper:
        if not uploader.role.is_admin:
            raise PermissionDenied("Only administrators can upload papers.")
        self._check_file(file)
        assert file is not None
        if self.storage is None:
            raise StorageError("object storage is not configured")

        key = storage_key(uploader.id, meta.title)
        url = self.storage.save(key, file.data, PDF_CONTENT_TYPE)
        logger.info("stored paper file {} ({} bytes)", key, file.size)

        paper = Paper(
            id=str(uuid.uuid4()),
            title=meta.title,
            description=meta.description,
            level=meta.level,
            grade=meta.grade if meta.level is Level.HIGH_SCHOOL else None,
            subject=meta.subject,
            year=meta.year,
            uploader_id=uploader.id,
            file_name=file.filename,
            file_path=key,
            file_url=url,
            file_size=file.size,
        )
        try:
            created = self.repo.create(paper)
        except Exception:
            self._remove_quietly(key)
            raise
        logger.info("paper {} uploaded by {}", created.id, uploader.id)
        return created

    @returns_result
    def delete_paper(self, paper_id: str, actor: User) -> bool:
        if not actor.role.is_admin:
            raise PermissionDenied("Only administrators can delete papers.")
        paper = self.repo.get(paper_id)
        if paper is None:
            raise NotFound("Paper not found.")
        self.repo.delete(paper_id)
        if paper.file_path:
            self._remove_quietly(paper.file_path)
        logger.info("paper {} deleted by {}", paper_id, actor.id)
        return True

    def _check_file(self, file: Optional[UploadedFile]) -> None:
        if file is None or not file.data:
            raise ValidationFailed("No file uploaded", errors={"file": ["Please select a PDF file."]})
        if not file.is_pdf:
            raise ValidationFailed("Only PDF files are allowed", errors={"file": ["Only PDF files are allowed."]})
        if file.size > self.max_upload_bytes:
            limit_mb = self.max_upload_bytes // (1024 * 1024)
            raise ValidationFailed(
                f"File too large. Maximum size is {limit_mb}MB.",
                errors={"file": [f"File exceeds {limit_mb}MB."]},
            )

    def _remove_quietly(self, key: str) -> None:
        if self.storage is None:
            return
        try:
            self.storage.delete(key)
        except StorageError as e:
            logger.warning("could not remove stored object {}: {}", key, e)

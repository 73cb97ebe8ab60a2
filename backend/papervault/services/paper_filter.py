"""Paper listing filter with viewer-role defaults.

Pure functions over domain dataclasses: no I/O, no mutation of the inputs.
Applying the same criteria to a filtered result returns the same result.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Iterable, List, Optional

from ..domain.enums import Grade, Level, Role
from ..domain.paper import Paper
from ..domain.user import ANONYMOUS, Viewer

EMPTY_MESSAGE = "No papers found. Try adjusting your search or filter criteria."


@dataclass(frozen=True, slots=True)
class FilterCriteria:
    query: Optional[str] = None
    level: Optional[Level] = None
    subject: Optional[str] = None
    year: Optional[int] = None
    grade: Optional[Grade] = None

    @property
    def is_empty(self) -> bool:
        return not (self.query or self.level or self.subject or self.year or self.grade)


@dataclass(slots=True)
class FilterResult:
    items: List[Paper] = field(default_factory=list)
    available_subjects: List[str] = field(default_factory=list)
    available_years: List[int] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def message(self) -> Optional[str]:
        return EMPTY_MESSAGE if self.is_empty else None


def _newest_first(papers: Iterable[Paper]) -> List[Paper]:
    return sorted(papers, key=lambda p: p.created_at or datetime.min, reverse=True)


def scope_for_viewer(papers: Iterable[Paper], criteria: FilterCriteria, viewer: Viewer) -> List[Paper]:
    """Restrict to the viewer's own level (and grade) unless the criteria override it."""
    role = viewer.role
    if role is None or role is Role.ADMIN or criteria.level is not None:
        return list(papers)

    level = role.as_level()
    scoped = [p for p in papers if p.level == level]
    if role is Role.HIGH_SCHOOL and criteria.grade is None and viewer.grade is not None:
        scoped = [p for p in scoped if p.grade == viewer.grade]
    return scoped


def _effective_level(criteria: FilterCriteria, viewer: Viewer) -> Optional[Level]:
    if criteria.level is not None:
        return criteria.level
    if viewer.role is not None and viewer.role is not Role.ADMIN:
        return viewer.role.as_level()
    return None


def _matches_query(paper: Paper, needle: str) -> bool:
    return needle in paper.title.lower() or needle in (paper.description or "").lower()


def filter_papers(papers: Iterable[Paper], criteria: FilterCriteria, viewer: Viewer = ANONYMOUS) -> FilterResult:
    candidates = scope_for_viewer(papers, criteria, viewer)
    result = candidates

    query = (criteria.query or "").strip().lower()
    if query:
        result = [p for p in result if _matches_query(p, query)]

    if criteria.level is not None:
        result = [p for p in result if p.level == criteria.level]
    if criteria.grade is not None and _effective_level(criteria, viewer) is Level.HIGH_SCHOOL:
        result = [p for p in result if p.grade == criteria.grade]

    if criteria.subject:
        result = [p for p in result if p.subject == criteria.subject]
    if criteria.year is not None:
        result = [p for p in result if p.year == criteria.year]

    items = [replace(p, is_bookmarked=p.id in viewer.bookmarks) for p in _newest_first(result)]
    return FilterResult(
        items=items,
        available_subjects=sorted({p.subject for p in candidates}),
        available_years=sorted({p.year for p in candidates}, reverse=True),
    )

from __future__ import annotations

from datetime import datetime, timedelta

from papervault.domain.enums import Grade, Level, Role
from papervault.domain.paper import Paper
from papervault.domain.user import ANONYMOUS, User, Viewer
from papervault.services.paper_filter import EMPTY_MESSAGE, FilterCriteria, filter_papers

BASE = datetime(2024, 3, 1)


def _paper(pid, title, level, subject, year, grade=None, description=None, age=0):
    return Paper(
        id=pid, title=title, level=level, subject=subject, year=year, grade=grade,
        description=description, uploader_id="admin", created_at=BASE - timedelta(days=age),
    )


PAPERS = [
    _paper("p1", "Calculus Final", Level.UNIVERSITY, "Mathematics", 2023, age=1),
    _paper("p2", "Algebra Basics", Level.HIGH_SCHOOL, "Mathematics", 2022, Grade.GRADE_11, age=2),
    _paper("p3", "Physics Midterm", Level.HIGH_SCHOOL, "Physics", 2023, Grade.GRADE_11,
           description="Includes calculus-based kinematics", age=3),
    _paper("p4", "Chemistry Quiz", Level.HIGH_SCHOOL, "Chemistry", 2021, Grade.GRADE_12, age=4),
    _paper("p5", "Intro Economics", Level.COLLEGE, "Economics", 2020, age=5),
]


def _viewer(role, grade=None, bookmarks=()):
    user = User(id="u1", name="Viewer", email="v@example.com", role=role, grade=grade)
    return Viewer(user=user, bookmarks=frozenset(bookmarks))


def test_anonymous_sees_everything_newest_first():
    result = filter_papers(PAPERS, FilterCriteria())
    assert [p.id for p in result.items] == ["p1", "p2", "p3", "p4", "p5"]
    assert result.message is None


def test_high_school_viewer_defaults_to_own_grade():
    result = filter_papers(PAPERS, FilterCriteria(), _viewer(Role.HIGH_SCHOOL, Grade.GRADE_11))
    assert [p.id for p in result.items] == ["p2", "p3"]
    assert result.available_subjects == ["Mathematics", "Physics"]
    assert result.available_years == [2023, 2022]


def test_explicit_grade_overrides_viewer_grade():
    result = filter_papers(
        PAPERS, FilterCriteria(grade=Grade.GRADE_12), _viewer(Role.HIGH_SCHOOL, Grade.GRADE_11)
    )
    assert [p.id for p in result.items] == ["p4"]


def test_explicit_level_lifts_role_scope():
    result = filter_papers(
        PAPERS, FilterCriteria(level=Level.COLLEGE), _viewer(Role.HIGH_SCHOOL, Grade.GRADE_11)
    )
    assert [p.id for p in result.items] == ["p5"]


def test_grade_is_ignored_outside_high_school():
    result = filter_papers(PAPERS, FilterCriteria(level=Level.UNIVERSITY, grade=Grade.GRADE_10))
    assert [p.id for p in result.items] == ["p1"]


def test_admin_is_not_scoped():
    result = filter_papers(PAPERS, FilterCriteria(), _viewer(Role.ADMIN))
    assert len(result.items) == len(PAPERS)


def test_query_matches_title_or_description_case_insensitively():
    result = filter_papers(PAPERS, FilterCriteria(query="  CALCULUS "))
    assert [p.id for p in result.items] == ["p1", "p3"]


def test_subject_and_year_narrow_the_result():
    result = filter_papers(PAPERS, FilterCriteria(subject="Mathematics", year=2022))
    assert [p.id for p in result.items] == ["p2"]
    assert result.available_years == [2023, 2022, 2021, 2020]


def test_filter_is_idempotent():
    criteria = FilterCriteria(query="a", level=Level.HIGH_SCHOOL, grade=Grade.GRADE_11)
    viewer = _viewer(Role.HIGH_SCHOOL, Grade.GRADE_11)
    once = filter_papers(PAPERS, criteria, viewer)
    twice = filter_papers(once.items, criteria, viewer)
    assert [p.id for p in twice.items] == [p.id for p in once.items]


def test_empty_result_carries_message():
    result = filter_papers(PAPERS, FilterCriteria(query="astronomy"))
    assert result.is_empty
    assert result.message == EMPTY_MESSAGE


def test_bookmark_flags_follow_viewer_without_mutating_input():
    viewer = _viewer(Role.ADMIN, bookmarks={"p3"})
    result = filter_papers(PAPERS, FilterCriteria(), viewer)
    assert {p.id for p in result.items if p.is_bookmarked} == {"p3"}
    assert not any(p.is_bookmarked for p in PAPERS)
    assert not filter_papers(PAPERS, FilterCriteria(), ANONYMOUS).items[2].is_bookmarked

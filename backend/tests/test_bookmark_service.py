from __future__ import annotations

from unittest import mock

from sqlalchemy.exc import IntegrityError

from papervault.db.models import BookmarkModel
from papervault.db.repositories.bookmark_repo import BookmarkRepository
from papervault.db.repositories.paper_repo import ID_BATCH_LIMIT, PaperRepository, chunked
from papervault.errors import NotFound
from papervault.services.bookmark_service import BookmarkService


def test_toggle_is_its_own_inverse(session, student, make_paper):
    paper = make_paper()
    svc = BookmarkService(session)
    before = svc.bookmarked_ids(student.id)

    assert svc.toggle_bookmark(paper.id, student.id).unwrap() is True
    assert paper.id in svc.bookmarked_ids(student.id)

    assert svc.toggle_bookmark(paper.id, student.id).unwrap() is False
    assert svc.bookmarked_ids(student.id) == before


def test_bookmarks_are_per_user(session, make_user, make_paper):
    paper = make_paper()
    a, b = make_user(), make_user()
    svc = BookmarkService(session)
    svc.toggle_bookmark(paper.id, a.id).unwrap()

    assert svc.bookmarked_ids(a.id) == {paper.id}
    assert svc.bookmarked_ids(b.id) == frozenset()


def test_listing_spans_several_batches(session, student, make_paper):
    svc = BookmarkService(session)
    papers = [make_paper(title=f"Paper {i}") for i in range(ID_BATCH_LIMIT + 5)]
    for p in papers:
        svc.toggle_bookmark(p.id, student.id).unwrap()

    listed = svc.list_bookmarked_papers(student.id).unwrap()
    assert [p.id for p in listed] == [p.id for p in papers]
    assert all(p.is_bookmarked for p in listed)


def test_listing_skips_deleted_papers(session, student, make_paper):
    svc = BookmarkService(session)
    keep, gone = make_paper(title="Keep"), make_paper(title="Gone")
    svc.toggle_bookmark(keep.id, student.id).unwrap()
    svc.toggle_bookmark(gone.id, student.id).unwrap()

    PaperRepository(session).delete(gone.id)

    assert [p.title for p in svc.list_bookmarked_papers(student.id).unwrap()] == ["Keep"]


def test_unknown_paper_is_not_found(session, student):
    result = BookmarkService(session).toggle_bookmark("missing", student.id)
    assert isinstance(result.error, NotFound)


def test_chunked_respects_limit():
    ids = [str(i) for i in range(65)]
    batches = list(chunked(ids))
    assert [len(b) for b in batches] == [30, 30, 5]
    assert [i for b in batches for i in b] == ids


def test_failed_insert_reports_nothing_stored(session, student, make_paper):
    paper = make_paper()
    repo = BookmarkRepository(session)
    fk_error = IntegrityError("INSERT INTO bookmarks", {}, Exception("FOREIGN KEY constraint failed"))

    with mock.patch.object(session, "commit", side_effect=fk_error):
        assert repo.toggle(student.id, paper.id) is False

    assert repo.ids_for(student.id) == []


def test_insert_lost_to_concurrent_toggle_reports_stored(session, student, make_paper):
    paper = make_paper()
    repo = BookmarkRepository(session)
    real_commit = session.commit

    def other_writer_first():
        session.rollback()
        session.add(BookmarkModel(user_id=student.id, paper_id=paper.id))
        real_commit()
        raise IntegrityError("INSERT INTO bookmarks", {}, Exception("UNIQUE constraint failed"))

    with mock.patch.object(session, "commit", side_effect=other_writer_first):
        assert repo.toggle(student.id, paper.id) is True

    assert repo.ids_for(student.id) == [paper.id]

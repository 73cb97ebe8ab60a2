from __future__ import annotations

from unittest import mock

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from papervault.db import models  # noqa: F401
from papervault.db.base import Base
from papervault.db.repositories.paper_repo import PaperRepository
from papervault.db.repositories.rating_repo import RatingRepository
from papervault.db.repositories.user_repo import UserRepository
from papervault.domain.enums import Level, Role
from papervault.domain.paper import Paper
from papervault.errors import Conflict, NotFound, ValidationFailed
from papervault.services.rating_service import RatingService, validate_rating


def test_running_average_follows_votes(session, make_user, make_paper):
    paper = make_paper()
    a, b = make_user(), make_user()
    svc = RatingService(session)

    first = svc.submit_rating(paper.id, a.id, 4).unwrap()
    assert (first.average_rating, first.ratings_count) == (4.0, 1)

    second = svc.submit_rating(paper.id, b.id, 2).unwrap()
    assert (second.average_rating, second.ratings_count) == (3.0, 2)

    rerated = svc.submit_rating(paper.id, a.id, 5).unwrap()
    assert (rerated.average_rating, rerated.ratings_count) == (3.5, 2)
    assert rerated.user_rating == 5


def test_rerating_keeps_count_and_log(session, make_user, make_paper):
    paper = make_paper()
    user = make_user()
    svc = RatingService(session)

    for value in (1, 3, 5, 2):
        summary = svc.submit_rating(paper.id, user.id, value).unwrap()
        assert summary.ratings_count == 1
        assert summary.average_rating == value

    assert RatingRepository(session).values_for(paper.id) == [2]


def test_average_matches_log_after_many_votes(session, make_user, make_paper):
    paper = make_paper()
    svc = RatingService(session)
    votes = [5, 4, 4, 1, 3, 2, 5]
    for value in votes:
        svc.submit_rating(paper.id, make_user().id, value).unwrap()

    summary = svc.get_rating(paper.id, None).unwrap()
    logged = RatingRepository(session).values_for(paper.id)
    assert summary.ratings_count == len(votes) == len(logged)
    assert summary.average_rating == pytest.approx(sum(logged) / len(logged))


@pytest.mark.parametrize("value", [0, 6, 3.5, "4", True, None])
def test_invalid_values_are_rejected(session, make_user, make_paper, value):
    paper = make_paper()
    result = RatingService(session).submit_rating(paper.id, make_user().id, value)
    assert not result.ok
    assert isinstance(result.error, ValidationFailed)


def test_validate_rating_accepts_bounds():
    assert validate_rating(1) == 1
    assert validate_rating(5) == 5


def test_unknown_paper_or_user(session, make_user, make_paper):
    svc = RatingService(session)
    user = make_user()
    assert isinstance(svc.submit_rating("missing", user.id, 3).error, NotFound)
    assert isinstance(svc.submit_rating(make_paper().id, "nobody", 3).error, NotFound)


def test_get_rating_includes_own_vote(session, make_user, make_paper):
    paper = make_paper()
    a, b = make_user(), make_user()
    svc = RatingService(session)
    svc.submit_rating(paper.id, a.id, 4).unwrap()

    assert svc.get_rating(paper.id, a.id).unwrap().user_rating == 4
    assert svc.get_rating(paper.id, b.id).unwrap().user_rating is None


def test_retries_then_gives_up_on_contention(session, make_user, make_paper):
    paper = make_paper()
    user = make_user()
    svc = RatingService(session, max_retries=3)

    with mock.patch.object(RatingRepository, "apply", side_effect=StaleDataError("stale")) as apply:
        result = svc.submit_rating(paper.id, user.id, 4)

    assert apply.call_count == 3
    assert isinstance(result.error, Conflict)


def test_retry_succeeds_after_one_lost_race(session, make_user, make_paper):
    paper = make_paper()
    user = make_user()
    svc = RatingService(session)
    real_apply = RatingRepository.apply
    calls = {"n": 0}

    def flaky(self, *args):
        calls["n"] += 1
        if calls["n"] == 1:
            raise StaleDataError("stale")
        return real_apply(self, *args)

    with mock.patch.object(RatingRepository, "apply", flaky):
        summary = svc.submit_rating(paper.id, user.id, 4).unwrap()

    assert calls["n"] == 2
    assert (summary.average_rating, summary.ratings_count) == (4.0, 1)


@pytest.fixture()
def file_sessions(tmp_path):
    """Two independent sessions on one file-backed database."""
    engine = create_engine(f"sqlite+pysqlite:///{tmp_path / 'ratings.db'}")
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)
    first, second = factory(), factory()
    yield first, second
    first.close()
    second.close()
    engine.dispose()


def test_interleaved_sessions_keep_both_votes(file_sessions):
    session_a, session_b = file_sessions
    users = UserRepository(session_a)
    uploader = users.create(name="Uploader", email="up@example.com", role=Role.ADMIN)
    alice = users.create(name="Alice", email="alice@example.com", role=Role.COLLEGE)
    bob = users.create(name="Bob", email="bob@example.com", role=Role.COLLEGE)
    paper = PaperRepository(session_a).create(Paper(
        id="", title="Shared", level=Level.COLLEGE, subject="Physics", year=2023, uploader_id=uploader.id,
    ))

    # Bob has read the paper; Alice commits her vote before Bob's write lands.
    def alice_commits_first(*_):
        RatingService(session_a).submit_rating(paper.id, alice.id, 4).unwrap()

    event.listen(session_b, "before_flush", alice_commits_first, once=True)
    real_apply = RatingRepository.apply
    with mock.patch.object(RatingRepository, "apply", autospec=True, side_effect=real_apply) as apply:
        bob_summary = RatingService(session_b).submit_rating(paper.id, bob.id, 2).unwrap()

    # Bob's stale first attempt, Alice's vote, then Bob's retry.
    assert apply.call_count == 3

    assert (bob_summary.average_rating, bob_summary.ratings_count) == (3.0, 2)
    session_a.expire_all()
    stored = RatingService(session_a).get_rating(paper.id, None).unwrap()
    assert (stored.average_rating, stored.ratings_count) == (3.0, 2)
    assert sorted(RatingRepository(session_a).values_for(paper.id)) == [2, 4]

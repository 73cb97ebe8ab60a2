from __future__ import annotations

import threading

import pytest

from papervault.errors import NotFound
from papervault.services.comment_feed import CommentFeed, SubscriptionClosed
from papervault.services.comment_service import CommentService


@pytest.fixture()
def feed():
    return CommentFeed()


def test_comments_are_listed_newest_first(session, student, make_paper, feed):
    paper = make_paper()
    svc = CommentService(session, feed)
    svc.add_comment(paper.id, student.id, "first").unwrap()
    svc.add_comment(paper.id, student.id, "second").unwrap()

    comments = svc.list_comments(paper.id).unwrap()
    assert [c.text for c in comments] == ["second", "first"]
    assert comments[0].user_name == "Sam Student"
    assert comments[0].user_role.value == "High School"


def test_comment_on_missing_paper(session, student, feed):
    result = CommentService(session, feed).add_comment("missing", student.id, "hello")
    assert isinstance(result.error, NotFound)


def test_subscription_delivers_snapshot_then_updates(session, student, make_paper, feed):
    paper = make_paper()
    svc = CommentService(session, feed)
    svc.add_comment(paper.id, student.id, "existing").unwrap()

    with svc.subscribe(paper.id).unwrap() as sub:
        assert [c.text for c in sub.next_snapshot(timeout=1)] == ["existing"]
        assert sub.next_snapshot(timeout=0.01) is None

        svc.add_comment(paper.id, student.id, "fresh").unwrap()
        assert [c.text for c in sub.next_snapshot(timeout=1)] == ["fresh", "existing"]

    assert feed.subscriber_count(paper.id) == 0


def test_closed_subscription_stops_and_can_restart(session, student, make_paper, feed):
    paper = make_paper()
    svc = CommentService(session, feed)
    sub = svc.subscribe(paper.id).unwrap()
    sub.next_snapshot(timeout=1)

    sub.close()
    with pytest.raises(SubscriptionClosed):
        sub.next_snapshot(timeout=0.01)
    svc.add_comment(paper.id, student.id, "missed").unwrap()

    sub.restart()
    assert feed.subscriber_count(paper.id) == 1
    assert [c.text for c in sub.next_snapshot(timeout=1)] == ["missed"]
    sub.close()


def test_close_wakes_a_blocked_stream(feed):
    sub = feed.subscribe("p1", lambda: [])
    received = []

    def consume():
        for snapshot in sub:
            received.append(snapshot)

    worker = threading.Thread(target=consume)
    worker.start()
    sub.close()
    worker.join(timeout=2)

    assert not worker.is_alive()
    assert received in ([], [[]])


def test_publish_only_reaches_the_same_paper(feed):
    a = feed.subscribe("a", lambda: [])
    b = feed.subscribe("b", lambda: [])
    a.next_snapshot(timeout=0)
    b.next_snapshot(timeout=0)

    assert feed.publish("a") == 1
    assert a.next_snapshot(timeout=0) == []
    assert b.next_snapshot(timeout=0) is None

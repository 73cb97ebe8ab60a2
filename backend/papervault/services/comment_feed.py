"""In-process comment subscriptions that deliver full snapshots.

A subscription yields the current comment list as soon as it is opened and
again after every new comment on its paper. Snapshots always replace what the
consumer holds; nothing is merged. Subscriptions can be closed from any thread
and reopened with ``restart()``.
"""
from __future__ import annotations

import threading
from typing import Callable, Dict, Iterator, List, Optional, Set

from loguru import logger

from ..domain.comment import Comment

SnapshotLoader = Callable[[], List[Comment]]


class SubscriptionClosed(Exception):
    pass


class CommentSubscription:
    def __init__(self, feed: "CommentFeed", paper_id: str, load: SnapshotLoader) -> None:
        self.feed = feed
        self.paper_id = paper_id
        self._load = load
        self._changed = threading.Event()
        self._closed = False
        self._changed.set()

    @property
    def closed(self) -> bool:
        return self._closed

    def notify(self) -> None:
        self._changed.set()

    def next_snapshot(self, timeout: Optional[float] = None) -> Optional[List[Comment]]:
        """Block until a change (or the timeout) and return a fresh snapshot.

        Returns None on timeout. Raises SubscriptionClosed once closed.
        """
        if self._closed:
            raise SubscriptionClosed
        if not self._changed.wait(timeout):
            return None
        if self._closed:
            raise SubscriptionClosed
        self._changed.clear()
        return self._load()

    def stream(self, heartbeat: Optional[float] = None) -> Iterator[Optional[List[Comment]]]:
        """Snapshots forever; yields None every ``heartbeat`` seconds of silence."""
        while True:
            try:
                yield self.next_snapshot(heartbeat or None)
            except SubscriptionClosed:
                return

    def __iter__(self) -> Iterator[List[Comment]]:
        for snapshot in self.stream():
            if snapshot is not None:
                yield snapshot

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.feed._detach(self)
        self._changed.set()

    def restart(self) -> None:
        if self._closed:
            self._closed = False
            self.feed._attach(self)
        self._changed.set()

    def __enter__(self) -> "CommentSubscription":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class CommentFeed:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: Dict[str, Set[CommentSubscription]] = {}

    def subscribe(self, paper_id: str, load: SnapshotLoader) -> CommentSubscription:
        sub = CommentSubscription(self, paper_id, load)
        self._attach(sub)
        return sub

    def publish(self, paper_id: str) -> int:
        with self._lock:
            subs = list(self._subscribers.get(paper_id, ()))
        for sub in subs:
            sub.notify()
        logger.debug("comment feed {}: notified {} subscriber(s)", paper_id, len(subs))
        return len(subs)

    def subscriber_count(self, paper_id: str) -> int:
        with self._lock:
            return len(self._subscribers.get(paper_id, ()))

    def _attach(self, sub: CommentSubscription) -> None:
        with self._lock:
            self._subscribers.setdefault(sub.paper_id, set()).add(sub)

    def _detach(self, sub: CommentSubscription) -> None:
        with self._lock:
            subs = self._subscribers.get(sub.paper_id)
            if subs is None:
                return
            subs.discard(sub)
            if not subs:
                del self._subscribers[sub.paper_id]

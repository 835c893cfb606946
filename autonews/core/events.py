"""In-process change notifications for the posts table.

Subscribers get a ``PostChange`` after every committed insert, update or
delete. The event only tells a listener that the displayed page is stale; it
is not meant to be applied as a diff.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PostChange:
    kind: str  # "insert", "update" or "delete"
    post_id: str
    version: int


class ChangeFeed:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._version = 0
        self._next_token = 0
        self._subscribers: Dict[int, Callable[[PostChange], None]] = {}

    @property
    def version(self) -> int:
        return self._version

    def subscribe(self, callback: Callable[[PostChange], None]) -> Callable[[], None]:
        """Register a callback; returns a function that removes it"""
        with self._lock:
            token = self._next_token
            self._next_token += 1
            self._subscribers[token] = callback

        def unsubscribe() -> None:
            with self._lock:
                self._subscribers.pop(token, None)

        return unsubscribe

    def publish(self, kind: str, post_id: str) -> PostChange:
        with self._lock:
            self._version += 1
            event = PostChange(kind=kind, post_id=post_id, version=self._version)
            subscribers = list(self._subscribers.values())
        for callback in subscribers:
            try:
                callback(event)
            except Exception:
                # a broken listener must not undo a committed write
                logger.exception("Change subscriber failed for %s %s", kind, post_id)
        return event


change_feed = ChangeFeed()

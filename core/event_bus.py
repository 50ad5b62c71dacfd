"""Publish/subscribe bus used to notify consumers of navmesh activity.

``NavMesh`` instances answer path queries from several threads at once, so the
subscriber table is guarded by a lock.  Callbacks run outside that lock on the
publishing thread; a callback may therefore subscribe or unsubscribe without
deadlocking the bus.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from core.events.topics import EventTopic

__all__ = ["EventBus", "Subscriber", "Topic"]

logger = logging.getLogger(__name__)

Topic = Union[str, EventTopic]
Subscriber = Callable[..., None]


def topic_key(topic: Topic) -> str:
    """``EventTopic.PATH_FOUND`` and ``"PathFound"`` address the same topic."""
    return topic.value if isinstance(topic, EventTopic) else str(topic)


class EventBus:
    """In-memory dispatcher keyed by topic name.

    Payloads are passed to callbacks as keyword arguments.  A mapping given as
    the second positional argument is merged with explicit keywords, the
    keywords winning on conflicts.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: Dict[str, List[Subscriber]] = {}

    def subscribe(self, topic: Topic, callback: Subscriber) -> None:
        key = topic_key(topic)
        with self._lock:
            callbacks = self._subscribers.setdefault(key, [])
            if callback not in callbacks:
                callbacks.append(callback)

    def unsubscribe(self, topic: Topic, callback: Subscriber) -> None:
        """Drop ``callback`` from ``topic``; unknown pairs are ignored."""
        key = topic_key(topic)
        with self._lock:
            callbacks = self._subscribers.get(key)
            if callbacks and callback in callbacks:
                callbacks.remove(callback)
                if not callbacks:
                    del self._subscribers[key]

    def has_subscribers(self, topic: Topic) -> bool:
        with self._lock:
            return bool(self._subscribers.get(topic_key(topic)))

    def get_subscribers(self, topic: Topic) -> Tuple[Subscriber, ...]:
        with self._lock:
            return tuple(self._subscribers.get(topic_key(topic), ()))

    def publish(self, topic: Topic, payload: Optional[Mapping[str, Any]] = None, /, **kwargs: Any) -> int:
        """Deliver an event and return how many callbacks received it.

        Exceptions raised by a callback propagate to the publisher; callbacks
        registered after it for the same event are not invoked.
        """
        callbacks = self.get_subscribers(topic)
        if not callbacks:
            return 0
        data: Dict[str, Any] = dict(payload or {})
        data.update(kwargs)
        logger.debug("Publishing %s to %d subscriber(s)", topic_key(topic), len(callbacks))
        for callback in callbacks:
            callback(**data)
        return len(callbacks)

    def clear(self) -> None:
        with self._lock:
            self._subscribers.clear()

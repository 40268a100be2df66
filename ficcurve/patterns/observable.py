"""
Synchronous change notification.

An :class:`Observable` keeps an ordered list of subscribers and notifies them
on the caller's thread whenever its state changes. A subscriber is either an
:class:`Observer` (whose ``update()`` decides whether the invalidation keeps
travelling) or a plain zero-argument callable.

Fan-out is a breadth-first walk over the dependency graph with a visited set:
every subscriber is updated at most once per notification, so an accidental
cycle terminates instead of looping.
"""

import logging
from collections import deque
from typing import Callable, Deque, List, Set, Union

from ficcurve.errors import NotificationError

logger = logging.getLogger(__name__)

Subscriber = Union["Observer", Callable[[], None]]


class Observable:
    """Object whose state changes are broadcast to registered subscribers."""

    def __init__(self):
        self._subscribers: List[Subscriber] = []

    def register_with(self, subscriber: Subscriber) -> None:
        """Add a subscriber; registering the same subscriber twice is a no-op."""
        if subscriber is None:
            return
        if any(_same_subscriber(s, subscriber) for s in self._subscribers):
            return
        self._subscribers.append(subscriber)

    def unregister_with(self, subscriber: Subscriber) -> bool:
        """Remove a subscriber. Returns False if it was not registered."""
        for idx, existing in enumerate(self._subscribers):
            if _same_subscriber(existing, subscriber):
                del self._subscribers[idx]
                return True
        return False

    @property
    def observer_count(self) -> int:
        return len(self._subscribers)

    def notify_observers(self) -> None:
        """Notify every subscriber reachable from this observable.

        Subscribers are visited in registration order, breadth first. Errors
        raised by subscribers do not interrupt the fan-out; they are collected
        and re-raised together once every subscriber has been reached.
        """
        errors: List[BaseException] = []
        visited: Set[int] = {id(self)}
        queue: Deque[Observable] = deque([self])

        while queue:
            source = queue.popleft()
            for subscriber in list(source._subscribers):
                key = id(subscriber)
                if key in visited:
                    continue
                visited.add(key)
                try:
                    forward = _deliver(subscriber)
                except Exception as exc:  # noqa: BLE001 - re-raised below
                    logger.debug("Subscriber %r failed: %s", subscriber, exc)
                    errors.append(exc)
                    continue
                if forward and isinstance(subscriber, Observable):
                    queue.append(subscriber)

        if errors:
            raise NotificationError(errors)


class Observer:
    """Object that watches one or more observables."""

    def __init__(self):
        self._watched: List[Observable] = []

    def watch(self, observable: Observable) -> None:
        """Subscribe to ``observable`` (``None`` is ignored)."""
        if observable is None:
            return
        observable.register_with(self)
        if not any(o is observable for o in self._watched):
            self._watched.append(observable)

    def unwatch(self, observable: Observable) -> None:
        observable.unregister_with(self)
        self._watched = [o for o in self._watched if o is not observable]

    def unwatch_all(self) -> None:
        for observable in self._watched:
            observable.unregister_with(self)
        self._watched = []

    @property
    def watched(self) -> List[Observable]:
        return list(self._watched)

    def update(self) -> bool:
        """React to a change in a watched observable.

        Returns:
            True if the change must be forwarded to this object's own
            subscribers (only meaningful when the observer is also observable).
        """
        return True


def _deliver(subscriber: Subscriber) -> bool:
    if isinstance(subscriber, Observer):
        return bool(subscriber.update())
    subscriber()
    return False


def _same_subscriber(a: Subscriber, b: Subscriber) -> bool:
    # bound methods are recreated on every attribute access, so compare by equality
    if isinstance(a, Observer) or isinstance(b, Observer):
        return a is b
    return a == b

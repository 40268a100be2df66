"""Rebindable indirection handle."""

from typing import Generic, Optional, TypeVar

from ficcurve.errors import TermStructureNotLinkedError

from .observable import Observable, Observer

T = TypeVar("T")


class RelinkableHandle(Observable, Observer, Generic[T]):
    """Owned, swappable cell pointing at another object.

    Instruments reach "the curve currently being built" through a handle so
    they can be repointed at a finished curve later without holding a hard
    reference during construction. When registered as observer of its target,
    the handle forwards the target's notifications to its own subscribers.
    """

    def __init__(self, target: Optional[T] = None, register_as_observer: bool = True):
        Observable.__init__(self)
        Observer.__init__(self)
        self._link: Optional[T] = None
        self._observing = False
        if target is not None:
            self.link_to(target, register_as_observer)

    def link_to(self, target: Optional[T], register_as_observer: bool = True) -> None:
        """Point the handle at ``target`` and notify subscribers of the handle."""
        observing = register_as_observer and isinstance(target, Observable)
        if target is self._link and observing == self._observing:
            return

        if self._observing and self._link is not None:
            self.unwatch(self._link)

        self._link = target
        self._observing = observing
        if observing:
            self.watch(target)

        self.notify_observers()

    @property
    def empty(self) -> bool:
        return self._link is None

    @property
    def current_link(self) -> T:
        if self._link is None:
            raise TermStructureNotLinkedError("empty handle cannot be dereferenced")
        return self._link

    def __repr__(self) -> str:
        return f"RelinkableHandle({self._link!r})"

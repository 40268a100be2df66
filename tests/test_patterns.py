from __future__ import annotations

import pytest

from ficcurve.errors import NotificationError, TermStructureNotLinkedError
from ficcurve.patterns import (
    CalculationState,
    LazyObject,
    Observable,
    Observer,
    RelinkableHandle,
)
from ficcurve.schema.quotes import SimpleQuote


class Relay(Observable, Observer):
    def __init__(self):
        Observable.__init__(self)
        Observer.__init__(self)
        self.updates = 0

    def update(self) -> bool:
        self.updates += 1
        return True


class Doubler(LazyObject):
    """Lazy value ``2 * quote``; optionally bumps its own input while calculating."""

    def __init__(self, quote, bump_once=False, always_forward=False):
        super().__init__(always_forward)
        self.quote = quote
        self.bump_once = bump_once
        self._result = None
        self.watch(quote)

    def perform_calculations(self) -> None:
        self._result = 2.0 * self.quote.value()
        if self.bump_once:
            self.bump_once = False
            self.quote.set_value(self.quote.value() + 1.0)

    def result(self) -> float:
        self.calculate()
        return self._result


# ----------------------------------------------------------------------
# Observable / Observer
# ----------------------------------------------------------------------
def test_subscribers_notified_in_registration_order():
    source = Observable()
    order = []
    source.register_with(lambda: order.append("a"))
    source.register_with(lambda: order.append("b"))

    source.notify_observers()
    assert order == ["a", "b"]


def test_duplicate_registration_is_ignored():
    source = Observable()
    relay = Relay()
    relay.watch(source)
    relay.watch(source)

    assert source.observer_count == 1
    source.notify_observers()
    assert relay.updates == 1


def test_unwatch_stops_notifications():
    source = Observable()
    relay = Relay()
    relay.watch(source)
    relay.unwatch(source)
    source.notify_observers()

    assert relay.updates == 0
    assert source.observer_count == 0
    assert not source.unregister_with(relay)


def test_unwatch_all():
    a, b = Observable(), Observable()
    relay = Relay()
    relay.watch(a)
    relay.watch(b)
    relay.unwatch_all()

    assert relay.watched == []
    assert a.observer_count == b.observer_count == 0


def test_invalidation_is_transitive():
    source = Observable()
    first, second = Relay(), Relay()
    first.watch(source)
    second.watch(first)

    source.notify_observers()
    assert (first.updates, second.updates) == (1, 1)


def test_cycle_terminates():
    a, b = Relay(), Relay()
    a.watch(b)
    b.watch(a)

    a.notify_observers()
    assert b.updates == 1
    assert a.updates == 0


def test_diamond_updates_each_subscriber_once():
    source = Observable()
    left, right, sink = Relay(), Relay(), Relay()
    left.watch(source)
    right.watch(source)
    sink.watch(left)
    sink.watch(right)

    source.notify_observers()
    assert sink.updates == 1


def test_subscriber_errors_are_collected():
    source = Observable()
    reached = []

    def broken():
        raise RuntimeError("boom")

    source.register_with(broken)
    source.register_with(lambda: reached.append(True))

    with pytest.raises(NotificationError, match="boom") as excinfo:
        source.notify_observers()
    assert reached == [True]
    assert len(excinfo.value.errors) == 1


# ----------------------------------------------------------------------
# LazyObject
# ----------------------------------------------------------------------
def test_lazy_object_calculates_on_first_read_only():
    quote = SimpleQuote(1.5)
    lazy = Doubler(quote)
    assert lazy.state is CalculationState.UNCALCULATED

    assert lazy.result() == 3.0
    assert lazy.result() == 3.0
    assert lazy.calculation_count == 1
    assert lazy.is_calculated


def test_lazy_object_invalidated_by_input():
    quote = SimpleQuote(1.5)
    lazy = Doubler(quote)
    lazy.result()

    calls = []
    lazy.register_with(lambda: calls.append(1))
    quote.set_value(2.0)

    assert not lazy.is_calculated
    assert calls == [1]
    assert lazy.result() == 4.0


def test_failed_calculation_returns_to_uncalculated():
    quote = SimpleQuote()
    lazy = Doubler(quote)

    with pytest.raises(ValueError, match="no value set"):
        lazy.result()
    assert lazy.state is CalculationState.UNCALCULATED

    quote.set_value(1.0)
    assert lazy.result() == 2.0


def test_invalidation_during_calculation_leaves_object_stale():
    quote = SimpleQuote(1.0)
    lazy = Doubler(quote, bump_once=True)
    calls = []
    lazy.register_with(lambda: calls.append(1))

    lazy.calculate()
    assert lazy.state is CalculationState.UNCALCULATED
    assert calls == [1]

    assert lazy.result() == 4.0
    assert lazy.calculation_count == 2


def test_frozen_object_ignores_invalidation():
    quote = SimpleQuote(1.0)
    lazy = Doubler(quote)
    lazy.result()
    lazy.freeze()

    quote.set_value(5.0)
    assert lazy.is_frozen
    assert lazy.result() == 2.0

    lazy.unfreeze()
    assert not lazy.is_calculated
    assert lazy.result() == 10.0


def test_recalculate_forces_new_run():
    quote = SimpleQuote(1.0)
    lazy = Doubler(quote)
    lazy.result()
    lazy.recalculate()
    assert lazy.calculation_count == 2


def test_always_forward_notifies_even_when_stale():
    quote = SimpleQuote(1.0)
    lazy = Doubler(quote, always_forward=True)
    calls = []
    lazy.register_with(lambda: calls.append(1))

    quote.set_value(2.0)
    assert calls == [1]


# ----------------------------------------------------------------------
# RelinkableHandle
# ----------------------------------------------------------------------
def test_empty_handle_cannot_be_dereferenced():
    handle = RelinkableHandle()
    assert handle.empty
    with pytest.raises(TermStructureNotLinkedError):
        handle.current_link


def test_handle_forwards_target_notifications():
    first, second = SimpleQuote(1.0), SimpleQuote(2.0)
    handle = RelinkableHandle(first)
    calls = []
    handle.register_with(lambda: calls.append(1))

    first.set_value(1.5)
    assert calls == [1]

    handle.link_to(second)
    assert calls == [1, 1]
    assert handle.current_link is second

    # the old target is no longer observed
    first.set_value(3.0)
    assert calls == [1, 1]


def test_handle_linked_without_observing():
    quote = SimpleQuote(1.0)
    handle = RelinkableHandle()
    handle.link_to(quote, register_as_observer=False)
    calls = []
    handle.register_with(lambda: calls.append(1))

    quote.set_value(2.0)
    assert calls == []
    assert quote.observer_count == 0

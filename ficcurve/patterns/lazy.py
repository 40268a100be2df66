"""
Lazily recalculated objects.

A :class:`LazyObject` recomputes its derived state only on the first read
after an invalidation. Every accessor exposing derived state must call
:meth:`LazyObject.calculate` before returning.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum

from .observable import Observable, Observer

logger = logging.getLogger(__name__)


class CalculationState(Enum):
    """Calculation lifecycle of a lazy object."""

    UNCALCULATED = "UNCALCULATED"
    CALCULATING = "CALCULATING"
    CALCULATED = "CALCULATED"


class LazyObject(Observable, Observer, ABC):
    """Observer/observable pair with deferred recalculation.

    Transitions:
        UNCALCULATED --calculate--> CALCULATING --success--> CALCULATED
        CALCULATING --failure--> UNCALCULATED (exception propagates)
        CALCULATED --update--> UNCALCULATED (invalidation forwarded)

    A frozen object ignores invalidations and never recomputes until it is
    unfrozen.
    """

    def __init__(self, always_forward: bool = False):
        Observable.__init__(self)
        Observer.__init__(self)
        self._state = CalculationState.UNCALCULATED
        self._frozen = False
        self._always_forward = always_forward
        self._invalidated_while_calculating = False
        self.calculation_count = 0

    # ------------------------------------------------------------------
    # State inspection
    # ------------------------------------------------------------------
    @property
    def state(self) -> CalculationState:
        return self._state

    @property
    def is_calculated(self) -> bool:
        return self._state is CalculationState.CALCULATED

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    # ------------------------------------------------------------------
    # Observer interface
    # ------------------------------------------------------------------
    def update(self) -> bool:
        if self._frozen:
            return False
        if self._state is CalculationState.CALCULATING:
            # results being produced may already be stale
            self._invalidated_while_calculating = True
            return False
        was_calculated = self._state is CalculationState.CALCULATED
        self._state = CalculationState.UNCALCULATED
        return was_calculated or self._always_forward

    def invalidate(self) -> None:
        """Mark the object stale and forward the invalidation to dependents."""
        if self.update():
            self.notify_observers()

    # ------------------------------------------------------------------
    # Calculation
    # ------------------------------------------------------------------
    def calculate(self) -> None:
        """Recompute if stale. A read while already calculated is a no-op."""
        if self._frozen or self._state is not CalculationState.UNCALCULATED:
            return

        self._state = CalculationState.CALCULATING
        self._invalidated_while_calculating = False
        try:
            self.perform_calculations()
        except Exception:
            self._state = CalculationState.UNCALCULATED
            raise

        self.calculation_count += 1
        if self._invalidated_while_calculating:
            logger.debug("%s invalidated during calculation", type(self).__name__)
            self._state = CalculationState.UNCALCULATED
            self.notify_observers()
        else:
            self._state = CalculationState.CALCULATED

    def recalculate(self) -> None:
        """Force a recalculation, even if frozen, and notify dependents."""
        was_frozen = self._frozen
        self._frozen = False
        self._state = CalculationState.UNCALCULATED
        try:
            self.calculate()
        finally:
            self._frozen = was_frozen
        self.notify_observers()

    def freeze(self) -> None:
        """Stop reacting to invalidations (diagnostic snapshots)."""
        self._frozen = True

    def unfreeze(self) -> None:
        """Resume normal behaviour; the object is considered stale."""
        if not self._frozen:
            return
        self._frozen = False
        self._state = CalculationState.UNCALCULATED
        self.notify_observers()

    @abstractmethod
    def perform_calculations(self) -> None:
        """Compute derived state. Called by :meth:`calculate` only."""

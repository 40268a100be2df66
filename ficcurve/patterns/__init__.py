"""Change-notification and lazy-recalculation substrate."""

from .handle import RelinkableHandle
from .lazy import CalculationState, LazyObject
from .observable import Observable, Observer

__all__ = [
    "Observable",
    "Observer",
    "LazyObject",
    "CalculationState",
    "RelinkableHandle",
]

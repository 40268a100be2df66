"""
Base classes for curve interpolation methods.
"""
from abc import ABC, abstractmethod
from typing import Optional, Sequence

import numpy as np


class Interpolator(ABC):
    """Base class for curve interpolation methods.

    Interpolators work on the curve's own node arrays: ``times`` must be
    strictly increasing and are never re-sorted. Outside ``[x_min, x_max]``
    the end segments are extended; whether that is allowed is the curve's
    decision, not the interpolator's.
    """

    #: Global interpolants depend on every node, so a node change rebuilds them.
    is_global = False
    #: Minimum number of nodes (including the reference node).
    required_points = 2

    def __init__(self, times: Sequence[float], values: Sequence[float]):
        """
        Initialize interpolator.

        Args:
            times: Node times (in years), strictly increasing
            values: Node values (discount factors, zero rates, forwards)
        """
        if len(times) != len(values):
            raise ValueError("Times and values must have same length")
        if len(times) < self.required_points:
            raise ValueError(
                f"{type(self).__name__} needs at least {self.required_points} "
                f"points, got {len(times)}"
            )

        self.times = np.array(times, dtype=float)
        self.values = np.array(values, dtype=float)

        if np.any(np.diff(self.times) <= 0.0):
            raise ValueError("Times must be strictly increasing")

        self._node_primitives: Optional[np.ndarray] = None
        self._rebuild()

    @property
    def x_min(self) -> float:
        return float(self.times[0])

    @property
    def x_max(self) -> float:
        return float(self.times[-1])

    def update_node(self, index: int, value: float) -> None:
        """Change one node value.

        Local interpolants only touch the node itself; global interpolants are
        rebuilt over every node.
        """
        self.values[index] = float(value)
        self._node_primitives = None
        if self.is_global:
            self._rebuild()

    def update(self) -> None:
        """Refresh after the node arrays were changed in place."""
        self._node_primitives = None
        self._rebuild()

    def _rebuild(self) -> None:
        """Hook for interpolants that cache state derived from every node."""

    def _segment(self, t: float) -> int:
        # index i of the segment [t_i, t_{i+1}] containing t, end segments extended
        i = int(np.searchsorted(self.times, t, side="right")) - 1
        return min(max(i, 0), len(self.times) - 2)

    @abstractmethod
    def value(self, t: float) -> float:
        """Interpolated value at time t."""

    @abstractmethod
    def derivative(self, t: float) -> float:
        """First derivative at time t."""

    @abstractmethod
    def _segment_integral(self, i: int, a: float, b: float) -> float:
        """Integral of the segment-i interpolant between a and b."""

    def primitive(self, t: float) -> float:
        """Integral of the interpolant from ``x_min`` to t."""
        if self._node_primitives is None:
            acc = [0.0]
            for i in range(len(self.times) - 1):
                acc.append(
                    acc[-1]
                    + self._segment_integral(i, self.times[i], self.times[i + 1])
                )
            self._node_primitives = np.array(acc)

        i = self._segment(t)
        return float(
            self._node_primitives[i] + self._segment_integral(i, self.times[i], t)
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(n={len(self.times)})"

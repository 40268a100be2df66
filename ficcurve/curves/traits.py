"""
Curve representation strategies.

A piecewise curve stores one number per node. What that number means
(discount factor, continuously compounded zero rate, or instantaneous
forward) is decided once, at construction, by a :class:`CurveRepresentation`.
The matching strategy tells the bootstrap what to put at the reference
node, where to start each solve, which interval to search, and how to turn
the interpolated node values back into discount factors.

Strategies are stateless: every method receives the node arrays it needs.
"""

import math
from abc import ABC, abstractmethod
from enum import Enum
from typing import Sequence, Tuple

import numpy as np

from ficcurve.interpolation.base import Interpolator

QL_EPSILON = float(np.finfo(float).eps)
DEFAULT_MAX_ITERATIONS = 100


class CurveRepresentation(Enum):
    """What the curve nodes hold."""

    DISCOUNT = "DISCOUNT"
    ZERO_YIELD = "ZERO_YIELD"
    FORWARD_RATE = "FORWARD_RATE"


class BootstrapTraits(ABC):
    """Policy object parameterising the bootstrap by node representation."""

    max_rate: float = 3.0
    avg_rate: float = 0.05

    def __init__(self, allow_negative_rates: bool = False):
        self.allow_negative_rates = allow_negative_rates

    # ------------------------------------------------------------------
    # Bootstrap policy
    # ------------------------------------------------------------------
    @abstractmethod
    def initial_value(self) -> float:
        """Value at the reference node."""

    @abstractmethod
    def guess(
        self, i: int, times: Sequence[float], data: Sequence[float], valid_data: bool
    ) -> float:
        """Starting point for the solve of node ``i``.

        With ``valid_data`` the previous full solution is reused (warm start).
        """

    @abstractmethod
    def min_value_after(
        self, i: int, times: Sequence[float], data: Sequence[float], valid_data: bool
    ) -> float:
        """Lower end of the search interval for node ``i``."""

    @abstractmethod
    def max_value_after(
        self, i: int, times: Sequence[float], data: Sequence[float], valid_data: bool
    ) -> float:
        """Upper end of the search interval for node ``i``."""

    def update_guess(self, data: np.ndarray, value: float, i: int) -> None:
        """Commit ``value`` into node ``i``."""
        data[i] = value

    def max_iterations(self) -> int:
        """Iteration ceiling shared by the node solver and the convergence loop."""
        return DEFAULT_MAX_ITERATIONS

    @abstractmethod
    def global_bounds(self, t: float) -> Tuple[float, float]:
        """Box used by the joint re-solve for a node at time ``t``."""

    def check_nodes(self, data: Sequence[float]) -> None:
        """Raise ValueError if solved nodes break the representation's invariants."""
        if not np.all(np.isfinite(data)):
            raise ValueError("non-finite node value")

    # ------------------------------------------------------------------
    # Curve evaluation
    # ------------------------------------------------------------------
    @abstractmethod
    def discount_impl(self, interpolation: Interpolator, t: float) -> float:
        """Discount factor at ``t``; beyond the last node forwards are flat."""

    @abstractmethod
    def zero_yield_impl(self, interpolation: Interpolator, t: float) -> float:
        """Continuously compounded zero rate at ``t``."""

    @abstractmethod
    def forward_impl(self, interpolation: Interpolator, t: float) -> float:
        """Instantaneous forward rate at ``t``."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(allow_negative_rates={self.allow_negative_rates})"


class DiscountTraits(BootstrapTraits):
    """Nodes are discount factors."""

    max_rate = 1.0

    def initial_value(self) -> float:
        return 1.0

    def guess(self, i, times, data, valid_data) -> float:
        if valid_data:
            return data[i]
        if i == 1:
            return 1.0 / (1.0 + self.avg_rate * times[1])
        # flat zero rate from the previous node
        r = -math.log(data[i - 1]) / times[i - 1]
        return math.exp(-r * times[i])

    def min_value_after(self, i, times, data, valid_data) -> float:
        if valid_data:
            if self.allow_negative_rates:
                return min(data) / 2.0
            return data[-1] / 2.0
        dt = times[i] - times[i - 1]
        return data[i - 1] * math.exp(-self.max_rate * dt)

    def max_value_after(self, i, times, data, valid_data) -> float:
        if self.allow_negative_rates:
            dt = times[i] - times[i - 1]
            return data[i - 1] * math.exp(self.max_rate * dt)
        return data[i - 1]

    def global_bounds(self, t: float) -> Tuple[float, float]:
        upper = math.exp(self.max_rate * t) if self.allow_negative_rates else 1.0
        return math.exp(-self.max_rate * t), upper

    def check_nodes(self, data) -> None:
        super().check_nodes(data)
        values = np.asarray(data, dtype=float)
        if np.any(values <= 0.0):
            raise ValueError("discount factors must be positive")
        if not self.allow_negative_rates:
            increasing = np.nonzero(np.diff(values) > 0.0)[0]
            if increasing.size:
                i = int(increasing[0]) + 1
                raise ValueError(
                    f"discount factor increases at node {i}: "
                    f"{values[i - 1]:.15g} -> {values[i]:.15g}"
                )

    def discount_impl(self, interpolation, t) -> float:
        t_max = interpolation.x_max
        if t <= t_max:
            return interpolation.value(t)
        d_max = interpolation.value(t_max)
        inst_fwd_max = -interpolation.derivative(t_max) / d_max
        return d_max * math.exp(-inst_fwd_max * (t - t_max))

    def zero_yield_impl(self, interpolation, t) -> float:
        if t == 0.0:
            t = 1e-4
        return -math.log(self.discount_impl(interpolation, t)) / t

    def forward_impl(self, interpolation, t) -> float:
        t_max = interpolation.x_max
        tt = min(t, t_max)
        return -interpolation.derivative(tt) / interpolation.value(tt)


class _RateTraits(BootstrapTraits):
    """Shared bounds for representations whose nodes are rates."""

    def initial_value(self) -> float:
        return self.avg_rate

    def guess(self, i, times, data, valid_data) -> float:
        if valid_data:
            return data[i]
        if i == 1:
            return self.avg_rate
        # flat extrapolation of the previous node
        return data[i - 1]

    def min_value_after(self, i, times, data, valid_data) -> float:
        if valid_data:
            r = min(data)
            if self.allow_negative_rates and r < 0.0:
                return r * 2.0
            return r / 2.0
        return -self.max_rate if self.allow_negative_rates else QL_EPSILON

    def max_value_after(self, i, times, data, valid_data) -> float:
        if valid_data:
            r = max(data)
            if self.allow_negative_rates and r < 0.0:
                return r / 2.0
            return r * 2.0
        return self.max_rate

    def update_guess(self, data, value, i) -> None:
        data[i] = value
        if i == 1:
            # the first segment is anchored on node 0
            data[0] = value

    def global_bounds(self, t: float) -> Tuple[float, float]:
        lower = -self.max_rate if self.allow_negative_rates else QL_EPSILON
        return lower, self.max_rate

    def discount_impl(self, interpolation, t) -> float:
        return math.exp(-self.zero_yield_impl(interpolation, t) * t)


class ZeroYieldTraits(_RateTraits):
    """Nodes are continuously compounded zero rates."""

    def zero_yield_impl(self, interpolation, t) -> float:
        t_max = interpolation.x_max
        if t <= t_max:
            return interpolation.value(t)
        z_max = interpolation.value(t_max)
        inst_fwd_max = z_max + t_max * interpolation.derivative(t_max)
        return (z_max * t_max + inst_fwd_max * (t - t_max)) / t

    def forward_impl(self, interpolation, t) -> float:
        t_max = interpolation.x_max
        tt = min(t, t_max)
        return interpolation.value(tt) + tt * interpolation.derivative(tt)


class ForwardRateTraits(_RateTraits):
    """Nodes are instantaneous forward rates."""

    def zero_yield_impl(self, interpolation, t) -> float:
        if t == 0.0:
            return self.forward_impl(interpolation, 0.0)
        t_max = interpolation.x_max
        if t <= t_max:
            return interpolation.primitive(t) / t
        integral = interpolation.primitive(t_max)
        return (integral + interpolation.value(t_max) * (t - t_max)) / t

    def forward_impl(self, interpolation, t) -> float:
        return interpolation.value(min(t, interpolation.x_max))


_TRAITS = {
    CurveRepresentation.DISCOUNT: DiscountTraits,
    CurveRepresentation.ZERO_YIELD: ZeroYieldTraits,
    CurveRepresentation.FORWARD_RATE: ForwardRateTraits,
}


def make_traits(
    representation, allow_negative_rates: bool = False
) -> BootstrapTraits:
    """Resolve a representation (enum or name) to its strategy."""
    if isinstance(representation, BootstrapTraits):
        return representation
    if isinstance(representation, str):
        try:
            representation = CurveRepresentation[representation.upper()]
        except KeyError:
            raise ValueError(
                f"Unknown curve representation: {representation}. "
                f"Available: {[r.name for r in CurveRepresentation]}"
            ) from None
    return _TRAITS[representation](allow_negative_rates=allow_negative_rates)

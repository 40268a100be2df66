"""
Factory functions for creating interpolators.
"""
from typing import Dict, Sequence, Type

from .base import Interpolator
from .cubic import CubicSplineInterpolator
from .flat import BackwardFlatInterpolator, ForwardFlatInterpolator
from .linear import LinearInterpolator, LogLinearInterpolator

INTERPOLATORS: Dict[str, Type[Interpolator]] = {
    "LINEAR": LinearInterpolator,
    "LOG_LINEAR": LogLinearInterpolator,
    "LOGLINEAR": LogLinearInterpolator,
    "BACKWARD_FLAT": BackwardFlatInterpolator,
    "FORWARD_FLAT": ForwardFlatInterpolator,
    "PIECEWISE_CONSTANT": ForwardFlatInterpolator,
    "CUBIC": CubicSplineInterpolator,
    "CUBIC_SPLINE": CubicSplineInterpolator,
}


def interpolator_class(method) -> Type[Interpolator]:
    """Resolve an interpolation method name (classes pass through)."""
    if isinstance(method, type) and issubclass(method, Interpolator):
        return method
    method_upper = str(method).upper().replace("-", "_").strip()
    if method_upper not in INTERPOLATORS:
        raise ValueError(
            f"Unknown interpolation method: {method}. "
            f"Available: {sorted(INTERPOLATORS)}"
        )
    return INTERPOLATORS[method_upper]


def create_interpolator(
    method, times: Sequence[float], values: Sequence[float]
) -> Interpolator:
    """
    Create an interpolator based on method name.

    Args:
        method: Interpolation method name or Interpolator subclass
        times: Node times
        values: Node values

    Returns:
        Configured interpolator
    """
    return interpolator_class(method)(times, values)

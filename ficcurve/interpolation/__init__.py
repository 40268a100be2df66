"""Interpolation over curve nodes."""

from .base import Interpolator
from .cubic import CubicSplineInterpolator
from .factory import create_interpolator, interpolator_class
from .flat import BackwardFlatInterpolator, ForwardFlatInterpolator
from .linear import LinearInterpolator, LogLinearInterpolator

__all__ = [
    "Interpolator",
    "LinearInterpolator",
    "LogLinearInterpolator",
    "BackwardFlatInterpolator",
    "ForwardFlatInterpolator",
    "CubicSplineInterpolator",
    "create_interpolator",
    "interpolator_class",
]

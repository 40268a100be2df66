"""
Natural cubic spline interpolation (global).
"""
from scipy.interpolate import CubicSpline

from .base import Interpolator


class CubicSplineInterpolator(Interpolator):
    """Natural cubic spline through every node.

    Moving one node changes the spline on every segment, so the bootstrap has
    to iterate over the whole node set until the nodes stop moving.
    """

    is_global = True

    def _rebuild(self) -> None:
        self._spline = CubicSpline(
            self.times, self.values, bc_type="natural", extrapolate=True
        )
        self._derivative = self._spline.derivative()
        self._antiderivative = self._spline.antiderivative()

    def value(self, t: float) -> float:
        return float(self._spline(t))

    def derivative(self, t: float) -> float:
        return float(self._derivative(t))

    def primitive(self, t: float) -> float:
        return float(self._antiderivative(t) - self._antiderivative(self.times[0]))

    def _segment_integral(self, i: int, a: float, b: float) -> float:
        return float(self._antiderivative(b) - self._antiderivative(a))

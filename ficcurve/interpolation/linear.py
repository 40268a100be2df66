"""
Linear and log-linear interpolation.
"""
import math

from .base import Interpolator


class LinearInterpolator(Interpolator):
    """Linear interpolation between nodes."""

    def _slope(self, i: int) -> float:
        return (self.values[i + 1] - self.values[i]) / (
            self.times[i + 1] - self.times[i]
        )

    def value(self, t: float) -> float:
        i = self._segment(t)
        return float(self.values[i] + (t - self.times[i]) * self._slope(i))

    def derivative(self, t: float) -> float:
        return float(self._slope(self._segment(t)))

    def _segment_integral(self, i: int, a: float, b: float) -> float:
        slope = self._slope(i)
        ya = self.values[i] + (a - self.times[i]) * slope
        return float((b - a) * (ya + 0.5 * slope * (b - a)))


class LogLinearInterpolator(Interpolator):
    """Linear interpolation on the logarithm of the values.

    On discount factors this gives piecewise flat forward rates.
    Values must be strictly positive.
    """

    def _log_slope(self, i: int) -> float:
        y0, y1 = self.values[i], self.values[i + 1]
        if y0 <= 0.0 or y1 <= 0.0:
            raise ValueError(
                f"LogLinearInterpolator needs positive values, got {y0}, {y1}"
            )
        return math.log(y1 / y0) / (self.times[i + 1] - self.times[i])

    def value(self, t: float) -> float:
        i = self._segment(t)
        return float(self.values[i] * math.exp((t - self.times[i]) * self._log_slope(i)))

    def derivative(self, t: float) -> float:
        i = self._segment(t)
        return self.value(t) * self._log_slope(i)

    def _segment_integral(self, i: int, a: float, b: float) -> float:
        k = self._log_slope(i)
        ya = self.values[i] * math.exp((a - self.times[i]) * k)
        if abs(k) < 1e-14:
            return float(ya * (b - a))
        return float(ya * math.expm1(k * (b - a)) / k)

"""
Piecewise constant (step function) interpolation.
"""
import numpy as np

from .base import Interpolator


class BackwardFlatInterpolator(Interpolator):
    """Value on ``(t_i, t_{i+1}]`` is the right node value ``y_{i+1}``.

    Used on instantaneous forwards this is the usual flat-forward curve: each
    node carries the forward rate of the period ending on it.
    """

    def _right_index(self, t: float) -> int:
        if t <= self.times[0]:
            return 0
        i = int(np.searchsorted(self.times, t, side="left"))
        return min(i, len(self.times) - 1)

    def value(self, t: float) -> float:
        return float(self.values[self._right_index(t)])

    def derivative(self, t: float) -> float:
        return 0.0

    def _segment_integral(self, i: int, a: float, b: float) -> float:
        # left extension of the first segment uses y_0
        if b <= self.times[0] and a <= self.times[0]:
            return float(self.values[0] * (b - a))
        return float(self.values[i + 1] * (b - a))


class ForwardFlatInterpolator(Interpolator):
    """Value on ``[t_i, t_{i+1})`` is the left node value ``y_i``."""

    def _left_index(self, t: float) -> int:
        if t >= self.times[-1]:
            return len(self.times) - 1
        i = int(np.searchsorted(self.times, t, side="right")) - 1
        return max(i, 0)

    def value(self, t: float) -> float:
        return float(self.values[self._left_index(t)])

    def derivative(self, t: float) -> float:
        return 0.0

    def _segment_integral(self, i: int, a: float, b: float) -> float:
        # right extension of the last segment uses the last node value
        t_end = self.times[i + 1]
        if b <= t_end:
            return float(self.values[i] * (b - a))
        return float(self.values[i] * (t_end - a) + self.values[i + 1] * (b - t_end))

"""
Exception hierarchy for curve construction.

Configuration and stale-link errors are programmer errors raised before any
numerical work starts. Convergence and residual errors carry the index and
pillar date of the instrument that could not be calibrated.
"""

from datetime import date
from typing import Optional, Sequence


class CurveError(Exception):
    """Base class for all curve-construction errors."""


class CurveConfigurationError(CurveError, ValueError):
    """Malformed instrument set or curve setup, detected before solving."""


class TermStructureNotLinkedError(CurveError, RuntimeError):
    """An instrument was priced before a term structure was linked to it."""


class _InstrumentFailure(CurveError, RuntimeError):
    def __init__(
        self,
        message: str,
        index: Optional[int] = None,
        pillar_date: Optional[date] = None,
    ):
        super().__init__(message)
        self.index = index
        self.pillar_date = pillar_date


class BootstrapConvergenceError(_InstrumentFailure):
    """A node could not be solved by the local solver nor the joint re-solve."""


class CalibrationResidualError(_InstrumentFailure):
    """The curve was built but an instrument does not reprice within tolerance."""

    def __init__(
        self,
        message: str,
        index: Optional[int] = None,
        pillar_date: Optional[date] = None,
        residual: float = float("nan"),
    ):
        super().__init__(message, index, pillar_date)
        self.residual = residual


class NotificationError(CurveError, RuntimeError):
    """One or more subscribers raised while an observable was notifying."""

    def __init__(self, errors: Sequence[BaseException]):
        self.errors = list(errors)
        details = "; ".join(f"{type(e).__name__}: {e}" for e in self.errors)
        super().__init__(
            f"{len(self.errors)} observer(s) failed during notification: {details}"
        )

"""Yield curve bootstrapping engine.

This package builds interest rate term structures from market instruments
(deposits, FRAs, futures, par swaps) by solving one curve node per
instrument so that every instrument reprices to its quote.

Key modules:
- curves: Piecewise yield curve, representations and the bootstrap engine
- instruments: Rate helpers and their market conventions
- interpolation: Node interpolators (linear, log-linear, flat, cubic)
- patterns: Observer notification and lazy recalculation
- conventions: Day counts, calendars and enums
- schedule: Payment schedules and IMM dates
"""

__version__ = "0.1.0"

from ficcurve.context import EvaluationContext
from ficcurve.curves import (
    BootstrapConfig,
    CurveRepresentation,
    FlatForwardCurve,
    PiecewiseYieldCurve,
)
from ficcurve.errors import (
    BootstrapConvergenceError,
    CalibrationResidualError,
    CurveConfigurationError,
    CurveError,
    TermStructureNotLinkedError,
)
from ficcurve.schema.quotes import SimpleQuote

__all__ = [
    "__version__",
    "EvaluationContext",
    "PiecewiseYieldCurve",
    "FlatForwardCurve",
    "BootstrapConfig",
    "CurveRepresentation",
    "SimpleQuote",
    "CurveError",
    "CurveConfigurationError",
    "TermStructureNotLinkedError",
    "BootstrapConvergenceError",
    "CalibrationResidualError",
]

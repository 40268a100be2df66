"""
Curves package - yield term structures and their bootstrap.

Main APIs:
---------
    - PiecewiseYieldCurve: Curve bootstrapped from rate helpers
    - FlatForwardCurve: Single-rate curve (exogenous discounting, tests)
    - BootstrapConfig: Solver tolerances and fallbacks
    - CurveRepresentation: Discount / zero yield / forward rate nodes
"""

from .base import FlatForwardCurve, YieldTermStructure
from .bootstrap import (
    BootstrapConfig,
    BootstrapReport,
    IterativeBootstrap,
    PillarResult,
)
from .piecewise import PiecewiseYieldCurve
from .traits import (
    BootstrapTraits,
    CurveRepresentation,
    DiscountTraits,
    ForwardRateTraits,
    ZeroYieldTraits,
    make_traits,
)

__all__ = [
    "YieldTermStructure",
    "FlatForwardCurve",
    "PiecewiseYieldCurve",
    "BootstrapConfig",
    "BootstrapReport",
    "IterativeBootstrap",
    "PillarResult",
    "BootstrapTraits",
    "CurveRepresentation",
    "DiscountTraits",
    "ZeroYieldTraits",
    "ForwardRateTraits",
    "make_traits",
]

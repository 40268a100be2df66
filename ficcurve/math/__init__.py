"""Numerical solvers used by the bootstrap."""

from .optimization import JointSolveResult, minimize_repricing_errors
from .rootfinding import (
    RootFindingError,
    RootNotBracketedError,
    RootResult,
    newton_safe,
)

__all__ = [
    "newton_safe",
    "RootResult",
    "RootFindingError",
    "RootNotBracketedError",
    "minimize_repricing_errors",
    "JointSolveResult",
]

"""Bounded joint re-solve of several curve nodes."""

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np
from scipy.optimize import least_squares

logger = logging.getLogger(__name__)


@dataclass
class JointSolveResult:
    x: np.ndarray
    residuals: np.ndarray
    evaluations: int
    success: bool
    message: str

    @property
    def max_abs_residual(self) -> float:
        return float(np.max(np.abs(self.residuals))) if self.residuals.size else 0.0


def minimize_repricing_errors(
    residuals: Callable[[np.ndarray], np.ndarray],
    x0: Sequence[float],
    lower: Sequence[float],
    upper: Sequence[float],
    tolerance: float,
    max_evaluations: int = 1000,
) -> JointSolveResult:
    """Minimise the plain sum of squared repricing errors over a box.

    Args:
        residuals: Maps node values to the vector of (implied - quoted) errors.
        x0: Starting node values; clipped into the box.
        lower: Lower bounds per node.
        upper: Upper bounds per node.
        tolerance: Largest absolute residual accepted as success.
        max_evaluations: Cap on residual evaluations.

    Returns:
        JointSolveResult; ``success`` is True only if every residual is within
        ``tolerance``.
    """
    lb = np.asarray(lower, dtype=float)
    ub = np.asarray(upper, dtype=float)
    if np.any(lb >= ub):
        raise ValueError("joint re-solve requires lower < upper for every node")

    start = np.clip(np.asarray(x0, dtype=float), lb, ub)

    def fun(x: np.ndarray) -> np.ndarray:
        return np.asarray(residuals(x), dtype=float)

    result = least_squares(
        fun,
        start,
        bounds=(lb, ub),
        method="trf",
        xtol=1e-15,
        ftol=1e-15,
        gtol=1e-15,
        max_nfev=max_evaluations,
    )

    final = fun(result.x)
    max_error = float(np.max(np.abs(final))) if final.size else 0.0
    success = max_error <= tolerance
    logger.debug(
        "Joint re-solve: nfev=%s max|error|=%.3e status=%s (%s)",
        result.nfev,
        max_error,
        result.status,
        result.message,
    )
    return JointSolveResult(
        x=np.array(result.x, dtype=float),
        residuals=final,
        evaluations=int(result.nfev),
        success=success,
        message=str(result.message),
    )

"""Root-finding utilities (safeguarded Newton-Raphson with bisection steps)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Tuple

logger = logging.getLogger(__name__)

Func = Callable[[float], float]


@dataclass
class RootResult:
    root: float
    iterations: int
    converged: bool
    method: str


class RootFindingError(RuntimeError):
    """Raised when root-finding fails to converge."""


class RootNotBracketedError(RootFindingError):
    """Raised when the function has the same sign at both ends of the bracket."""


def _derivative(func: Func, x: float, lower: float, upper: float) -> float:
    # central difference kept inside the admissible interval
    h = 1e-8 * max(1.0, abs(x))
    xa = max(lower, x - h)
    xb = min(upper, x + h)
    if xb <= xa:
        return 0.0
    return (func(xb) - func(xa)) / (xb - xa)


def _orient(func: Func, lower: float, upper: float) -> Tuple[float, float, float, float]:
    f_lower = func(lower)
    f_upper = func(upper)
    if f_lower * f_upper > 0.0:
        raise RootNotBracketedError(
            f"root not bracketed: f[{lower:.12g}, {upper:.12g}] -> "
            f"[{f_lower:.6g}, {f_upper:.6g}]"
        )
    return lower, upper, f_lower, f_upper


def newton_safe(
    func: Func,
    accuracy: float,
    guess: float,
    lower: float,
    upper: float,
    max_iter: int = 100,
) -> RootResult:
    """Bracketed Newton-Raphson solver.

    Every Newton step that would leave the current bracket, or that does not
    shrink the step fast enough, is replaced by a bisection step, so the
    iteration cannot escape ``[lower, upper]``. The derivative is estimated
    by finite differences.

    Args:
        func: Scalar function whose root is sought.
        accuracy: Absolute tolerance on the root.
        guess: Starting point; clipped into the bracket.
        lower: Lower end of the bracket.
        upper: Upper end of the bracket.
        max_iter: Maximum number of iterations.

    Returns:
        RootResult with method ``"newton"`` if no bisection step was needed,
        ``"bisection"`` otherwise.

    Raises:
        RootNotBracketedError: If ``func`` does not change sign on the bracket.
        RootFindingError: If the iteration limit is reached.
    """
    if not lower < upper:
        raise RootFindingError(f"invalid bracket [{lower}, {upper}]")
    if accuracy <= 0.0:
        raise RootFindingError(f"accuracy must be positive, got {accuracy}")

    a, b, f_a, f_b = _orient(func, lower, upper)
    if f_a == 0.0:
        return RootResult(a, 0, True, "newton")
    if f_b == 0.0:
        return RootResult(b, 0, True, "newton")

    # xl is where the function is negative
    if f_a < 0.0:
        xl, xh = a, b
    else:
        xl, xh = b, a

    root = min(max(float(guess), lower), upper)
    dx_old = upper - lower
    dx = dx_old
    f_root = func(root)
    df_root = _derivative(func, root, lower, upper)
    used_bisection = False

    for iteration in range(1, max_iter + 1):
        newton_out = ((root - xh) * df_root - f_root) * (
            (root - xl) * df_root - f_root
        ) > 0.0
        too_slow = abs(2.0 * f_root) > abs(dx_old * df_root)
        if newton_out or too_slow or df_root == 0.0:
            dx_old = dx
            dx = 0.5 * (xh - xl)
            root = xl + dx
            used_bisection = True
            step_kind = "bisection"
        else:
            dx_old = dx
            dx = f_root / df_root
            root -= dx
            step_kind = "newton"

        logger.debug(
            "%s iter %s: x=%.15g dx=%.3e f=%.3e", step_kind, iteration, root, dx, f_root
        )
        if abs(dx) < accuracy:
            method = "bisection" if used_bisection else "newton"
            return RootResult(root, iteration, True, method)

        f_root = func(root)
        if f_root == 0.0:
            method = "bisection" if used_bisection else "newton"
            return RootResult(root, iteration, True, method)
        df_root = _derivative(func, root, lower, upper)
        if f_root < 0.0:
            xl = root
        else:
            xh = root

    raise RootFindingError(
        f"maximum number of iterations ({max_iter}) exceeded, last x={root:.15g}"
    )

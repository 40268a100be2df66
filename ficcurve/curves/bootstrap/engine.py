"""
Iterative node-by-node bootstrap.

Each rate helper, in pillar order, adds one node to the curve. The node value
is solved so that the helper's implied quote matches its market quote while
every earlier node is held fixed. Nodes that cannot be solved on their own
are retried from a cold start and then re-solved jointly with every earlier
node. A final pass reprices every helper against the finished curve.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ficcurve.errors import (
    BootstrapConvergenceError,
    CalibrationResidualError,
    CurveConfigurationError,
    CurveError,
)
from ficcurve.math.optimization import minimize_repricing_errors
from ficcurve.math.rootfinding import RootFindingError, RootResult, newton_safe

from .config import BootstrapConfig
from .results import BootstrapReport, PillarResult

logger = logging.getLogger(__name__)

_SOLVER_ERRORS = (RootFindingError, ValueError, ArithmeticError)


class IterativeBootstrap:
    """Bootstrapper for :class:`~ficcurve.curves.piecewise.PiecewiseYieldCurve`.

    The engine works directly on the curve's node arrays while the curve is
    calculating; readers never see them because the curve only becomes
    calculated once :meth:`calculate` returns.
    """

    def __init__(self, config: Optional[BootstrapConfig] = None):
        self.config = config or BootstrapConfig()
        self._curve = None
        self._valid_curve = False
        self.total_iterations = 0

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------
    def setup(self, curve) -> None:
        """Attach to a curve and subscribe it to its instruments."""
        self._curve = curve
        helpers = curve.instruments
        n = len(helpers)
        if n == 0:
            raise CurveConfigurationError("no instruments given")
        required = curve.interpolator_class.required_points
        if n + 1 < required:
            raise CurveConfigurationError(
                f"not enough instruments: {n} provided, {required - 1} required"
            )
        for helper in helpers:
            curve.watch(helper)

    @property
    def has_valid_curve(self) -> bool:
        """Whether the previous run succeeded and can seed a warm start."""
        return self._valid_curve

    def _validate(self, helpers: Sequence) -> None:
        curve = self._curve
        reference = curve.reference_date
        for k, helper in enumerate(helpers):
            pillar = helper.pillar_date
            if pillar <= reference:
                raise CurveConfigurationError(
                    f"instrument {k} has pillar date {pillar} not after the "
                    f"reference date {reference}"
                )
            if helper.earliest_date < reference:
                raise CurveConfigurationError(
                    f"instrument {k} (pillar {pillar}) has earliest date "
                    f"{helper.earliest_date} before the reference date {reference}"
                )
            if k > 0:
                previous = helpers[k - 1].pillar_date
                if pillar == previous:
                    raise CurveConfigurationError(
                        f"two instruments have the same pillar date ({pillar}): "
                        f"instruments {k - 1} and {k}"
                    )
                if pillar < previous:
                    raise CurveConfigurationError(
                        f"instruments are not sorted by pillar date: instrument {k} "
                        f"({pillar}) precedes instrument {k - 1} ({previous})"
                    )
        for k, helper in enumerate(helpers):
            if not helper.quote_is_valid():
                raise CurveConfigurationError(
                    f"instrument {k} (pillar {helper.pillar_date}) has an invalid quote"
                )

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------
    def calculate(self) -> BootstrapReport:
        """Solve every node of the attached curve.

        Raises:
            CurveConfigurationError: Malformed instrument set (no solve attempted).
            BootstrapConvergenceError: A node could not be solved, even jointly.
            CalibrationResidualError: An instrument does not reprice within
                ``repricing_tolerance`` on the finished curve.
        """
        if self._curve is None:
            raise CurveConfigurationError("bootstrap not set up with a curve")
        curve = self._curve
        traits = curve.traits
        cfg = self.config
        helpers = curve.instruments
        n = len(helpers)

        self._validate(helpers)
        for helper in helpers:
            helper.set_term_structure(curve)

        dates = [curve.reference_date] + [h.pillar_date for h in helpers]
        times = np.array([curve.time_from_reference(d) for d in dates], dtype=float)
        bad = np.nonzero(np.diff(times) <= 0.0)[0]
        if bad.size:
            k = int(bad[0])
            raise CurveConfigurationError(
                f"pillar {dates[k + 1]} maps to a non-increasing curve time "
                f"({times[k + 1]} after {times[k]})"
            )

        warm = self._valid_curve and len(curve._data) == n + 1
        if not warm:
            data = np.full(n + 1, traits.initial_value(), dtype=float)
        else:
            data = np.array(curve._data, dtype=float)
        # a failed run must not seed the next one
        self._valid_curve = False

        curve._dates = dates
        curve._times = times
        curve._data = data

        report = BootstrapReport(warm_start=warm)
        outcomes: Dict[int, Tuple[int, str]] = {}
        max_iterations = cfg.max_iterations or traits.max_iterations()
        is_global = curve.interpolator_class.is_global

        iteration = 0
        while True:
            previous_data = curve._data.copy()
            extend = not warm and iteration == 0
            if not extend:
                curve._interpolation = curve.interpolator_class(curve._times, curve._data)

            for i in range(1, n + 1):
                iterations, method = self._solve_node(
                    i, helpers, warm or iteration > 0, extend, max_iterations
                )
                report.solver_iterations += iterations
                outcomes[i] = (iterations + outcomes.get(i, (0, ""))[0], method)
                if method == "joint":
                    report.joint_resolves += 1

            if not is_global:
                break
            if extend:
                # at least one more pass on the full interpolant checks convergence
                iteration += 1
                continue

            report.convergence_loops += 1
            improvement = float(np.max(np.abs(curve._data[1:] - previous_data[1:])))
            logger.debug(
                "Convergence loop %s: max improvement %.3e", iteration + 1, improvement
            )
            if improvement <= cfg.accuracy:
                break
            if iteration + 1 >= max_iterations:
                message = (
                    f"convergence not reached after {iteration + 1} iterations; "
                    f"last improvement {improvement:.3e}, required accuracy {cfg.accuracy}"
                )
                logger.error(message)
                raise BootstrapConvergenceError(message)
            iteration += 1

        self._check_postconditions()
        self._reprice(helpers, report, outcomes)

        self.total_iterations += report.solver_iterations
        self._valid_curve = True
        logger.debug(
            "Bootstrap finished: %s nodes, %s solver iterations, warm=%s",
            n,
            report.solver_iterations,
            warm,
        )
        return report

    # ------------------------------------------------------------------
    # Node solving
    # ------------------------------------------------------------------
    def _set_node(self, i: int, value: float) -> None:
        curve = self._curve
        curve.traits.update_guess(curve._data, value, i)
        interpolation = curve._interpolation
        size = len(interpolation.values)
        changed = (0, i) if i == 1 else (i,)
        for j in changed:
            if j < size:
                interpolation.update_node(j, curve._data[j])

    def _bracket(self, i: int, valid_data: bool) -> Tuple[float, float, float]:
        curve = self._curve
        traits = curve.traits
        times, data = curve._times, curve._data
        guess = traits.guess(i, times, data, valid_data)
        lower = traits.min_value_after(i, times, data, valid_data)
        upper = traits.max_value_after(i, times, data, valid_data)
        if guess <= lower or guess >= upper:
            guess = 0.5 * (lower + upper)
        return guess, lower, upper

    def _newton(
        self, i: int, helper, guess: float, lower: float, upper: float, max_iterations: int
    ) -> RootResult:
        def error(x: float) -> float:
            self._set_node(i, x)
            return helper.quote_error()

        result = newton_safe(error, self.config.accuracy, guess, lower, upper, max_iterations)
        self._set_node(i, result.root)
        return result

    def _solve_node(
        self,
        i: int,
        helpers: Sequence,
        valid_data: bool,
        extend: bool,
        max_iterations: int,
    ) -> Tuple[int, str]:
        """Solve node ``i``; returns (solver iterations, method)."""
        curve = self._curve
        helper = helpers[i - 1]
        pillar = curve._dates[i]

        # guess before extending so any extrapolation only sees solved nodes
        guess, lower, upper = self._bracket(i, valid_data)
        if extend:
            curve._interpolation = curve.interpolator_class(
                curve._times[: i + 1], curve._data[: i + 1]
            )

        try:
            result = self._newton(i, helper, guess, lower, upper, max_iterations)
            self._log_node(i, pillar, result.root, result.iterations, result.method)
            return result.iterations, result.method
        except CurveError:
            raise
        except _SOLVER_ERRORS as exc:
            failure: Exception = exc
            logger.debug("Node %s (%s) failed on first attempt: %s", i, pillar, exc)

        if valid_data:
            logger.warning(
                "Instrument %s (pillar %s): warm solve failed (%s); retrying cold",
                i - 1,
                pillar,
                failure,
            )
            guess, lower, upper = self._bracket(i, False)
            try:
                result = self._newton(i, helper, guess, lower, upper, max_iterations)
                self._log_node(i, pillar, result.root, result.iterations, "cold retry")
                return result.iterations, "cold retry"
            except CurveError:
                raise
            except _SOLVER_ERRORS as exc:
                failure = exc

        if self.config.joint_resolve:
            logger.warning(
                "Instrument %s (pillar %s): local solve failed (%s); "
                "re-solving nodes 1..%s jointly",
                i - 1,
                pillar,
                failure,
                i,
            )
            evaluations = self._joint_resolve(i, helpers, guess, failure)
            self._log_node(i, pillar, curve._data[i], evaluations, "joint")
            return evaluations, "joint"

        message = (
            f"could not bootstrap instrument {i - 1} (pillar {pillar}): {failure}"
        )
        logger.error(message)
        raise BootstrapConvergenceError(message, index=i - 1, pillar_date=pillar) from failure

    def _joint_resolve(
        self, i: int, helpers: Sequence, guess: float, failure: Exception
    ) -> int:
        curve = self._curve
        traits = curve.traits
        pillar = curve._dates[i]
        saved = curve._data.copy()

        x0 = curve._data[1 : i + 1].copy()
        x0[-1] = guess
        bounds = [traits.global_bounds(curve._times[j]) for j in range(1, i + 1)]
        lower = [b[0] for b in bounds]
        upper = [b[1] for b in bounds]

        def residuals(x: np.ndarray) -> List[float]:
            for j, value in enumerate(x, start=1):
                self._set_node(j, value)
            return [h.quote_error() for h in helpers[:i]]

        try:
            outcome = minimize_repricing_errors(
                residuals,
                x0,
                lower,
                upper,
                self.config.repricing_tolerance,
            )
        except CurveError:
            raise
        except _SOLVER_ERRORS as exc:
            self._restore(saved)
            message = (
                f"could not bootstrap instrument {i - 1} (pillar {pillar}): "
                f"joint re-solve failed: {exc}"
            )
            logger.error(message)
            raise BootstrapConvergenceError(
                message, index=i - 1, pillar_date=pillar
            ) from exc

        residuals(outcome.x)
        consistent = True
        try:
            traits.check_nodes(curve._data[: i + 1])
        except ValueError as exc:
            consistent = False
            logger.debug("Joint solution rejected: %s", exc)

        if not (outcome.success and consistent):
            self._restore(saved)
            message = (
                f"could not bootstrap instrument {i - 1} (pillar {pillar}): "
                f"{failure}; joint re-solve left max repricing error "
                f"{outcome.max_abs_residual:.3e}"
            )
            logger.error(message)
            raise BootstrapConvergenceError(
                message, index=i - 1, pillar_date=pillar
            ) from failure
        return outcome.evaluations

    def _restore(self, saved: np.ndarray) -> None:
        curve = self._curve
        curve._data[:] = saved
        interpolation = curve._interpolation
        interpolation.values[:] = saved[: len(interpolation.values)]
        interpolation.update()

    def _log_node(self, i: int, pillar, value: float, iterations: int, method: str) -> None:
        logger.debug(
            "Node %s (%s) committed: value=%.15g iterations=%s method=%s",
            i,
            pillar,
            value,
            iterations,
            method,
        )
        if self.config.verbose:
            logger.info(
                "Pillar %s: value=%.12f (%s, %s iterations)", pillar, value, method, iterations
            )

    # ------------------------------------------------------------------
    # Final checks
    # ------------------------------------------------------------------
    def _check_postconditions(self) -> None:
        curve = self._curve
        try:
            curve.traits.check_nodes(curve._data)
        except ValueError as exc:
            message = f"bootstrapped nodes are inconsistent: {exc}"
            logger.error(message)
            raise BootstrapConvergenceError(message) from exc

    def _reprice(
        self,
        helpers: Sequence,
        report: BootstrapReport,
        outcomes: Dict[int, Tuple[int, str]],
    ) -> None:
        curve = self._curve
        tolerance = self.config.repricing_tolerance
        for k, helper in enumerate(helpers):
            i = k + 1
            error = helper.quote_error()
            iterations, method = outcomes[i]
            report.pillars.append(
                PillarResult(
                    index=k,
                    pillar_date=curve._dates[i],
                    time=float(curve._times[i]),
                    value=float(curve._data[i]),
                    iterations=iterations,
                    method=method,
                    repricing_error=error,
                )
            )
            if not abs(error) <= tolerance:
                message = (
                    f"instrument {k} (pillar {curve._dates[i]}) does not reprice: "
                    f"error {error:.3e} exceeds tolerance {tolerance:.1e}"
                )
                logger.error(message)
                raise CalibrationResidualError(
                    message, index=k, pillar_date=curve._dates[i], residual=error
                )

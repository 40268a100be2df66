from __future__ import annotations

import math

import numpy as np
import pytest

from ficcurve.math import (
    RootFindingError,
    RootNotBracketedError,
    minimize_repricing_errors,
    newton_safe,
)


def test_newton_finds_square_root():
    result = newton_safe(lambda x: x * x - 2.0, 1e-12, 1.0, 0.0, 2.0)

    assert result.converged
    assert result.method == "newton"
    assert result.root == pytest.approx(math.sqrt(2.0), abs=1e-12)
    assert result.iterations < 10


def test_newton_accepts_root_on_bracket_end():
    result = newton_safe(lambda x: x - 1.0, 1e-12, 0.5, 0.0, 1.0)
    assert result.root == 1.0
    assert result.iterations == 0


def test_guess_outside_bracket_is_clipped():
    result = newton_safe(lambda x: x * x - 2.0, 1e-12, 10.0, 0.0, 2.0)
    assert result.root == pytest.approx(math.sqrt(2.0), abs=1e-12)


def test_step_function_falls_back_to_bisection():
    def step(x):
        return -1.0 if x < 0.3 else 1.0

    result = newton_safe(step, 1e-6, 0.5, 0.0, 1.0)
    assert result.method == "bisection"
    assert result.root == pytest.approx(0.3, abs=1e-6)

    with pytest.raises(RootFindingError, match="maximum number of iterations"):
        newton_safe(step, 1e-12, 0.5, 0.0, 1.0, max_iter=5)


def test_root_not_bracketed():
    with pytest.raises(RootNotBracketedError, match="root not bracketed"):
        newton_safe(lambda x: x * x + 1.0, 1e-12, 1.0, 0.0, 2.0)


def test_invalid_bracket_and_accuracy():
    with pytest.raises(RootFindingError, match="invalid bracket"):
        newton_safe(lambda x: x, 1e-12, 0.0, 1.0, 1.0)
    with pytest.raises(RootFindingError, match="accuracy"):
        newton_safe(lambda x: x, 0.0, 0.0, -1.0, 1.0)


def test_joint_solve_reaches_interior_solution():
    target = np.array([0.5, 0.25])
    result = minimize_repricing_errors(
        lambda x: x - target, [0.0, 0.0], [-1.0, -1.0], [1.0, 1.0], 1e-10
    )

    assert result.success
    assert result.x == pytest.approx(target, abs=1e-10)
    assert result.max_abs_residual <= 1e-10
    assert result.evaluations >= 1


def test_joint_solve_reports_failure_at_bound():
    result = minimize_repricing_errors(
        lambda x: np.array([x[0] - 2.0]), [0.0], [-1.0], [1.0], 1e-10
    )

    assert not result.success
    assert result.x[0] == pytest.approx(1.0, abs=1e-4)
    assert result.max_abs_residual == pytest.approx(1.0, abs=1e-4)


def test_joint_solve_rejects_empty_box():
    with pytest.raises(ValueError, match="lower < upper"):
        minimize_repricing_errors(lambda x: x, [0.0], [1.0], [1.0], 1e-10)

from __future__ import annotations

import numpy as np
import pytest

from dfopt.core import CallableObjective, EvaluatedPoint, clamp, evaluate_point
from dfopt.problems import Sphere


def test_evaluated_points_order_by_value_and_sort_stably() -> None:
    a = EvaluatedPoint((0.0,), 1.0)
    b = EvaluatedPoint((1.0,), 0.5)
    c = EvaluatedPoint((2.0,), 1.0)
    assert b < a
    assert not (a < c) and not (c < a)
    ordered = sorted([a, b, c], key=lambda p: p.value)
    assert ordered == [b, a, c]


def test_evaluated_point_is_immutable() -> None:
    p = EvaluatedPoint.of(np.array([1.0, 2.0]), 3)
    assert p.coordinates == (1.0, 2.0)
    assert isinstance(p.value, float)
    with pytest.raises(AttributeError):
        p.value = 0.0  # type: ignore[misc]


def test_objective_counts_evaluations_until_new_run() -> None:
    f = Sphere(3, 2.0)
    assert f.num_evals() == 0
    assert f.evaluate([1.0, 1.0, 1.0]) == pytest.approx(3.0)
    f.evaluate([0.0, 0.0, 0.0])
    assert f.num_evals() == 2
    f.new_run()
    assert f.num_evals() == 0


def test_objective_rejects_wrong_dimension() -> None:
    f = Sphere(2, 1.0)
    with pytest.raises(ValueError):
        f.evaluate([1.0, 2.0, 3.0])
    assert f.num_evals() == 0


def test_callable_objective_bounds() -> None:
    f = CallableObjective(lambda x: float(x.sum()), [-1.0, 0.0], [1.0, 4.0])
    lower, upper = f.bounds()
    assert f.num_variables() == 2
    assert lower.tolist() == [-1.0, 0.0]
    assert upper.tolist() == [1.0, 4.0]
    assert f.ranges().tolist() == [2.0, 4.0]
    assert clamp([5.0, -3.0], f).tolist() == [1.0, 0.0]
    sol = evaluate_point(f, [0.5, 1.5])
    assert sol.value == pytest.approx(2.0)
    assert f.num_evals() == 1


def test_callable_objective_validates_bounds() -> None:
    with pytest.raises(ValueError):
        CallableObjective(lambda x: 0.0, [0.0, 0.0], [1.0])
    with pytest.raises(ValueError):
        CallableObjective(lambda x: 0.0, [2.0], [1.0])

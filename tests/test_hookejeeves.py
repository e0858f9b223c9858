from __future__ import annotations

import numpy as np
import pytest

from dfopt.config import HookeJeevesConfig, RunConfig
from dfopt.optim import HookeJeeves
from dfopt.problems import Sphere


def test_step_contracts_by_exact_factor_on_sphere() -> None:
    f = Sphere(2, 5.0)
    hj = HookeJeeves(HookeJeevesConfig(step=0.01, min_step=1e-5))
    hj.set_objective(f)
    best = hj.run()
    trace = hj.step_trace
    assert trace[0] == 0.01
    assert len(trace) > 1
    for prev, cur in zip(trace, trace[1:]):
        assert cur <= prev
        assert cur == prev * 0.5
    assert trace[-1] <= 1e-5 or f.num_evals() >= 1000
    assert best.value < f.evaluate([5.0, 5.0])


def test_identical_seeds_give_identical_evaluations(
    make_recording_sphere,
) -> None:
    first, second = make_recording_sphere(3), make_recording_sphere(3)
    cfg = HookeJeevesConfig(run=RunConfig(seed=21, maxevals_cycle=300))
    a = HookeJeeves(cfg)
    a.set_objective(first)
    b = HookeJeeves(cfg)
    b.set_objective(second)
    assert a.run() == b.run()
    assert first.history == second.history


def test_seed_advances_per_run_and_run_with_seed_restores(
    make_recording_sphere,
) -> None:
    f = make_recording_sphere()
    hj = HookeJeeves(HookeJeevesConfig(run=RunConfig(seed=4, maxevals_cycle=40)))
    hj.set_objective(f)
    hj.run()
    start_a = f.history[0]
    assert hj.seed == 5
    hj.run([1.0, 1.0])
    assert hj.seed == 6
    seen = len(f.history)
    hj.run_with_seed(4)
    assert hj.seed == 6
    # Reusing seed 4 reproduces the first random start.
    assert f.history[seen] == start_a


def test_every_evaluated_point_stays_in_bounds(shifted_box) -> None:  # type: ignore[no-untyped-def]
    cfg = HookeJeevesConfig(step=0.2, acceleration=2.0, run=RunConfig(maxevals_cycle=500))
    hj = HookeJeeves(cfg)
    hj.set_objective(shifted_box)
    best = hj.run([0.0, 1.0, 2.25])
    lower, upper = shifted_box.bounds()
    pts = np.asarray(shifted_box.history)
    assert np.all(pts >= lower) and np.all(pts <= upper)
    assert best.value <= shifted_box.values[0]


def test_start_point_outside_box_is_clamped(sphere2: Sphere) -> None:
    hj = HookeJeeves(HookeJeevesConfig(run=RunConfig(maxevals_cycle=10)))
    hj.set_objective(sphere2)
    best = hj.run([50.0, -50.0])
    assert all(-5.0 <= c <= 5.0 for c in best.coordinates)
    with pytest.raises(ValueError):
        hj.run([1.0, 2.0, 3.0])


def test_min_step_stops_search_early() -> None:
    f = Sphere(2, 5.0)
    hj = HookeJeeves(HookeJeevesConfig(step=0.01, min_step=0.01))
    hj.set_objective(f)
    hj.run([1.0, 1.0])
    # Step already at the threshold: only the start point is evaluated.
    assert f.num_evals() == 1
    assert hj.step_trace == [0.01]


def test_budget_bounds_cycle_evaluations() -> None:
    f = Sphere(4, 5.0)
    hj = HookeJeeves(HookeJeevesConfig(min_step=0.0, run=RunConfig(maxevals_cycle=300)))
    hj.set_objective(f)
    hj.run()
    # An exploratory move costs at most 2n + 1 evaluations.
    assert 300 <= f.num_evals() <= 300 + 2 * 4 + 1


def test_negative_seed_runs_and_is_reproducible() -> None:
    hj = HookeJeeves(HookeJeevesConfig(run=RunConfig(seed=-3, maxevals_cycle=100)))
    hj.set_objective(Sphere(2, 5.0))
    first = hj.run()
    assert hj.seed == -2
    lower, upper = np.full(2, -5.0), np.full(2, 5.0)
    assert np.all(first.as_array() >= lower) and np.all(first.as_array() <= upper)
    assert hj.run_with_seed(-3) == first

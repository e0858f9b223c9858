from __future__ import annotations

from typing import Iterator, Optional

import pytest

from dfopt.config import HookeJeevesConfig, NelderMeadConfig, RunConfig
from dfopt.core import EvaluatedPoint, ObjectiveFunction
from dfopt.optim import HookeJeeves, IteratedSearch, NelderMead
from dfopt.problems import Rastrigin, Sphere


class FixedCostMethod:
    """Stand-in method that spends exactly ``cost`` evaluations per restart."""

    name = "fixed"

    def __init__(self, cost: int, values: Iterator[float]) -> None:
        self.cost = cost
        self.values = values
        self.seed = 0
        self.seeds_used: list[int] = []
        self.elapsed = 0.0
        self.objective: Optional[ObjectiveFunction] = None

    def set_objective(self, objective: ObjectiveFunction) -> None:
        self.objective = objective

    def run(self, start=None) -> EvaluatedPoint:  # type: ignore[no-untyped-def]
        assert self.objective is not None
        self.objective.new_run()
        for _ in range(self.cost):
            self.objective.evaluate([0.0, 0.0])
        self.seeds_used.append(self.seed)
        self.seed += 1
        return EvaluatedPoint((float(self.seed), 0.0), next(self.values))

    def run_with_seed(self, seed: int) -> EvaluatedPoint:  # pragma: no cover - unused
        raise NotImplementedError


def _config(maxevals: int = 5000, cycle: int = 1000, seed: int = 1) -> HookeJeevesConfig:
    return HookeJeevesConfig(run=RunConfig(seed=seed, maxevals=maxevals, maxevals_cycle=cycle))


def test_five_restarts_fill_global_budget() -> None:
    method = FixedCostMethod(1000, iter([5.0, 3.0, 4.0, 1.0, 1.0]))
    search = IteratedSearch(_config(), method)
    search.set_objective(Sphere(2, 5.0))
    best = search.run()
    assert best.value == 1.0
    # Strict improvement only: the later tie does not replace the best.
    assert best.coordinates == (4.0, 0.0)
    run = search.statistics.runs[0]
    assert [s.evals for s in run.samples] == [1000, 2000, 3000, 4000, 5000]
    assert [s.best for s in run.samples] == [5.0, 3.0, 3.0, 1.0, 1.0]
    assert [r.evals for r in run.improvements] == [1000, 2000, 4000]


def test_harness_seeds_method_and_advances_own_seed() -> None:
    method = FixedCostMethod(1000, iter([1.0] * 10))
    search = IteratedSearch(_config(seed=7), method)
    search.set_objective(Sphere(2, 5.0))
    search.run()
    assert method.seeds_used == [7, 8, 9, 10, 11]
    assert search.seed == 7 + 5000 // 3
    search.run()
    assert method.seeds_used[5] == 7 + 5000 // 3


def test_pattern_search_restarts_with_overshoot() -> None:
    f = Sphere(2, 5.0)
    config = HookeJeevesConfig(
        min_step=0.0, run=RunConfig(maxevals=5000, maxevals_cycle=1000)
    )
    search = IteratedSearch(config, HookeJeeves(config))
    search.set_objective(f)
    search.run()
    samples = search.statistics.runs[0].samples
    assert len(samples) == 5
    # Each restart may exceed the cycle budget by one exploratory move (2n + 1).
    assert 5000 <= samples[-1].evals <= 5000 + 5 * 5
    values = [s.best for s in samples]
    assert values == sorted(values, reverse=True)


def test_run_with_seed_restores_harness_seed() -> None:
    config = NelderMeadConfig(run=RunConfig(seed=3, maxevals=600, maxevals_cycle=200))
    search = IteratedSearch(config, NelderMead(config))
    search.set_objective(Rastrigin(2, 5.12))
    before = search.seed
    a = search.run_with_seed(12345)
    assert search.seed == before
    b = search.run_with_seed(12345)
    assert a == b
    search.run()
    assert search.seed == before + 600 // 3


def test_identical_harnesses_reproduce_batches() -> None:
    def make() -> IteratedSearch:
        run = RunConfig(seed=9, numruns=3, maxevals=400, maxevals_cycle=100)
        config = NelderMeadConfig(run=run)
        s = IteratedSearch(config, NelderMead(config))
        s.set_objective(Rastrigin(3, 5.12))
        return s

    first, second = make(), make()
    assert first.run_batch() == second.run_batch()
    assert len(first.statistics) == 3
    assert first.statistics.to_records()[0]["rundata"] == (
        second.statistics.to_records()[0]["rundata"]
    )


def test_run_requires_objective() -> None:
    config = NelderMeadConfig()
    with pytest.raises(RuntimeError):
        IteratedSearch(config, NelderMead(config)).run()


class FailingSphere(ObjectiveFunction):
    """Sphere that raises once its ``fail_at``-th evaluation is reached."""

    def __init__(self, fail_at: int) -> None:
        super().__init__()
        self.fail_at = fail_at
        self.calls = 0

    def num_variables(self) -> int:
        return 2

    def min_value(self, i: int) -> float:
        return -5.0

    def max_value(self, i: int) -> float:
        return 5.0

    def _evaluate(self, x):  # type: ignore[no-untyped-def]
        self.calls += 1
        if self.calls == self.fail_at:
            raise FloatingPointError("objective failed")
        return float((x * x).sum())


def test_failed_run_is_discarded_from_statistics() -> None:
    config = NelderMeadConfig(run=RunConfig(maxevals=400, maxevals_cycle=100))
    search = IteratedSearch(config, NelderMead(config))
    search.set_objective(FailingSphere(fail_at=150))
    with pytest.raises(FloatingPointError):
        search.run()
    assert not search.statistics.run_active
    assert len(search.statistics) == 0

    search.run()
    assert len(search.statistics) == 1
    assert search.statistics.runs[0].samples[-1].evals >= 400


def test_abort_run_discards_open_record() -> None:
    search = IteratedSearch(_config(maxevals=2000), FixedCostMethod(1000, iter([2.0, 1.0])))
    search.set_objective(Sphere(2, 5.0))
    search.statistics.new_run()
    search.statistics.take_stats(10, EvaluatedPoint((0.0, 0.0), 9.0))
    search.statistics.abort_run()
    search.run()
    assert len(search.statistics) == 1
    assert [s.evals for s in search.statistics.runs[0].samples] == [1000, 2000]

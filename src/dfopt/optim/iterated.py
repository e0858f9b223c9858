"""Multi-start driver: restart a method until a global evaluation budget is spent."""

from __future__ import annotations

import logging
import time
from typing import List, Optional

from ..config import MethodConfig
from ..core import EvaluatedPoint, ObjectiveFunction
from ..metrics.statistics import StatisticsRecorder
from .base import SearchMethod, require_objective, swapped_seed

logger = logging.getLogger(__name__)


class IteratedSearch:
    """Repeatedly restart ``method`` under ``config.run.maxevals`` evaluations per run.

    The harness owns its own seed counter. Each :meth:`run` hands the current
    seed to the method and then advances it by ``maxevals // (n + 1)``, so
    successive runs start from separate seed regions (the method itself adds
    one per restart).
    """

    def __init__(self, config: MethodConfig, method: SearchMethod) -> None:
        self.config = config
        self.method = method
        self.seed = config.run.seed
        self.elapsed = 0.0
        self.statistics = StatisticsRecorder()
        self.objective: Optional[ObjectiveFunction] = None

    def set_objective(self, objective: ObjectiveFunction) -> None:
        self.objective = objective
        self.method.set_objective(objective)

    def run(self) -> EvaluatedPoint:
        """Run one multi-start search and return the best point across restarts."""
        tic = time.perf_counter()
        objective = require_objective(self.objective)
        budget = self.config.run.maxevals

        self.statistics.new_run()
        best: Optional[EvaluatedPoint] = None
        evals = 0
        self.method.seed = self.seed
        self.seed += budget // (objective.num_variables() + 1)
        try:
            while evals < budget:
                sol = self.method.run()
                if objective.num_evals() <= 0:
                    raise RuntimeError(
                        f"{self.method.name} returned without evaluating the objective"
                    )
                evals += objective.num_evals()
                if best is None or sol.value < best.value:
                    best = sol
                self.statistics.take_stats(evals, best)
                logger.info("%d\t%d\t%g", evals, objective.num_evals(), best.value)
        except BaseException:
            self.statistics.abort_run()
            raise
        self.statistics.close_run()

        self.elapsed = time.perf_counter() - tic
        assert best is not None
        return best

    def run_with_seed(self, seed: int) -> EvaluatedPoint:
        """Run once with ``seed``; the harness's own seed sequence is left unchanged."""
        with swapped_seed(self, seed):
            return self.run()

    def run_batch(self, numruns: Optional[int] = None) -> List[EvaluatedPoint]:
        """Perform ``numruns`` (default ``config.run.numruns``) consecutive runs."""
        count = self.config.run.numruns if numruns is None else int(numruns)
        results: List[EvaluatedPoint] = []
        for i in range(count):
            sol = self.run()
            logger.info("Run %d (%.3fs)\t: %g", i, self.elapsed, sol.value)
            results.append(sol)
        return results


__all__ = ["IteratedSearch"]

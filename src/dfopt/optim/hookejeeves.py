"""Hooke-Jeeves pattern search with adaptive step contraction."""

from __future__ import annotations

import logging
import math
import time
from typing import List, Optional

import numpy as np

from ..config import HookeJeevesConfig
from ..core import Array, EvaluatedPoint, ObjectiveFunction, PointLike, evaluate_point
from .base import make_rng, require_objective, swapped_seed

logger = logging.getLogger(__name__)


class HookeJeeves:
    """Pattern search over the objective's box.

    Steps are expressed as a fraction of each dimension's range. A run starts
    either from a given point or from a uniform random point drawn with the
    current seed; the seed advances by one per run in both cases.
    """

    name = HookeJeevesConfig.method

    def __init__(self, config: Optional[HookeJeevesConfig] = None) -> None:
        self.config = config if config is not None else HookeJeevesConfig()
        self.seed = self.config.run.seed
        self.elapsed = 0.0
        self.objective: Optional[ObjectiveFunction] = None
        self.step_trace: List[float] = []

    def set_objective(self, objective: ObjectiveFunction) -> None:
        self.objective = objective

    def run(self, start: PointLike | None = None) -> EvaluatedPoint:
        tic = time.perf_counter()
        objective = require_objective(self.objective)
        objective.new_run()
        lower, upper = objective.bounds()
        if start is None:
            rng = make_rng(self.seed)
            x0 = rng.uniform(lower, upper)
        else:
            x0 = np.asarray(start, dtype=float)
            if x0.shape != lower.shape:
                raise ValueError(f"start has shape {x0.shape}; expected {lower.shape}")
        self.seed += 1
        best = self._search(objective, np.clip(x0, lower, upper))
        self.elapsed = time.perf_counter() - tic
        return best

    def run_with_seed(self, seed: int) -> EvaluatedPoint:
        with swapped_seed(self, seed):
            return self.run()

    def _search(self, objective: ObjectiveFunction, x0: Array) -> EvaluatedPoint:
        conf = self.config
        budget = conf.run.maxevals_cycle
        lower, upper = objective.bounds()
        span = upper - lower

        step = conf.step
        delta = step * span
        self.step_trace = [step]
        current = evaluate_point(objective, x0)
        logger.debug("%d\t%g\t%g", objective.num_evals(), step, current.value)

        while objective.num_evals() < budget and step > conf.min_step:
            candidate = self._best_neighbor(objective, current.as_array(), delta, solid=True)
            while candidate.value < current.value and objective.num_evals() < budget:
                direction = candidate.as_array() - current.as_array()
                current = candidate
                advanced = np.clip(
                    current.as_array() + conf.acceleration * direction, lower, upper
                )
                candidate = self._best_neighbor(objective, advanced, delta, solid=False)
                logger.debug("%d\t%g\t%g", objective.num_evals(), step, current.value)
            step *= conf.contraction
            delta = step * span
            self.step_trace.append(step)
            logger.debug("step reduced to %g", step)

        return current

    @staticmethod
    def _best_neighbor(
        objective: ObjectiveFunction, point: Array, delta: Array, *, solid: bool
    ) -> EvaluatedPoint:
        """Best point among the axis neighbors ``point +/- delta``.

        With ``solid`` the center itself is evaluated and competes too.
        """
        lower, upper = objective.bounds()
        if solid:
            best = evaluate_point(objective, point)
        else:
            best = EvaluatedPoint(tuple(), math.inf)
        for i in range(point.size):
            for sign in (-1.0, 1.0):
                p = point.copy()
                p[i] = min(upper[i], max(lower[i], point[i] + sign * delta[i]))
                sol = evaluate_point(objective, p)
                if sol.value < best.value:
                    best = sol
        return best


__all__ = ["HookeJeeves"]

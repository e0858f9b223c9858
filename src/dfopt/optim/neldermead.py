"""Nelder-Mead downhill simplex method with bound clipping."""

from __future__ import annotations

import logging
import time
from typing import Iterable, Optional

from ..config import NelderMeadConfig
from ..core import EvaluatedPoint, ObjectiveFunction, PointLike
from .base import require_objective, swapped_seed
from .simplex import Simplex

logger = logging.getLogger(__name__)


class NelderMead:
    """Nelder-Mead search over the objective's box.

    Each call to :meth:`run` consumes the current seed (to draw or perturb the
    initial simplex) and advances it by one, so consecutive restarts explore
    different simplices while staying reproducible.
    """

    name = NelderMeadConfig.method

    def __init__(self, config: Optional[NelderMeadConfig] = None) -> None:
        self.config = config if config is not None else NelderMeadConfig()
        self.seed = self.config.run.seed
        self.elapsed = 0.0
        self.objective: Optional[ObjectiveFunction] = None
        self.simplex: Optional[Simplex] = None

    def set_objective(self, objective: ObjectiveFunction) -> None:
        self.objective = objective
        self.simplex = Simplex(objective, seed=self.seed)

    def _prepare(self) -> tuple[ObjectiveFunction, Simplex]:
        objective = require_objective(self.objective)
        if self.simplex is None or self.simplex.objective is not objective:
            self.simplex = Simplex(objective, seed=self.seed)
        objective.new_run()
        return objective, self.simplex

    def run(self, start: PointLike | None = None) -> EvaluatedPoint:
        """Run one cycle from a random simplex, or from a simplex around ``start``."""
        tic = time.perf_counter()
        _, simplex = self._prepare()
        simplex.reseed(self.seed)
        self.seed += 1
        if start is None:
            simplex.initialize_random()
        else:
            simplex.initialize_around(start)
        self._cycle(simplex)
        self.elapsed = time.perf_counter() - tic
        return simplex.get(0)

    def run_from_points(self, points: Iterable[PointLike]) -> EvaluatedPoint:
        """Run one cycle from an explicit initial simplex; the seed is left untouched."""
        tic = time.perf_counter()
        _, simplex = self._prepare()
        simplex.initialize_from_points(points)
        self._cycle(simplex)
        self.elapsed = time.perf_counter() - tic
        return simplex.get(0)

    def run_with_seed(self, seed: int) -> EvaluatedPoint:
        with swapped_seed(self, seed):
            return self.run()

    def _cycle(self, simplex: Simplex) -> None:
        conf = self.config
        objective = require_objective(self.objective)
        n = simplex.n
        budget = conf.run.maxevals_cycle
        logger.debug("%d\t%g\t%g", objective.num_evals(), simplex.spread(), simplex.get(0).value)

        while objective.num_evals() < budget and simplex.spread() > conf.tolerance:
            centroid = simplex.centroid()
            worst = simplex.get(n)
            worst_point = worst.as_array()
            best_value = simplex.get(0).value
            second_worst_value = simplex.get(n - 1).value

            x_r = simplex.point_at(centroid, simplex.vector(worst_point, centroid), conf.reflection)
            if x_r.value < second_worst_value:
                if x_r.value < best_value:
                    x_e = simplex.point_at(
                        centroid, simplex.vector(centroid, x_r.coordinates), conf.expansion
                    )
                    accepted = x_e if x_e.value < x_r.value else x_r
                    logger.debug("expand: %s (reflected %s)", x_e, x_r)
                else:
                    accepted = x_r
                    logger.debug("reflect: %s", x_r)
                simplex.add_point(accepted)
            else:
                if x_r.value < worst.value:
                    x_c = simplex.point_at(
                        centroid, simplex.vector(centroid, x_r.coordinates), conf.contraction
                    )
                    improved = x_c.value < x_r.value
                    logger.debug("outside contraction: %s", x_c)
                else:
                    x_c = simplex.point_at(
                        centroid, simplex.vector(centroid, worst_point), conf.contraction
                    )
                    improved = x_c.value < worst.value
                    logger.debug("inside contraction: %s", x_c)
                if improved:
                    simplex.add_point(x_c)
                else:
                    logger.debug("shrink by %g", conf.shrink)
                    simplex.shrink(conf.shrink)
            logger.debug(
                "%d\t%g\t%g", objective.num_evals(), simplex.spread(), simplex.get(0).value
            )


__all__ = ["NelderMead"]

"""Shared surface of the search methods and the seed-swap helper."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Protocol

import numpy as np

from ..config import MethodConfig
from ..core import EvaluatedPoint, ObjectiveFunction, PointLike

_SEED_MASK = 0xFFFFFFFFFFFFFFFF


class SearchMethod(Protocol):
    name: str
    config: MethodConfig
    seed: int
    elapsed: float

    def set_objective(self, objective: ObjectiveFunction) -> None: ...

    def run(self, start: PointLike | None = None) -> EvaluatedPoint: ...

    def run_with_seed(self, seed: int) -> EvaluatedPoint: ...


class Seeded(Protocol):
    seed: int


@contextmanager
def swapped_seed(component: Seeded, seed: int) -> Iterator[None]:
    """Temporarily replace ``component.seed``; the previous value is restored on exit."""

    saved = component.seed
    component.seed = int(seed)
    try:
        yield
    finally:
        component.seed = saved


def make_rng(seed: int) -> np.random.Generator:
    """Return a generator for any integer seed; negative seeds wrap into 64 bits."""
    return np.random.default_rng(int(seed) & _SEED_MASK)


def require_objective(objective: ObjectiveFunction | None) -> ObjectiveFunction:
    if objective is None:
        raise RuntimeError("objective function not set; call set_objective() first")
    return objective


__all__ = ["SearchMethod", "Seeded", "make_rng", "require_objective", "swapped_seed"]

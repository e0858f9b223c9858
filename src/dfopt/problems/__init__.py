from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from ..config import ConfigurationError
from .benchmarks import (
    Ackley,
    Griewank,
    Rastrigin,
    Rosenbrock,
    Sphere,
    SymmetricBoxObjective,
)


@dataclass(frozen=True)
class ProblemSpec:
    """Registry entry for a benchmark objective."""

    name: str
    factory: Callable[[int, float], SymmetricBoxObjective]
    description: str = ""

    def create(self, dimension: int, range: float) -> SymmetricBoxObjective:
        return self.factory(int(dimension), float(range))


_SPECS = (
    ProblemSpec("sphere", Sphere, "Sum of squares; unimodal, separable."),
    ProblemSpec("rastrigin", Rastrigin, "Sphere plus cosine ripples; highly multimodal."),
    ProblemSpec("rosenbrock", Rosenbrock, "Curved narrow valley; minimum at (1, ..., 1)."),
    ProblemSpec("griewank", Griewank, "Product of cosines over a wide bowl."),
    ProblemSpec("ackley", Ackley, "Nearly flat outer region with a deep central funnel."),
)

_REGISTRY: Dict[str, ProblemSpec] = {spec.name: spec for spec in _SPECS}


def get_spec(problem: str) -> Optional[ProblemSpec]:
    return _REGISTRY.get(problem.lower().strip())


def list_specs() -> Iterable[ProblemSpec]:
    yield from _SPECS


def create_problem(problem: str, dimension: int, range: float) -> SymmetricBoxObjective:
    """Instantiate a benchmark on ``[-range, range]^dimension``."""

    spec = get_spec(problem)
    if spec is None:
        raise ConfigurationError(f"Unknown problem {problem!r}")
    try:
        return spec.create(dimension, range)
    except ValueError as exc:
        raise ConfigurationError(f"invalid domain for {spec.name}: {exc}") from None


__all__ = [
    "Ackley",
    "Griewank",
    "ProblemSpec",
    "Rastrigin",
    "Rosenbrock",
    "Sphere",
    "SymmetricBoxObjective",
    "create_problem",
    "get_spec",
    "list_specs",
]

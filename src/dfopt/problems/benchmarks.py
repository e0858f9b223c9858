"""Classic continuous benchmark functions on a symmetric box ``[-range, range]^n``.

All functions have their global minimum value 0 (at the origin, except
Rosenbrock whose minimum sits at ``(1, ..., 1)``).
"""

from __future__ import annotations

import math

import numpy as np

from ..core import Array, ObjectiveFunction


class SymmetricBoxObjective(ObjectiveFunction):
    """Objective defined on ``[-range, range]`` along every dimension."""

    def __init__(self, dimension: int, range: float) -> None:
        super().__init__()
        if dimension <= 0:
            raise ValueError("dimension must be positive")
        if range <= 0:
            raise ValueError("range must be positive")
        self.dimension = int(dimension)
        self.range = float(range)

    def num_variables(self) -> int:
        return self.dimension

    def min_value(self, i: int) -> float:
        return -self.range

    def max_value(self, i: int) -> float:
        return self.range

    def __repr__(self) -> str:
        return f"{type(self).__name__}(dimension={self.dimension}, range={self.range})"


class Sphere(SymmetricBoxObjective):
    def _evaluate(self, x: Array) -> float:
        return float(np.sum(x * x))


class Rastrigin(SymmetricBoxObjective):
    A = 10.0

    def _evaluate(self, x: Array) -> float:
        return float(self.A * x.size + np.sum(x * x - self.A * np.cos(2.0 * math.pi * x)))


class Rosenbrock(SymmetricBoxObjective):
    A = 100.0

    def _evaluate(self, x: Array) -> float:
        head, tail = x[:-1], x[1:]
        return float(np.sum(self.A * (tail - head * head) ** 2 + (1.0 - head) ** 2))


class Griewank(SymmetricBoxObjective):
    A = 1.0 / 4000.0

    def _evaluate(self, x: Array) -> float:
        idx = np.sqrt(np.arange(1, x.size + 1, dtype=float))
        return float(1.0 + self.A * np.sum(x * x) - np.prod(np.cos(x / idx)))


class Ackley(SymmetricBoxObjective):
    A = 20.0
    B = 0.2
    C = 2.0 * math.pi

    def _evaluate(self, x: Array) -> float:
        n = x.size
        s1 = float(np.sum(x * x))
        s2 = float(np.sum(np.cos(self.C * x)))
        return -self.A * math.exp(-self.B * math.sqrt(s1 / n)) - math.exp(s2 / n) + self.A + math.e


__all__ = [
    "Ackley",
    "Griewank",
    "Rastrigin",
    "Rosenbrock",
    "Sphere",
    "SymmetricBoxObjective",
]

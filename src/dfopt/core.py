"""Core interfaces shared by the derivative-free search methods.

Provides the evaluated point record, the objective-function contract (with its
evaluation counter) and a few bound helpers. Every method in ``dfopt.optim``
talks to the objective exclusively through :class:`ObjectiveFunction`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

Array = NDArray[np.float64]
PointLike = Sequence[float] | NDArray[np.floating[Any]]


@dataclass(frozen=True)
class EvaluatedPoint:
    """A point of the search space together with its objective value.

    Points compare by value only (lower is better). Sorting with the builtin
    stable sort keeps first-seen order among equal values.
    """

    coordinates: Tuple[float, ...]
    value: float

    @classmethod
    def of(cls, point: PointLike, value: float) -> "EvaluatedPoint":
        return cls(tuple(float(v) for v in point), float(value))

    def as_array(self) -> Array:
        return np.asarray(self.coordinates, dtype=float)

    def __lt__(self, other: "EvaluatedPoint") -> bool:
        return self.value < other.value

    def __len__(self) -> int:
        return len(self.coordinates)

    def __str__(self) -> str:
        return f"{{{list(self.coordinates)}, {self.value}}}"


class ObjectiveFunction(ABC):
    """Bounded black-box objective with an evaluation counter.

    Subclasses implement :meth:`num_variables`, :meth:`min_value`,
    :meth:`max_value` and :meth:`_evaluate`. The counter is reset by
    :meth:`new_run` and incremented on every :meth:`evaluate` call.
    """

    def __init__(self) -> None:
        self._evals = 0

    @abstractmethod
    def num_variables(self) -> int: ...

    @abstractmethod
    def min_value(self, i: int) -> float: ...

    @abstractmethod
    def max_value(self, i: int) -> float: ...

    @abstractmethod
    def _evaluate(self, x: Array) -> float: ...

    def evaluate(self, point: PointLike) -> float:
        x = np.asarray(point, dtype=float)
        n = self.num_variables()
        if x.shape != (n,):
            raise ValueError(f"point has shape {x.shape}; expected ({n},)")
        self._evals += 1
        return float(self._evaluate(x))

    def num_evals(self) -> int:
        """Number of evaluations since the last :meth:`new_run`."""
        return self._evals

    def new_run(self) -> None:
        self._evals = 0

    def bounds(self) -> tuple[Array, Array]:
        n = self.num_variables()
        lower = np.asarray([self.min_value(i) for i in range(n)], dtype=float)
        upper = np.asarray([self.max_value(i) for i in range(n)], dtype=float)
        return lower, upper

    def ranges(self) -> Array:
        lower, upper = self.bounds()
        return upper - lower


class CallableObjective(ObjectiveFunction):
    """Adapt a plain callable and explicit box bounds to :class:`ObjectiveFunction`."""

    def __init__(
        self,
        fun: Callable[[Array], float],
        lower: PointLike,
        upper: PointLike,
    ) -> None:
        super().__init__()
        lo = np.asarray(lower, dtype=float)
        hi = np.asarray(upper, dtype=float)
        if lo.ndim != 1 or lo.shape != hi.shape:
            raise ValueError("lower and upper bounds must be 1-D and of equal length")
        if np.any(lo > hi):
            raise ValueError("lower bounds must not exceed upper bounds")
        self._fun = fun
        self._lower = lo
        self._upper = hi

    def num_variables(self) -> int:
        return int(self._lower.size)

    def min_value(self, i: int) -> float:
        return float(self._lower[i])

    def max_value(self, i: int) -> float:
        return float(self._upper[i])

    def _evaluate(self, x: Array) -> float:
        return float(self._fun(x))


def clamp(x: PointLike, objective: ObjectiveFunction) -> Array:
    """Clip every coordinate of ``x`` into the objective's box."""
    lower, upper = objective.bounds()
    return np.clip(np.asarray(x, dtype=float), lower, upper)


def evaluate_point(objective: ObjectiveFunction, point: PointLike) -> EvaluatedPoint:
    x = np.asarray(point, dtype=float)
    return EvaluatedPoint.of(x, objective.evaluate(x))


__all__ = [
    "Array",
    "CallableObjective",
    "EvaluatedPoint",
    "ObjectiveFunction",
    "PointLike",
    "clamp",
    "evaluate_point",
]

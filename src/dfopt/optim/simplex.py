"""Working simplex of the Nelder-Mead method.

The simplex keeps ``n + 1`` evaluated vertices sorted by value (best first)
and the centroid of the ``n`` best ones. Every candidate point it generates is
clipped to the objective's bounds before evaluation.
"""

from __future__ import annotations

import math
from typing import Iterable, Iterator, List, Optional, Sequence

import numpy as np

from ..core import Array, EvaluatedPoint, ObjectiveFunction, PointLike, evaluate_point
from .base import make_rng

SIDE = 0.1


class Simplex:
    def __init__(self, objective: ObjectiveFunction, seed: int = 1) -> None:
        self.objective = objective
        self.n = objective.num_variables()
        self._lower, self._upper = objective.bounds()
        self._points: List[EvaluatedPoint] = []
        self._centroid: Array = np.zeros(self.n, dtype=float)
        self._rng = make_rng(seed)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    def reseed(self, seed: int) -> None:
        self._rng = make_rng(seed)

    def clear(self) -> None:
        self._points = []
        self._centroid = np.zeros(self.n, dtype=float)

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[EvaluatedPoint]:
        return iter(list(self._points))

    @property
    def full(self) -> bool:
        return len(self._points) > self.n

    def get(self, rank: int) -> EvaluatedPoint:
        """Return the ``rank``-th best vertex (0 is the best, ``n`` the worst)."""
        if not 0 <= rank < len(self._points):
            raise IndexError(f"rank {rank} out of range for {len(self._points)} vertices")
        return self._points[rank]

    def centroid(self) -> Array:
        return self._centroid.copy()

    def values(self) -> Array:
        return np.asarray([p.value for p in self._points], dtype=float)

    def spread(self) -> float:
        """Population standard deviation of the vertex values over ``|mean|``.

        Falls back to the plain standard deviation when the mean is exactly
        zero.
        """
        vals = self.values()
        if vals.size == 0:
            return math.inf
        mean = float(np.mean(vals))
        std = float(np.std(vals))
        if mean != 0.0:
            return std / abs(mean)
        return std

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------
    def initialize_random(self) -> None:
        """Fill the simplex with uniform random vertices drawn from its own stream."""
        self.clear()
        for _ in range(self.n + 1):
            self.add_point(self._rng.uniform(self._lower, self._upper))

    def initialize_around(
        self,
        point: PointLike,
        offsets: Optional[Sequence[float]] = None,
        *,
        side: float = SIDE,
    ) -> None:
        """Build the simplex from ``point`` plus one axis-aligned offset per dimension.

        Without explicit ``offsets`` each dimension is shifted by ``side``
        times its range.
        """
        x0 = self._check_vector(point, "point")
        if offsets is None:
            deltas = side * (self._upper - self._lower)
        else:
            deltas = self._check_vector(offsets, "offsets")
        self.clear()
        self.add_point(x0)
        for i in range(self.n):
            p = x0.copy()
            p[i] = min(self._upper[i], max(self._lower[i], x0[i] + deltas[i]))
            self.add_point(p)

    def initialize_from_points(self, points: Iterable[PointLike]) -> None:
        """Use exactly ``n + 1`` given points as the simplex, without randomness."""
        pts = [self._check_vector(p, "point") for p in points]
        if len(pts) != self.n + 1:
            raise ValueError(
                f"expected {self.n + 1} points for a {self.n}-D simplex, got {len(pts)}"
            )
        self.clear()
        for p in pts:
            self.add_point(p)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def add_point(self, point: EvaluatedPoint | PointLike) -> EvaluatedPoint:
        """Add a vertex, replacing the current worst one when the simplex is full."""
        if isinstance(point, EvaluatedPoint):
            sol = point
            if len(sol) != self.n:
                raise ValueError(f"point has {len(sol)} coordinates; expected {self.n}")
        else:
            sol = evaluate_point(self.objective, self._check_vector(point, "point"))
        if self.full:
            self._points[self.n] = sol
        else:
            self._points.append(sol)
        self._update()
        return sol

    def shrink(self, sigma: float) -> None:
        """Pull every vertex except the best toward the best by factor ``sigma``."""
        best = self._points[0].as_array()
        for i in range(1, len(self._points)):
            direction = self.vector(best, self._points[i].as_array())
            self._points[i] = self.point_at(best, direction, sigma)
        self._update()

    def _update(self) -> None:
        if not self.full:
            return
        self._points.sort(key=lambda p: p.value)
        coords = np.asarray([p.coordinates for p in self._points[: self.n]], dtype=float)
        self._centroid = coords.mean(axis=0)

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    def vector(self, origin: PointLike, dest: PointLike) -> Array:
        """Return ``dest - origin``."""
        return self._check_vector(dest, "dest") - self._check_vector(origin, "origin")

    def point_at(self, origin: PointLike, vector: PointLike, k: float) -> EvaluatedPoint:
        """Evaluate ``origin + k * vector`` clipped to the bounds."""
        o = self._check_vector(origin, "origin")
        v = self._check_vector(vector, "vector")
        x = np.clip(o + k * v, self._lower, self._upper)
        return evaluate_point(self.objective, x)

    def _check_vector(self, v: PointLike, what: str) -> Array:
        arr = np.asarray(v, dtype=float)
        if arr.shape != (self.n,):
            raise ValueError(f"{what} has shape {arr.shape}; expected ({self.n},)")
        return arr

    def __str__(self) -> str:
        rows = "\n".join(f"\t{p}" for p in self._points)
        return f"{{\npoints:\n{rows}\ncentroid: {list(self._centroid)}\n}}"


__all__ = ["SIDE", "Simplex"]

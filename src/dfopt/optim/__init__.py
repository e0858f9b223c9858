"""Derivative-free search methods and the multi-start harness.

Example
-------
>>> from dfopt.optim import NelderMead
>>> from dfopt.problems import Sphere
>>> nm = NelderMead()
>>> nm.set_objective(Sphere(2, 5.0))
>>> nm.run().value < 1e-3
True
"""

from __future__ import annotations

from .base import SearchMethod, swapped_seed
from .factory import Method, create_from_file, create_method
from .hookejeeves import HookeJeeves
from .iterated import IteratedSearch
from .neldermead import NelderMead
from .simplex import Simplex

__all__ = [
    "HookeJeeves",
    "IteratedSearch",
    "Method",
    "NelderMead",
    "SearchMethod",
    "Simplex",
    "create_from_file",
    "create_method",
    "swapped_seed",
]

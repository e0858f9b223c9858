from __future__ import annotations

import sys
from pathlib import Path
from typing import List

import numpy as np
import pytest

# Ensure src/ is on sys.path when running tests without installation.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if SRC_PATH.is_dir() and str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from dfopt.core import CallableObjective  # noqa: E402
from dfopt.problems import Sphere  # noqa: E402


class RecordingObjective(CallableObjective):
    """Callable objective that keeps every evaluated point and value."""

    def __init__(self, fun, lower, upper) -> None:  # type: ignore[no-untyped-def]
        super().__init__(fun, lower, upper)
        self.history: List[tuple[float, ...]] = []
        self.values: List[float] = []

    def _evaluate(self, x):  # type: ignore[no-untyped-def]
        value = super()._evaluate(x)
        self.history.append(tuple(float(v) for v in x))
        self.values.append(value)
        return value


@pytest.fixture
def sphere2() -> Sphere:
    return Sphere(2, 5.0)


def _recording_sphere(dimension: int = 2, range_: float = 5.0) -> RecordingObjective:
    return RecordingObjective(
        lambda x: float(np.sum(x * x)), [-range_] * dimension, [range_] * dimension
    )


@pytest.fixture
def recording_sphere() -> RecordingObjective:
    return _recording_sphere()


@pytest.fixture
def make_recording_sphere():  # type: ignore[no-untyped-def]
    return _recording_sphere


@pytest.fixture
def shifted_box() -> RecordingObjective:
    # Asymmetric bounds with the unconstrained minimum outside the box.
    lower = [-1.0, 0.5, 2.0]
    upper = [3.0, 1.5, 2.5]
    target = np.asarray([10.0, -4.0, 0.0])
    return RecordingObjective(lambda x: float(np.sum((x - target) ** 2)), lower, upper)

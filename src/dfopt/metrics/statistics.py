"""Per-run convergence statistics for multi-start searches.

A run is a sequence of ``(evals, best)`` samples plus the improvement records
(evaluation count and solution each time the best value strictly dropped).
Closed runs are immutable and indexed by run number.

Example
-------
>>> from dfopt.core import EvaluatedPoint
>>> rec = StatisticsRecorder()
>>> rec.new_run()
>>> rec.take_stats(10, EvaluatedPoint((1.0,), 1.0))
>>> rec.take_stats(20, EvaluatedPoint((1.0,), 1.0))
>>> rec.take_stats(30, EvaluatedPoint((0.5,), 0.25))
>>> rec.close_run()
>>> [s.evals for s in rec.runs[0].samples], [r.evals for r in rec.runs[0].improvements]
([10, 20, 30], [10, 30])
"""

from __future__ import annotations

import csv
import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..core import EvaluatedPoint


@dataclass(frozen=True)
class StatsEntry:
    evals: int
    best: float


@dataclass(frozen=True)
class ImprovementRecord:
    evals: int
    solution: EvaluatedPoint


@dataclass(frozen=True)
class RunStatistics:
    """Closed record of one run."""

    samples: Tuple[StatsEntry, ...]
    improvements: Tuple[ImprovementRecord, ...]
    time: float

    @property
    def best(self) -> EvaluatedPoint:
        if not self.improvements:
            raise ValueError("run has no samples")
        return self.improvements[-1].solution

    def to_dict(self, index: int) -> Dict[str, Any]:
        return {
            "run": index,
            "time": self.time,
            "rundata": [
                {
                    "idata": {
                        "evals": [s.evals for s in self.samples],
                        "best": [s.best for s in self.samples],
                    },
                    "isols": {
                        "evals": [r.evals for r in self.improvements],
                        "fitness": [r.solution.value for r in self.improvements],
                        "genome": [list(r.solution.coordinates) for r in self.improvements],
                    },
                }
            ],
        }


class StatisticsRecorder:
    """Collects :class:`RunStatistics` for a batch of runs."""

    def __init__(self) -> None:
        self.clear()

    def clear(self) -> None:
        self._runs: List[RunStatistics] = []
        self._samples: Optional[List[StatsEntry]] = None
        self._improvements: Optional[List[ImprovementRecord]] = None
        self._tic = 0.0

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------
    @property
    def run_active(self) -> bool:
        return self._samples is not None

    def new_run(self) -> None:
        """Open a new run (closing a still-open one) and start its timer."""

        if self.run_active:
            self.close_run()
        self._samples = []
        self._improvements = []
        self._tic = time.perf_counter()

    def take_stats(self, evals: int, solution: EvaluatedPoint) -> None:
        if self._samples is None or self._improvements is None:
            raise RuntimeError("no active run; call new_run() first")
        if self._samples and evals < self._samples[-1].evals:
            raise ValueError(
                f"evaluation count went backwards: {evals} < {self._samples[-1].evals}"
            )
        self._samples.append(StatsEntry(int(evals), float(solution.value)))
        if not self._improvements or solution.value < self._improvements[-1].solution.value:
            self._improvements.append(ImprovementRecord(int(evals), solution))

    def abort_run(self) -> None:
        """Discard the open run without recording it."""

        self._samples = None
        self._improvements = None

    def close_run(self) -> None:
        if self._samples is not None and self._improvements is not None:
            elapsed = time.perf_counter() - self._tic
            self._runs.append(
                RunStatistics(tuple(self._samples), tuple(self._improvements), elapsed)
            )
        self._samples = None
        self._improvements = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def runs(self) -> Tuple[RunStatistics, ...]:
        return tuple(self._runs)

    def __len__(self) -> int:
        return len(self._runs)

    def time(self, i: int) -> float:
        return self._runs[i].time

    def best(self, i: int) -> EvaluatedPoint:
        return self._runs[i].best

    def best_overall(self) -> EvaluatedPoint:
        if not self._runs:
            raise ValueError("no closed runs")
        best = self.best(0)
        for j in range(1, len(self._runs)):
            cand = self.best(j)
            if cand.value < best.value:
                best = cand
        return best

    def current_best(self) -> EvaluatedPoint:
        if not self._improvements:
            raise RuntimeError("no samples in the active run")
        return self._improvements[-1].solution

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def to_records(self) -> List[Dict[str, Any]]:
        return [run.to_dict(i) for i, run in enumerate(self._runs)]

    def write_json(self, path: Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_records()))
        return path

    def write_csv(self, path: Path) -> Path:
        """Write the raw samples as ``run,evals,best`` rows."""

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", newline="") as f:
            w = csv.DictWriter(f, fieldnames=["run", "evals", "best"])
            w.writeheader()
            for i, run in enumerate(self._runs):
                for s in run.samples:
                    w.writerow({"run": i, "evals": s.evals, "best": s.best})
        return path

    def __str__(self) -> str:
        lines: List[str] = []
        for i, run in enumerate(self._runs):
            lines.append(f"Run {i}\n=======")
            lines.append("#evals\tbest\n------\t----")
            lines.extend(f"{s.evals}\t{s.best}" for s in run.samples)
        return "\n".join(lines)


__all__ = [
    "ImprovementRecord",
    "RunStatistics",
    "StatisticsRecorder",
    "StatsEntry",
]

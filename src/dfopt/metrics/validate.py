from __future__ import annotations

import json
import math
import sys
from pathlib import Path
from typing import Any, Iterable, Mapping


class StatisticsError(RuntimeError):
    """Raised when exported statistics violate their ordering invariants."""


def _numbers(run: int, name: str, values: Any) -> list[float]:
    if not isinstance(values, list):
        raise StatisticsError(f"run {run}: {name} must be a list")
    out: list[float] = []
    for v in values:
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise StatisticsError(f"run {run}: {name} has non-numeric entry {v!r}")
        out.append(float(v))
    return out


def _check_run(idx: int, record: Mapping[str, Any]) -> None:
    if record.get("run") != idx:
        raise StatisticsError(f"record {idx} has run={record.get('run')!r}; expected {idx}")
    elapsed = record.get("time")
    if not isinstance(elapsed, (int, float)) or not math.isfinite(elapsed) or elapsed < 0:
        raise StatisticsError(f"run {idx}: invalid time={elapsed!r}")
    rundata = record.get("rundata")
    if not isinstance(rundata, list) or not rundata:
        raise StatisticsError(f"run {idx}: missing rundata")
    for block in rundata:
        if not isinstance(block, Mapping):
            raise StatisticsError(f"run {idx}: rundata entries must be objects")
        idata = block.get("idata", {})
        isols = block.get("isols", {})
        evals = _numbers(idx, "idata.evals", idata.get("evals"))
        best = _numbers(idx, "idata.best", idata.get("best"))
        if len(evals) != len(best):
            raise StatisticsError(f"run {idx}: idata.evals and idata.best differ in length")
        if any(b < a for a, b in zip(evals, evals[1:])):
            raise StatisticsError(f"run {idx}: idata.evals is not non-decreasing")
        if any(b > a for a, b in zip(best, best[1:])):
            raise StatisticsError(f"run {idx}: idata.best is not non-increasing")
        sol_evals = _numbers(idx, "isols.evals", isols.get("evals"))
        fitness = _numbers(idx, "isols.fitness", isols.get("fitness"))
        genome = isols.get("genome")
        if not isinstance(genome, list) or not (len(sol_evals) == len(fitness) == len(genome)):
            raise StatisticsError(f"run {idx}: isols series differ in length")
        if any(b >= a for a, b in zip(fitness, fitness[1:])):
            raise StatisticsError(f"run {idx}: isols.fitness is not strictly decreasing")
        if evals and fitness and fitness[-1] != best[-1]:
            raise StatisticsError(f"run {idx}: last improvement does not match final best")


def ensure_monotone_records(records: Iterable[Mapping[str, Any]]) -> int:
    """Check every exported run record; return the number of runs."""

    count = 0
    for idx, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise StatisticsError(f"record {idx} is not an object")
        _check_run(idx, record)
        count += 1
    if count == 0:
        raise StatisticsError("statistics file holds no runs")
    return count


def ensure_stats_file(path: Path) -> int:
    """Read ``path`` (JSON list of run records) and ensure invariants hold."""

    data = json.loads(Path(path).read_text())
    if not isinstance(data, list):
        raise StatisticsError("statistics file must contain a JSON list")
    return ensure_monotone_records(data)


def _main(argv: list[str]) -> int:
    if not argv:
        print("Usage: python -m dfopt.metrics.validate <method-stats.json>", file=sys.stderr)
        return 2
    path = Path(argv[0])
    try:
        count = ensure_stats_file(path)
    except FileNotFoundError:
        print(f"statistics file not found: {path}", file=sys.stderr)
        return 2
    except (StatisticsError, json.JSONDecodeError) as exc:
        print(f"statistics check failed: {exc}", file=sys.stderr)
        return 1
    print(f"statistics OK ({count} runs)")
    return 0


if __name__ == "__main__":  # pragma: no cover - exercised via CLI tests
    raise SystemExit(_main(sys.argv[1:]))

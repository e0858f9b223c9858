from __future__ import annotations

from .statistics import ImprovementRecord, RunStatistics, StatisticsRecorder, StatsEntry
from .validate import StatisticsError, ensure_monotone_records, ensure_stats_file

__all__ = [
    "ImprovementRecord",
    "RunStatistics",
    "StatisticsError",
    "StatisticsRecorder",
    "StatsEntry",
    "ensure_monotone_records",
    "ensure_stats_file",
]

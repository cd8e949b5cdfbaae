"""Benchmark harness: timed trials and latency reporting."""

from .runner import Operation, SampleSet, TrialResult, TrialRunner, run_trials
from .reporter import (
    PERCENTILES,
    Report,
    build_report,
    format_report,
    percentile_index,
    render_report,
    save_report,
)

__all__ = [
    "Operation",
    "SampleSet",
    "TrialResult",
    "TrialRunner",
    "run_trials",
    "PERCENTILES",
    "Report",
    "build_report",
    "format_report",
    "percentile_index",
    "render_report",
    "save_report",
]

"""Latency reporting: mean and nearest-rank percentiles.

Percentiles are picked from the sorted samples by rank, never
interpolated. For ``n`` samples the ``p`` percentile is the sample at
``floor(p * n) - 1``, clamped to ``[0, n - 1]``.
"""

from __future__ import annotations

import json
import math
import statistics
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, TextIO, Tuple, Union

from ..core.config import FailurePolicy
from ..core.errors import ConfigurationError, EmptySampleError
from ..core.logging import get_harness_logger
from .runner import SampleSet

logger = get_harness_logger("reporter")

PERCENTILES: Tuple[float, ...] = (0.50, 0.66, 0.75, 0.80, 0.90, 0.95, 0.98, 0.99, 1.00)


def percentile_index(percentile: float, count: int) -> int:
    """Index of the nearest-rank ``percentile`` in ``count`` sorted samples."""
    if count <= 0:
        raise EmptySampleError("cannot compute a percentile of zero samples")
    if not 0.0 < percentile <= 1.0:
        raise ConfigurationError(f"percentile must be in (0, 1], got {percentile}")

    # 0.66 * 200 is 131.99999999999997 in binary floating point
    rank = math.floor(round(percentile * count, 9))
    return min(max(rank - 1, 0), count - 1)


@dataclass(frozen=True)
class Report:
    """Mean and percentile latencies derived from a sample set."""
    mean_nanos: float
    percentiles: Tuple[Tuple[float, int], ...]
    sample_count: int
    total_trials: int
    failed_trials: int
    failure_policy: FailurePolicy = FailurePolicy.INCLUDE

    def percentile(self, p: float) -> int:
        for fraction, value in self.percentiles:
            if fraction == p:
                return value
        raise KeyError(p)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mean_ns": self.mean_nanos,
            "percentiles": [
                {"percentile": fraction, "latency_ns": value}
                for fraction, value in self.percentiles
            ],
            "sample_count": self.sample_count,
            "total_trials": self.total_trials,
            "failed_trials": self.failed_trials,
            "failure_policy": self.failure_policy.value,
        }


def build_report(samples: SampleSet, failure_policy: FailurePolicy = FailurePolicy.INCLUDE) -> Report:
    """Reduce ``samples`` to a Report.

    Raises:
        EmptySampleError: if the policy leaves no durations to report on.
    """
    durations = sorted(samples.durations(failure_policy))
    count = len(durations)

    if count == 0:
        raise EmptySampleError(
            f"no usable samples: {len(samples)} trials, {samples.failed} failed, "
            f"failure policy '{failure_policy.value}'",
            total_trials=len(samples),
            failed_trials=samples.failed,
        )

    mean = statistics.fmean(durations)
    percentiles = tuple((p, durations[percentile_index(p, count)]) for p in PERCENTILES)

    report = Report(
        mean_nanos=mean,
        percentiles=percentiles,
        sample_count=count,
        total_trials=len(samples),
        failed_trials=samples.failed,
        failure_policy=failure_policy,
    )
    logger.info(
        "Report built",
        samples=count,
        failed=samples.failed,
        failure_policy=failure_policy.value,
    )
    return report


def _format_fraction(fraction: float) -> str:
    return f"{fraction * 100:g}"


def format_report(report: Report) -> str:
    """Render ``report`` as the plain-text latency summary."""
    lines = [f"took mean {report.mean_nanos}ns"]
    for fraction, value in report.percentiles:
        lines.append(f"percentile {_format_fraction(fraction)}%: {value}ns")
    return "\n".join(lines) + "\n"


def render_report(report: Report, stream: Optional[TextIO] = None) -> None:
    """Write the latency summary to ``stream`` (stdout by default)."""
    stream = stream or sys.stdout
    stream.write(format_report(report))
    stream.flush()


def save_report(report: Report, filepath: Union[str, Path]) -> None:
    """Save the report as JSON."""
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(report.to_dict(), f, indent=2)
    logger.info("Report saved", path=str(path))

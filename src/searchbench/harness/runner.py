"""Sequential timed-trial loop.

Each trial invokes the operation under test exactly once, bracketed by
``time.perf_counter_ns()`` readings. Trials never overlap: a trial that
ran concurrently with a sibling would include queueing time in its
sample.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Optional, Protocol, Sequence

from ..core.config import DEFAULT_RUNS, FailurePolicy
from ..core.errors import ConfigurationError
from ..core.logging import get_harness_logger, log_trial_metric

logger = get_harness_logger("runner")


class Operation(Protocol):
    """A unit of work that either returns or raises."""

    def __call__(self) -> Any: ...


@dataclass(frozen=True)
class TrialResult:
    """Single trial measurement."""
    duration_nanos: int
    succeeded: bool
    error: Optional[str] = None

    def __post_init__(self):
        if self.duration_nanos < 0:
            raise ValueError(f"duration_nanos must be non-negative, got {self.duration_nanos}")


class SampleSet:
    """Trial results of one run, in execution order."""

    def __init__(self, results: Sequence[TrialResult]):
        self._results = tuple(results)

    @property
    def results(self) -> Sequence[TrialResult]:
        return self._results

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self._results if r.succeeded)

    @property
    def failed(self) -> int:
        return len(self._results) - self.succeeded

    def durations(self, failure_policy: FailurePolicy = FailurePolicy.INCLUDE) -> List[int]:
        """Durations selected by ``failure_policy``, in execution order."""
        if failure_policy == FailurePolicy.EXCLUDE:
            return [r.duration_nanos for r in self._results if r.succeeded]
        return [r.duration_nanos for r in self._results]

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[TrialResult]:
        return iter(self._results)

    def __repr__(self) -> str:
        return f"SampleSet(trials={len(self)}, failed={self.failed})"


def _validate_runs(runs: Any) -> int:
    # bool is an int subclass; True is not a run count
    if isinstance(runs, bool) or not isinstance(runs, int):
        raise ConfigurationError(f"run count must be an integer, got {runs!r}")
    if runs <= 0:
        raise ConfigurationError(f"run count must be a positive integer, got {runs}")
    return runs


class TrialRunner:
    """Runs ``runs`` sequential trials of ``operation``."""

    def __init__(self,
                 operation: Operation,
                 runs: int = DEFAULT_RUNS,
                 clock: Callable[[], int] = time.perf_counter_ns):
        self.operation = operation
        self.runs = _validate_runs(runs)
        self.clock = clock

    def run(self) -> SampleSet:
        """Execute all trials and return their results.

        An ``Exception`` from the operation marks that trial failed and the
        run continues. ``KeyboardInterrupt`` propagates.
        """
        results: List[TrialResult] = []
        logger.info("Starting trials", runs=self.runs)

        for trial in range(1, self.runs + 1):
            error: Optional[str] = None
            start = self.clock()
            try:
                self.operation()
            except Exception as e:
                end = self.clock()
                error = f"{type(e).__name__}: {e}"
            else:
                end = self.clock()

            result = TrialResult(
                duration_nanos=max(0, end - start),
                succeeded=error is None,
                error=error,
            )
            results.append(result)
            log_trial_metric(logger, trial, result.duration_nanos, result.succeeded, error=error)

        samples = SampleSet(results)
        logger.info("Trials finished", runs=self.runs, failed=samples.failed)
        return samples


def run_trials(operation: Operation, runs: int = DEFAULT_RUNS) -> SampleSet:
    """Run ``runs`` trials of ``operation`` and return the sample set."""
    return TrialRunner(operation, runs).run()

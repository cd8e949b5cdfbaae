"""Exception types raised by the benchmark harness."""

from __future__ import annotations


class BenchmarkError(Exception):
    """Base class for harness-level errors."""


class ConfigurationError(BenchmarkError):
    """Invalid run configuration, detected before any trial executes."""


class EmptySampleError(BenchmarkError):
    """Reporting was attempted with no usable samples."""

    def __init__(self, message: str, total_trials: int = 0, failed_trials: int = 0):
        super().__init__(message)
        self.total_trials = total_trials
        self.failed_trials = failed_trials


class NoSuccessfulTrialsError(EmptySampleError):
    """Every trial of the run failed, so no latency was actually measured."""

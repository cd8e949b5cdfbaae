"""Tests for the sequential trial runner."""

import pytest
from unittest.mock import MagicMock

from searchbench.core.config import FailurePolicy
from searchbench.core.errors import ConfigurationError
from searchbench.harness import SampleSet, TrialResult, TrialRunner, run_trials


class StepClock:
    """Fake nanosecond clock: each trial takes the next scripted duration."""

    def __init__(self, durations):
        self.durations = list(durations)
        self.now = 1_000
        self.readings = 0

    def __call__(self):
        if self.readings % 2 == 1:
            self.now += self.durations[self.readings // 2]
        self.readings += 1
        return self.now


class TestTrialRunner:
    """Test the timed-trial loop."""

    def test_records_one_result_per_run(self):
        """Every trial produces exactly one successful result."""
        operation = MagicMock(return_value={"hits": []})
        clock = StepClock([500] * 7)

        samples = TrialRunner(operation, runs=7, clock=clock).run()

        assert len(samples) == 7
        assert operation.call_count == 7
        assert all(r.succeeded for r in samples)
        assert [r.duration_nanos for r in samples] == [500] * 7

    def test_results_keep_execution_order(self):
        """Results are stored in the order the trials ran, unsorted."""
        clock = StepClock([300, 100, 200])

        samples = TrialRunner(lambda: None, runs=3, clock=clock).run()

        assert [r.duration_nanos for r in samples] == [300, 100, 200]

    def test_failed_trial_is_recorded_and_run_continues(self):
        """A raising operation is timed, marked failed, and does not stop the run."""
        operation = MagicMock(side_effect=[None, ConnectionError("refused"), None])
        clock = StepClock([10, 20, 30])

        samples = TrialRunner(operation, runs=3, clock=clock).run()

        assert operation.call_count == 3
        assert [r.succeeded for r in samples] == [True, False, True]
        assert samples.results[1].duration_nanos == 20
        assert samples.results[1].error == "ConnectionError: refused"
        assert samples.failed == 1
        assert samples.succeeded == 2

    def test_keyboard_interrupt_propagates(self):
        """Operator interrupt aborts the run."""
        operation = MagicMock(side_effect=KeyboardInterrupt)

        with pytest.raises(KeyboardInterrupt):
            TrialRunner(operation, runs=5).run()
        assert operation.call_count == 1

    @pytest.mark.parametrize("runs", [0, -1, -200])
    def test_non_positive_runs_rejected_before_any_trial(self, runs):
        """A non-positive run count is a configuration error and nothing runs."""
        operation = MagicMock()

        with pytest.raises(ConfigurationError):
            TrialRunner(operation, runs=runs)
        operation.assert_not_called()

    @pytest.mark.parametrize("runs", ["10", 2.5, True, None])
    def test_non_integer_runs_rejected(self, runs):
        with pytest.raises(ConfigurationError):
            TrialRunner(lambda: None, runs=runs)

    def test_default_run_count(self):
        runner = TrialRunner(lambda: None)
        assert runner.runs == 200

    def test_runs_do_not_accumulate(self):
        """Each run starts from an empty sample set."""
        runner = TrialRunner(lambda: None, runs=4)

        first = runner.run()
        second = runner.run()

        assert len(first) == 4
        assert len(second) == 4
        assert first is not second

    def test_real_clock_measures_elapsed_time(self):
        """With the default clock, durations are non-negative integers."""
        samples = run_trials(lambda: sum(range(1000)), runs=5)

        assert len(samples) == 5
        for result in samples:
            assert isinstance(result.duration_nanos, int)
            assert result.duration_nanos >= 0


class TestSampleSet:
    """Test sample selection by failure policy."""

    def setup_method(self):
        self.samples = SampleSet([
            TrialResult(100, True),
            TrialResult(900, False, "HTTPStatusError: 503"),
            TrialResult(200, True),
        ])

    def test_include_policy_keeps_failed_durations(self):
        assert self.samples.durations(FailurePolicy.INCLUDE) == [100, 900, 200]

    def test_exclude_policy_drops_failed_durations(self):
        assert self.samples.durations(FailurePolicy.EXCLUDE) == [100, 200]

    def test_trial_result_is_immutable(self):
        with pytest.raises(Exception):
            self.samples.results[0].duration_nanos = 5

    def test_negative_duration_rejected(self):
        with pytest.raises(ValueError):
            TrialResult(-1, True)

"""Unit tests for AvailabilityPoller.

The executor and clock are Mocks, so no real sleeping or networking happens.
"""
from unittest.mock import Mock, call

import pytest

from winpush.deploy.exceptions import RemoteSessionError
from winpush.deploy.poller import AvailabilityPoller


def create_mock_executor(outcomes):
    """Executor whose probe() walks through outcomes (None = success, Exception = raise)."""
    executor = Mock()
    executor.probe.side_effect = list(outcomes)
    return executor


def refused(n):
    return RemoteSessionError(f"connection refused #{n}", target="PC01")


class TestPoll:
    """Test poll() attempt accounting."""

    def test_first_attempt_success(self):
        executor = create_mock_executor([None])
        clock = Mock()
        poller = AvailabilityPoller(executor, clock, Mock())

        result = poller.poll("PC01", "PowerShell.7", 15)

        assert result.ready is True
        assert result.attempts == 1
        assert result.last_error is None
        executor.probe.assert_called_once_with("PC01", "PowerShell.7")

    def test_success_after_failures(self):
        executor = create_mock_executor([refused(1), refused(2), None])
        poller = AvailabilityPoller(executor, Mock(), Mock())

        result = poller.poll("PC01", "PowerShell.7", 5)

        assert result.ready is True
        assert result.attempts == 3
        assert executor.probe.call_count == 3
        assert result.last_error == "connection refused #2"

    def test_exhausts_exactly_max_attempts(self):
        executor = create_mock_executor([refused(i) for i in range(1, 16)])
        poller = AvailabilityPoller(executor, Mock(), Mock())

        result = poller.poll("PC01", "PowerShell.7", 15)

        assert result.ready is False
        assert result.attempts == 15
        assert executor.probe.call_count == 15
        assert result.last_error == "connection refused #15"

    @pytest.mark.parametrize("budget", [1, 2, 7])
    def test_never_exceeds_budget(self, budget):
        executor = Mock()
        executor.probe.side_effect = RemoteSessionError("down")
        poller = AvailabilityPoller(executor, Mock(), Mock())

        assert poller.poll_until_ready("PC01", "PowerShell.7", budget) is False
        assert executor.probe.call_count == budget

    def test_stops_probing_after_success(self):
        executor = create_mock_executor([None, refused(2)])
        poller = AvailabilityPoller(executor, Mock(), Mock())

        assert poller.poll_until_ready("PC01", "PowerShell.7", 10) is True
        assert executor.probe.call_count == 1

    def test_invalid_budget(self):
        poller = AvailabilityPoller(Mock(), Mock(), Mock())

        with pytest.raises(ValueError):
            poller.poll("PC01", "PowerShell.7", 0)

    def test_unexpected_errors_propagate(self):
        executor = create_mock_executor([RuntimeError("bug")])
        poller = AvailabilityPoller(executor, Mock(), Mock())

        with pytest.raises(RuntimeError):
            poller.poll("PC01", "PowerShell.7", 3)


class TestBackoff:
    """Test the fixed sleep-before-each-attempt policy."""

    def test_sleeps_before_every_attempt(self):
        executor = create_mock_executor([refused(1), refused(2), None])
        clock = Mock()
        poller = AvailabilityPoller(executor, clock, Mock(), interval=1.0)

        poller.poll("PC01", "PowerShell.7", 5)

        assert clock.sleep.call_args_list == [call(1.0), call(1.0), call(1.0)]

    def test_sleep_precedes_first_probe(self):
        order = []
        executor = Mock()
        executor.probe.side_effect = lambda *a: order.append("probe")
        clock = Mock()
        clock.sleep.side_effect = lambda s: order.append("sleep")
        poller = AvailabilityPoller(executor, clock, Mock())

        poller.poll("PC01", "PowerShell.7", 1)

        assert order == ["sleep", "probe"]

    def test_custom_interval(self):
        executor = Mock()
        executor.probe.side_effect = RemoteSessionError("down")
        clock = Mock()
        poller = AvailabilityPoller(executor, clock, Mock(), interval=0.25)

        poller.poll("PC01", "PowerShell.7", 4)

        assert clock.sleep.call_args_list == [call(0.25)] * 4

    def test_negative_interval_rejected(self):
        with pytest.raises(ValueError):
            AvailabilityPoller(Mock(), Mock(), Mock(), interval=-1)

    def test_failures_logged_at_debug(self):
        executor = create_mock_executor([refused(1), None])
        logger = Mock()
        poller = AvailabilityPoller(executor, Mock(), logger)

        poller.poll("PC01", "PowerShell.7", 3)

        logger.debug.assert_called_once()
        assert "1/3" in logger.debug.call_args[0][0]

"""
Tests for DirectTimerDetector.

Tests verify:
- Occupancy lags the first power-on edge by the minimum run duration
- Repeated power-on does not restart the countdown
- Early power-off cancels the countdown for good
- Power-off clears occupancy synchronously
- Configuration rejection
"""

import pytest

from dryer_occupancy.core.clock import ManualClock
from dryer_occupancy.detectors import (
    DetectorMode,
    DirectTimerConfig,
    DirectTimerDetector,
    OccupancyState,
    create_detector,
)
from dryer_occupancy.exceptions import ConfigurationError

TEN_MINUTES = 10 * 60 * 1000


@pytest.fixture
def clock():
    """Manual clock starting at t=0."""
    return ManualClock()


@pytest.fixture
def changes():
    """Collects on_change notifications."""
    return []


@pytest.fixture
def detector(clock, changes):
    """Detector with a 10 minute minimum run."""
    config = DirectTimerConfig(minimum_run_duration="10 minutes")
    return DirectTimerDetector(config, clock, on_change=changes.append, name="test dryer")


class TestRunCountdown:
    """Power held on for the minimum run time asserts occupancy."""

    def test_occupied_after_minimum_run(self, clock, detector, changes):
        result = detector.record_power_change(True)

        assert result.transitions == []
        assert result.next_deadline == TEN_MINUTES
        assert detector.is_occupied() is False

        clock.advance(TEN_MINUTES - 1)
        assert detector.is_occupied() is False

        clock.advance(1)
        assert detector.is_occupied() is True
        assert detector.next_deadline is None
        assert changes == [OccupancyState.DETECTED]

    def test_second_power_on_does_not_restart(self, clock, detector, changes):
        detector.record_power_change(True)
        clock.advance(4 * 60 * 1000)
        detector.record_power_change(True)

        assert detector.next_deadline == TEN_MINUTES
        assert len(clock.pending()) == 1

        clock.advance_to(TEN_MINUTES)
        assert detector.is_occupied() is True
        assert changes == [OccupancyState.DETECTED]

    def test_power_on_while_running_is_ignored(self, clock, detector):
        detector.record_power_change(True)
        clock.advance(TEN_MINUTES)

        detector.record_power_change(True)

        assert detector.is_occupied() is True
        assert clock.pending() == []

    def test_trigger_acts_as_power_on(self, clock, detector):
        detector.record_trigger()

        assert detector.is_powered() is True
        assert detector.next_deadline == TEN_MINUTES


class TestPowerOff:
    """Power off cancels or clears."""

    def test_early_power_off_never_detects(self, clock, detector, changes):
        detector.record_power_change(True)
        clock.advance(5 * 60 * 1000)
        result = detector.record_power_change(False)

        assert result.transitions == []
        assert result.next_deadline is None

        clock.advance(TEN_MINUTES * 2)
        assert detector.is_occupied() is False
        assert changes == []

    def test_power_off_clears_occupancy_immediately(self, clock, detector, changes):
        detector.record_power_change(True)
        clock.advance(TEN_MINUTES)

        result = detector.record_power_change(False)

        assert detector.is_occupied() is False
        assert len(result.transitions) == 1
        assert result.transitions[0].reason == "power_off"
        assert result.transitions[0].new_state is OccupancyState.NOT_DETECTED
        assert changes == [OccupancyState.DETECTED, OccupancyState.NOT_DETECTED]

    def test_power_off_when_idle_is_a_noop(self, detector, changes):
        result = detector.record_power_change(False)

        assert result.transitions == []
        assert changes == []

    def test_new_cycle_after_power_off(self, clock, detector):
        detector.record_power_change(True)
        clock.advance(TEN_MINUTES)
        detector.record_power_change(False)

        detector.record_power_change(True)

        assert detector.next_deadline == clock.now() + TEN_MINUTES


class TestQuery:
    """Queries have no side effects."""

    def test_repeated_queries_return_same_value(self, clock, detector):
        detector.record_power_change(True)
        clock.advance(TEN_MINUTES)

        assert [detector.is_occupied() for _ in range(3)] == [True, True, True]
        assert detector.is_powered() is True

    def test_power_is_queryable(self, detector):
        assert detector.is_powered() is False
        detector.record_power_change(True)
        assert detector.is_powered() is True
        detector.record_power_change(False)
        assert detector.is_powered() is False

    def test_snapshot(self, detector):
        detector.record_power_change(True)

        assert detector.snapshot() == {
            "name": "test dryer",
            "mode": "direct",
            "occupied": False,
            "next_deadline": TEN_MINUTES,
            "powered": True,
            "minimum_run_ms": TEN_MINUTES,
        }

    def test_shutdown_cancels_countdown(self, clock, detector):
        detector.record_power_change(True)
        detector.shutdown()

        clock.advance(TEN_MINUTES)
        assert detector.is_occupied() is False


class TestConfiguration:
    """Malformed configuration never yields a detector."""

    def test_unparsable_duration_rejected(self):
        with pytest.raises(ConfigurationError):
            DirectTimerConfig(minimum_run_duration="ten minutes")

    def test_non_positive_duration_rejected(self):
        with pytest.raises(ConfigurationError):
            DirectTimerConfig(minimum_run_duration="0 seconds")

    def test_duration_parsed_once(self):
        config = DirectTimerConfig(minimum_run_duration="1h 30m")
        assert config.minimum_run_ms == 90 * 60 * 1000

    def test_factory_builds_direct_detector(self, clock):
        detector = create_detector(DirectTimerConfig("5 minutes"), clock)

        assert isinstance(detector, DirectTimerDetector)
        assert detector.mode is DetectorMode.DIRECT

    def test_factory_rejects_unknown_config(self, clock):
        with pytest.raises(TypeError):
            create_detector({"mode": "direct"}, clock)

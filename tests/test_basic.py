"""
Basic smoke tests for dryer-occupancy public API.
"""

import dryer_occupancy
from dryer_occupancy import (
    DirectTimerConfig,
    ManualClock,
    OccupancyDetector,
    WindowedEventConfig,
    create_detector,
)


def test_version():
    """Test package metadata."""
    assert dryer_occupancy.__version__ == "0.1.0"


def test_modes_share_one_surface():
    """Test that both detectors can be driven through the same calls."""
    for config in (
        DirectTimerConfig("1 second"),
        WindowedEventConfig(window_duration_sec=1, number_of_events=0, off_time_span_sec=1),
    ):
        clock = ManualClock()
        detector = create_detector(config, clock)
        assert isinstance(detector, OccupancyDetector)
        assert detector.is_occupied() is False

        detector.record_power_change(True)
        clock.advance(1_000)
        detector.record_trigger()

        assert isinstance(detector.is_occupied(), bool)


def test_callbacks_fire_once_per_transition():
    """Test exactly-once notification across a full direct cycle."""
    clock = ManualClock()
    changes = []
    detector = create_detector(DirectTimerConfig("2 seconds"), clock, on_change=changes.append)

    detector.record_power_change(True)
    detector.record_power_change(True)
    clock.advance(5_000)
    detector.record_power_change(False)
    detector.record_power_change(False)

    assert [state.name for state in changes] == ["DETECTED", "NOT_DETECTED"]

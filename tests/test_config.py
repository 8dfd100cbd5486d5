"""
Tests for configuration handling.
"""

import pytest

from dryer_occupancy.config import config_schema, default_config, detector_config_from_dict
from dryer_occupancy.detectors import DirectTimerConfig, WindowedEventConfig
from dryer_occupancy.exceptions import ConfigurationError


class TestDetectorConfigFromDict:
    """Building detector configs from host config blocks."""

    def test_direct_with_legacy_key(self):
        config = detector_config_from_dict({"name": "Dryer", "minimumTime": "15 minutes"})

        assert isinstance(config, DirectTimerConfig)
        assert config.minimum_run_ms == 15 * 60 * 1000

    def test_empty_block_uses_direct_defaults(self):
        config = detector_config_from_dict({})

        assert isinstance(config, DirectTimerConfig)
        assert config.minimum_run_ms == 10 * 60 * 1000

    def test_windowed_inferred_from_keys(self):
        config = detector_config_from_dict(
            {"windowDurationSec": 30, "numberOfEvents": 8, "offTimeSpanSec": 120}
        )

        assert isinstance(config, WindowedEventConfig)
        assert config.window_ms == 30_000
        assert config.number_of_events == 8
        assert config.off_time_span_ms == 120_000

    def test_windowed_explicit_mode_fills_defaults(self):
        config = detector_config_from_dict({"mode": "Windowed", "number_of_events": 2})

        assert isinstance(config, WindowedEventConfig)
        assert config.window_duration_sec == default_config()["window_duration_sec"]
        assert config.number_of_events == 2

    def test_unknown_mode_rejected(self):
        with pytest.raises(ConfigurationError, match="Unknown detector mode"):
            detector_config_from_dict({"mode": "psychic"})

    @pytest.mark.parametrize(
        "data",
        [
            {"minimumTime": None},
            {"minimum_run_duration": None},
            {"mode": "windowed", "numberOfEvents": None},
            {"mode": "windowed", "window_duration_sec": None},
            {"offTimeSpanSec": None},
            {"mode": None},
        ],
    )
    def test_explicit_null_rejected(self, data):
        with pytest.raises(ConfigurationError):
            detector_config_from_dict(data)

    def test_bad_duration_rejected(self):
        with pytest.raises(ConfigurationError):
            detector_config_from_dict({"minimumTime": "soon"})


class TestWindowedValidation:
    """WindowedEventConfig refuses undefined timing."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"window_duration_sec": 0},
            {"window_duration_sec": -5},
            {"off_time_span_sec": 0},
            {"number_of_events": -1},
            {"number_of_events": 2.5},
            {"window_duration_sec": "60"},
            {"off_time_span_sec": True},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ConfigurationError):
            WindowedEventConfig(**kwargs)

    def test_zero_threshold_allowed(self):
        assert WindowedEventConfig(number_of_events=0).number_of_events == 0


def test_schema_lists_every_setting():
    """Test that the UI schema covers the default config."""
    schema = config_schema()

    for key in default_config():
        assert key in schema["properties"]
    assert schema["properties"]["mode"]["enum"] == ["direct", "windowed"]

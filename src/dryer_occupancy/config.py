"""
Configuration handling for dryer accessories.

Translates a host configuration block (as found in a platform config file)
into a validated detector configuration. Both snake_case keys and the
camelCase keys used by existing plugin configs are accepted.
"""

import logging
from typing import Any, Dict, Mapping

from dryer_occupancy.detectors.models import (
    DetectorConfig,
    DetectorMode,
    DirectTimerConfig,
    WindowedEventConfig,
)
from dryer_occupancy.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# snake_case name -> accepted aliases
KEY_ALIASES: Dict[str, tuple[str, ...]] = {
    "minimum_run_duration": ("minimum_run_duration", "minimumRunDuration", "minimumTime"),
    "window_duration_sec": ("window_duration_sec", "windowDurationSec"),
    "number_of_events": ("number_of_events", "numberOfEvents"),
    "off_time_span_sec": ("off_time_span_sec", "offTimeSpanSec"),
}

# Marks a key absent from the config block (an explicit null is a value)
MISSING = object()

WINDOWED_KEYS = ("window_duration_sec", "number_of_events", "off_time_span_sec")


def default_config() -> Dict[str, Any]:
    """Default configuration for one dryer accessory."""
    return {
        "mode": DetectorMode.DIRECT.value,
        "minimum_run_duration": "10 minutes",  # direct mode
        "window_duration_sec": 60,  # windowed mode
        "number_of_events": 5,  # windowed mode, exclusive threshold
        "off_time_span_sec": 300,  # windowed mode
    }


def config_schema() -> Dict[str, Any]:
    """JSON schema for UI configuration."""
    defaults = default_config()
    return {
        "type": "object",
        "required": ["name"],
        "properties": {
            "name": {
                "type": "string",
                "title": "Name",
                "description": "Accessory name shown in the Home app",
            },
            "mode": {
                "type": "string",
                "title": "Detection Mode",
                "enum": [m.value for m in DetectorMode],
                "default": defaults["mode"],
                "description": (
                    "direct: switch is the dryer power signal; "
                    "windowed: switch is pulsed by a vibration sensor"
                ),
            },
            "minimum_run_duration": {
                "type": "string",
                "title": "Minimum Run Time",
                "description": "How long the switch must stay on, e.g. '10 minutes'",
                "default": defaults["minimum_run_duration"],
            },
            "window_duration_sec": {
                "type": "integer",
                "title": "Window (seconds)",
                "minimum": 1,
                "default": defaults["window_duration_sec"],
            },
            "number_of_events": {
                "type": "integer",
                "title": "Vibration Events",
                "description": "Running once MORE than this many events fall inside the window",
                "minimum": 0,
                "default": defaults["number_of_events"],
            },
            "off_time_span_sec": {
                "type": "integer",
                "title": "Off Delay (seconds)",
                "description": "Quiet time after the last event before the dryer counts as stopped",
                "minimum": 1,
                "default": defaults["off_time_span_sec"],
            },
        },
    }


def _lookup(data: Mapping[str, Any], key: str) -> Any:
    for alias in KEY_ALIASES[key]:
        if alias in data:
            return data[alias]
    return MISSING


def _resolve_mode(data: Mapping[str, Any]) -> DetectorMode:
    raw = data.get("mode", MISSING)
    if raw is MISSING:
        # Infer from which settings are present
        if any(_lookup(data, key) is not MISSING for key in WINDOWED_KEYS):
            return DetectorMode.WINDOWED
        return DetectorMode.DIRECT

    try:
        return DetectorMode(str(raw).lower())
    except ValueError:
        raise ConfigurationError(
            f"Unknown detector mode {raw!r} (expected one of {[m.value for m in DetectorMode]})"
        ) from None


def detector_config_from_dict(data: Mapping[str, Any]) -> DetectorConfig:
    """
    Build a validated detector configuration.

    Args:
        data: Configuration block for one accessory

    Returns:
        DirectTimerConfig or WindowedEventConfig

    Raises:
        ConfigurationError: If the mode is unknown or any value is invalid
    """
    defaults = default_config()
    mode = _resolve_mode(data)

    def value(key: str) -> Any:
        found = _lookup(data, key)
        return defaults[key] if found is MISSING else found

    if mode is DetectorMode.DIRECT:
        config: DetectorConfig = DirectTimerConfig(
            minimum_run_duration=value("minimum_run_duration"),
        )
    else:
        config = WindowedEventConfig(
            window_duration_sec=value("window_duration_sec"),
            number_of_events=value("number_of_events"),
            off_time_span_sec=value("off_time_span_sec"),
        )

    logger.debug(f"Built {mode.value} detector config: {config}")
    return config

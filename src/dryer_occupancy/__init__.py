"""
dryer-occupancy: Infer whether a dryer is running from vibration pulses.

This library provides:
- Occupancy detectors (direct power timer, windowed trigger rate)
- An injectable Clock with a deterministic manual implementation
- Accessory wiring for switch and occupancy-sensor characteristics
- A synchronous Event Bus for state notifications
"""

from dryer_occupancy.core.bus import Event, EventBus, EventFilter
from dryer_occupancy.core.clock import AsyncioClock, Clock, ManualClock
from dryer_occupancy.detectors import (
    DirectTimerConfig,
    DirectTimerDetector,
    OccupancyDetector,
    OccupancyState,
    WindowedEventConfig,
    WindowedEventDetector,
    create_detector,
)
from dryer_occupancy.accessory import DryerAccessory, DryerPlatform
from dryer_occupancy.exceptions import ConfigurationError

__version__ = "0.1.0"

__all__ = [
    "Event",
    "EventBus",
    "EventFilter",
    "Clock",
    "ManualClock",
    "AsyncioClock",
    "OccupancyDetector",
    "DirectTimerDetector",
    "WindowedEventDetector",
    "DirectTimerConfig",
    "WindowedEventConfig",
    "OccupancyState",
    "create_detector",
    "DryerAccessory",
    "DryerPlatform",
    "ConfigurationError",
]

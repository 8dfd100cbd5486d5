"""
Occupancy detectors for dryer-occupancy.

Derives a "dryer running" flag from vibration triggers or a power signal.

Features:
- Direct mode: power held on for a minimum run duration
- Windowed mode: trigger count above a threshold inside a rolling window
- Debounced stop via a re-armed inactivity countdown
- Injectable Clock for deterministic testing
- Exactly one on_change notification per transition
"""

from typing import Optional

from dryer_occupancy.core.clock import Clock

from .base import OccupancyDetector
from .direct import DirectTimerDetector
from .models import (
    DetectorConfig,
    DetectorMode,
    DetectorResult,
    DirectTimerConfig,
    OccupancyState,
    OnChangeCallback,
    StateTransition,
    WindowedEventConfig,
)
from .windowed import WindowedEventDetector


def create_detector(
    config: DetectorConfig,
    clock: Clock,
    on_change: Optional[OnChangeCallback] = None,
    name: str = "dryer",
) -> OccupancyDetector:
    """Build the detector variant matching a configuration.

    Args:
        config: DirectTimerConfig or WindowedEventConfig.
        clock: Time source and scheduler.
        on_change: Optional transition callback.
        name: Label used in log messages.

    Returns:
        A new detector instance.

    Raises:
        TypeError: If config is not a known detector configuration.
    """
    if isinstance(config, DirectTimerConfig):
        return DirectTimerDetector(config, clock, on_change, name)
    if isinstance(config, WindowedEventConfig):
        return WindowedEventDetector(config, clock, on_change, name)
    raise TypeError(f"Unsupported detector config: {type(config).__name__}")


__all__ = [
    "OccupancyDetector",
    "DirectTimerDetector",
    "WindowedEventDetector",
    "create_detector",
    "DetectorConfig",
    "DetectorMode",
    "DetectorResult",
    "DirectTimerConfig",
    "WindowedEventConfig",
    "OccupancyState",
    "OnChangeCallback",
    "StateTransition",
]

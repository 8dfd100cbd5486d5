"""Data models for the occupancy detectors.

This module defines the configuration and result structures shared by both
detector variants. Configuration classes are frozen and validate themselves
on construction, so a detector can never be built from malformed settings.

Licensed under MIT License
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from dryer_occupancy.core.duration import DurationLike, parse_duration
from dryer_occupancy.exceptions import ConfigurationError


class OccupancyState(Enum):
    """Derived occupancy of the dryer.

    Values match the HomeKit OccupancyDetected characteristic:
        NOT_DETECTED: Dryer idle
        DETECTED: Dryer running
    """

    NOT_DETECTED = 0
    DETECTED = 1

    @property
    def is_occupied(self) -> bool:
        return self is OccupancyState.DETECTED


class DetectorMode(Enum):
    """Inference policy for a detector."""

    DIRECT = "direct"  # Power signal held for a minimum run duration
    WINDOWED = "windowed"  # Trigger rate within a rolling window


OnChangeCallback = Callable[[OccupancyState], None]


@dataclass(frozen=True)
class DirectTimerConfig:
    """Configuration for the direct timer detector.

    Attributes:
        minimum_run_duration: How long power must stay on before the dryer
            counts as running (e.g. "10 minutes").
        minimum_run_ms: Parsed duration in milliseconds (derived).
    """

    minimum_run_duration: DurationLike = "10 minutes"
    minimum_run_ms: int = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "minimum_run_ms", parse_duration(self.minimum_run_duration))

    @property
    def mode(self) -> DetectorMode:
        return DetectorMode.DIRECT


@dataclass(frozen=True)
class WindowedEventConfig:
    """Configuration for the windowed event detector.

    Attributes:
        window_duration_sec: Trailing window over which triggers are counted.
        number_of_events: Exclusive threshold; more triggers than this inside
            the window means the dryer is running.
        off_time_span_sec: Quiet period after the last qualifying trigger
            before the dryer counts as stopped.
    """

    window_duration_sec: int = 60
    number_of_events: int = 5
    off_time_span_sec: int = 300

    def __post_init__(self) -> None:
        _require_int("window_duration_sec", self.window_duration_sec, minimum=1)
        _require_int("number_of_events", self.number_of_events, minimum=0)
        _require_int("off_time_span_sec", self.off_time_span_sec, minimum=1)

    @property
    def mode(self) -> DetectorMode:
        return DetectorMode.WINDOWED

    @property
    def window_ms(self) -> int:
        return self.window_duration_sec * 1000

    @property
    def off_time_span_ms(self) -> int:
        return self.off_time_span_sec * 1000


DetectorConfig = DirectTimerConfig | WindowedEventConfig


def _require_int(name: str, value: object, minimum: int) -> None:
    """Validate an integer setting, raising ConfigurationError otherwise."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")


@dataclass(frozen=True)
class StateTransition:
    """A record of an occupancy change.

    Attributes:
        previous_state: Occupancy before the change.
        new_state: Occupancy after the change.
        reason: What caused it ("threshold", "timeout", "run_time_elapsed",
            "power_off").
        timestamp: Instant (ms) of the change.
    """

    previous_state: OccupancyState
    new_state: OccupancyState
    reason: str
    timestamp: int


@dataclass(frozen=True)
class DetectorResult:
    """Outcome of a single mutating call.

    Attributes:
        accepted: False if the input was rejected (out-of-order trigger).
        transitions: Occupancy changes caused synchronously by the call.
        next_deadline: Instant (ms) of the armed countdown, if any.
    """

    accepted: bool = True
    transitions: list[StateTransition] = field(default_factory=list)
    next_deadline: int | None = None

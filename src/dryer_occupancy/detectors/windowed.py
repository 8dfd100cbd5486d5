"""Windowed event detector.

The dryer counts as running when more than `number_of_events` triggers land
inside the trailing `window_duration_sec`. Every trigger that arrives while
running pushes the clear deadline out to `now + off_time_span_sec`; the
dryer counts as stopped only when that deadline passes quietly.

State machine:
    Quiet --(count > threshold)--> Occupied (countdown armed)
    Occupied --(qualifying trigger)--> Occupied (countdown re-armed)
    Occupied --(countdown elapses)--> Quiet

Out-of-order triggers (older than the last recorded one) are rejected
without touching state.

Licensed under MIT License
"""

import logging
from bisect import bisect_left
from typing import Any, Dict, Optional

from dryer_occupancy.core.clock import Clock

from .base import OccupancyDetector
from .models import (
    DetectorMode,
    DetectorResult,
    OccupancyState,
    OnChangeCallback,
    StateTransition,
    WindowedEventConfig,
)

_LOGGER = logging.getLogger(__name__)


class WindowedEventDetector(OccupancyDetector):
    """Occupancy from the trigger rate inside a rolling window."""

    def __init__(
        self,
        config: WindowedEventConfig,
        clock: Clock,
        on_change: Optional[OnChangeCallback] = None,
        name: str = "dryer",
    ) -> None:
        """Initialize the detector.

        Args:
            config: Validated windowed configuration.
            clock: Time source and scheduler.
            on_change: Optional callback receiving each new OccupancyState.
            name: Label used in log messages.
        """
        super().__init__(clock, on_change, name)
        self.config = config
        # Non-decreasing trigger timestamps inside the window
        self.events: list[int] = []
        self._last_trigger: Optional[int] = None

    @property
    def mode(self) -> DetectorMode:
        return DetectorMode.WINDOWED

    @property
    def event_count(self) -> int:
        """Triggers retained as of the last ingestion."""
        return len(self.events)

    def record_trigger(self, now: Optional[int] = None) -> DetectorResult:
        """Ingest one trigger.

        Args:
            now: Instant of the trigger in ms (defaults to clock.now()).

        Returns:
            DetectorResult; accepted is False for an out-of-order trigger.
        """
        now = self._now(now)

        if self._last_trigger is not None and now < self._last_trigger:
            _LOGGER.warning(
                f"{self.name}: rejecting out-of-order trigger at {now} "
                f"(last trigger at {self._last_trigger})"
            )
            return self._result(accepted=False)

        self._last_trigger = now
        self.events.append(now)
        self._prune(now - self.config.window_ms)

        count = len(self.events)
        _LOGGER.debug(
            f"{self.name}: trigger at {now}, {count} event(s) in window "
            f"(threshold > {self.config.number_of_events})"
        )

        transitions: list[StateTransition] = []

        if count > self.config.number_of_events and not self.is_occupied():
            transitions.append(self._transition(OccupancyState.DETECTED, "threshold", now))

        # Each trigger while running pushes the stop deadline forward
        if self.is_occupied():
            self._arm_countdown(now + self.config.off_time_span_ms, self._on_quiet_period_elapsed)
            _LOGGER.debug(f"{self.name}: clear deadline moved to {self._countdown.deadline}")

        return self._result(transitions)

    def record_power_change(self, on: bool, now: Optional[int] = None) -> DetectorResult:
        """An "on" is a trigger; "off" is ignored since the switch is momentary."""
        if on:
            return self.record_trigger(now)

        _LOGGER.debug(f"{self.name}: power off ignored in windowed mode")
        return self._result()

    def _prune(self, cutoff: int) -> None:
        """Drop every timestamp strictly older than cutoff."""
        index = bisect_left(self.events, cutoff)
        if index:
            del self.events[:index]

    def _on_quiet_period_elapsed(self) -> None:
        self._countdown = None
        _LOGGER.info(f"{self.name}: no vibration for {self.config.off_time_span_sec}s")
        self._transition(OccupancyState.NOT_DETECTED, "timeout", self.clock.now())

    def snapshot(self) -> Dict[str, Any]:
        data = super().snapshot()
        data["event_count"] = self.event_count
        data["last_trigger"] = self._last_trigger
        return data

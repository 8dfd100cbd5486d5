"""Direct timer detector.

The dryer counts as running once an external power signal has stayed on
for the configured minimum run duration. Occupancy clears the moment power
goes off.

State machine:
    Idle --(power on)--> Arming --(duration elapses)--> Occupied
    Arming --(power off)--> Idle      (no occupancy for this cycle)
    Occupied --(power off)--> Idle

Licensed under MIT License
"""

import logging
from typing import Any, Dict, Optional

from dryer_occupancy.core.clock import Clock
from dryer_occupancy.core.duration import format_duration

from .base import OccupancyDetector
from .models import (
    DetectorMode,
    DetectorResult,
    DirectTimerConfig,
    OccupancyState,
    OnChangeCallback,
    StateTransition,
)

_LOGGER = logging.getLogger(__name__)


class DirectTimerDetector(OccupancyDetector):
    """Occupancy that lags the power-on edge by a fixed run duration."""

    def __init__(
        self,
        config: DirectTimerConfig,
        clock: Clock,
        on_change: Optional[OnChangeCallback] = None,
        name: str = "dryer",
    ) -> None:
        """Initialize the detector.

        Args:
            config: Validated direct timer configuration.
            clock: Time source and scheduler.
            on_change: Optional callback receiving each new OccupancyState.
            name: Label used in log messages.
        """
        super().__init__(clock, on_change, name)
        self.config = config
        self._powered = False

    @property
    def mode(self) -> DetectorMode:
        return DetectorMode.DIRECT

    def is_powered(self) -> bool:
        """Last power signal recorded."""
        return self._powered

    def record_trigger(self, now: Optional[int] = None) -> DetectorResult:
        """A trigger is a power-on edge in this mode."""
        return self.record_power_change(True, now)

    def record_power_change(self, on: bool, now: Optional[int] = None) -> DetectorResult:
        """Handle the power signal turning on or off.

        Args:
            on: New power state.
            now: Instant of the change in ms (defaults to clock.now()).

        Returns:
            DetectorResult with any synchronous transition.
        """
        now = self._now(now)
        _LOGGER.info(f"{self.name}: power turned {'on' if on else 'off'}")
        self._powered = bool(on)

        if on:
            self._power_on(now)
            return self._result()

        transitions: list[StateTransition] = []

        # Turned off before the countdown fired: this cycle never counts
        if self._countdown is not None:
            _LOGGER.debug(f"{self.name}: cancelling run countdown")
            self._cancel_countdown()

        if self.is_occupied():
            transitions.append(self._transition(OccupancyState.NOT_DETECTED, "power_off", now))

        return self._result(transitions)

    def _power_on(self, now: int) -> None:
        if self._countdown is not None:
            _LOGGER.debug(
                f"{self.name}: countdown already armed (fires at {self._countdown.deadline})"
            )
            return

        if self.is_occupied():
            _LOGGER.debug(f"{self.name}: already running, power on ignored")
            return

        delay = self.config.minimum_run_ms
        _LOGGER.debug(f"{self.name}: arming run countdown for {format_duration(delay)}")
        self._arm_countdown(now + delay, self._on_run_time_elapsed)

    def _on_run_time_elapsed(self) -> None:
        self._countdown = None
        _LOGGER.info(f"{self.name}: minimum run time elapsed, setting occupancy to DETECTED")
        self._transition(OccupancyState.DETECTED, "run_time_elapsed", self.clock.now())

    def snapshot(self) -> Dict[str, Any]:
        data = super().snapshot()
        data["powered"] = self._powered
        data["minimum_run_ms"] = self.config.minimum_run_ms
        return data

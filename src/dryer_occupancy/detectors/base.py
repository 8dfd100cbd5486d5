"""
Base class for occupancy detectors.

A detector turns sensor input into a derived occupancy flag. Both variants
share the same mutating surface and query, so an accessory can switch
policy through configuration alone.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from dryer_occupancy.core.clock import Clock, TimerHandle

from .models import (
    DetectorMode,
    DetectorResult,
    OccupancyState,
    OnChangeCallback,
    StateTransition,
)

logger = logging.getLogger(__name__)


class OccupancyDetector(ABC):
    """
    Base class for detectors.

    A detector:
    - Receives triggers and power changes from its accessory
    - Owns at most one pending countdown at a time
    - Reports transitions through an optional on_change callback

    Callers must serialize calls to one instance. The clock's callbacks
    are expected to run on the same thread as the mutating calls.
    """

    def __init__(
        self,
        clock: Clock,
        on_change: Optional[OnChangeCallback] = None,
        name: str = "dryer",
    ) -> None:
        self.clock = clock
        self.name = name
        self._on_change = on_change
        self._state = OccupancyState.NOT_DETECTED
        self._countdown: Optional[TimerHandle] = None

    @property
    @abstractmethod
    def mode(self) -> DetectorMode:
        """Inference policy implemented by this detector."""
        pass

    @abstractmethod
    def record_trigger(self, now: Optional[int] = None) -> DetectorResult:
        """
        Record a vibration trigger.

        Args:
            now: Instant of the trigger in ms (defaults to clock.now())

        Returns:
            DetectorResult describing the synchronous effect
        """
        pass

    @abstractmethod
    def record_power_change(self, on: bool, now: Optional[int] = None) -> DetectorResult:
        """
        Record a change of the external power signal.

        Args:
            on: New power state
            now: Instant of the change in ms (defaults to clock.now())

        Returns:
            DetectorResult describing the synchronous effect
        """
        pass

    @property
    def state(self) -> OccupancyState:
        return self._state

    def is_occupied(self) -> bool:
        """Current occupancy. Never blocks and has no side effects."""
        return self._state is OccupancyState.DETECTED

    @property
    def next_deadline(self) -> Optional[int]:
        """Instant (ms) the armed countdown fires, or None."""
        if self._countdown is not None and self._countdown.active:
            return self._countdown.deadline
        return None

    def shutdown(self) -> None:
        """Cancel any armed countdown. Occupancy is left as is."""
        self._cancel_countdown()

    def snapshot(self) -> Dict[str, Any]:
        """
        Diagnostic view of the detector.

        Returns:
            JSON-serializable dict
        """
        return {
            "name": self.name,
            "mode": self.mode.value,
            "occupied": self.is_occupied(),
            "next_deadline": self.next_deadline,
        }

    # Internal helpers

    def _now(self, now: Optional[int]) -> int:
        return self.clock.now() if now is None else now

    def _arm_countdown(self, deadline: int, callback) -> None:
        """Replace any pending countdown with one due at deadline (ms)."""
        self._cancel_countdown()
        self._countdown = self.clock.after(deadline - self.clock.now(), callback)

    def _cancel_countdown(self) -> None:
        if self._countdown is not None:
            self.clock.cancel(self._countdown)
            self._countdown = None

    def _transition(self, new_state: OccupancyState, reason: str, now: int) -> StateTransition:
        """Commit a state change and notify the callback exactly once."""
        transition = StateTransition(
            previous_state=self._state,
            new_state=new_state,
            reason=reason,
            timestamp=now,
        )
        self._state = new_state

        logger.info(
            f"{self.name}: {transition.previous_state.name} -> {new_state.name} ({reason})"
        )

        if self._on_change is not None:
            try:
                self._on_change(new_state)
            except Exception as e:
                logger.error(
                    f"Error in occupancy callback for {self.name}: {e}",
                    exc_info=True,
                )

        return transition

    def _result(self, transitions: Optional[list] = None, accepted: bool = True) -> DetectorResult:
        return DetectorResult(
            accepted=accepted,
            transitions=transitions or [],
            next_deadline=self.next_deadline,
        )

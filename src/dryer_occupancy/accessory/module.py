"""DryerAccessory - a switch plus occupancy sensor backed by a detector.

The switch is what the vibration sensor (or a smart plug) drives. The
occupancy sensor reports whether the dryer is running. This module wraps
one detector and publishes its state changes on the EventBus so the host
can push characteristic updates.
"""

import logging
import uuid
from typing import Any, Dict, Mapping, Optional, Union

from dryer_occupancy.config import detector_config_from_dict
from dryer_occupancy.core.bus import Event, EventBus
from dryer_occupancy.core.clock import Clock
from dryer_occupancy.detectors import (
    DetectorConfig,
    DetectorMode,
    OccupancyDetector,
    OccupancyState,
    create_detector,
)

logger = logging.getLogger(__name__)

# Namespace for deriving stable accessory IDs from names
ACCESSORY_NAMESPACE = uuid.UUID("6f1d3a52-9c1e-4b8e-a7f0-2d5c8e9b4a61")


def accessory_id_for(name: str) -> str:
    """Stable accessory ID for a configured name."""
    return str(uuid.uuid5(ACCESSORY_NAMESPACE, name))


class DryerAccessory:
    """
    One dryer exposed as a switch and an occupancy sensor.

    Switch semantics depend on the detector mode:
    - direct: the switch mirrors the dryer's power signal
    - windowed: the switch is momentary; each "on" is one vibration trigger
      and the switch is immediately reported off again

    Events published on the bus:
    - occupancy.changed: payload {"occupied", "state", "name"}
    - switch.changed: payload {"on", "name"}
    """

    def __init__(
        self,
        name: str,
        config: Union[DetectorConfig, Mapping[str, Any]],
        clock: Clock,
        bus: Optional[EventBus] = None,
    ) -> None:
        """
        Create the accessory and its detector.

        Args:
            name: Display name
            config: Detector configuration, or a raw configuration block
            clock: Time source and scheduler shared with the detector
            bus: Optional EventBus for state notifications

        Raises:
            ConfigurationError: If a raw configuration block is invalid
        """
        if isinstance(config, Mapping):
            detector_config = detector_config_from_dict(config)
        else:
            detector_config = config

        self.name = name
        self.id = accessory_id_for(name)
        self._bus = bus
        self._detector: OccupancyDetector = create_detector(
            detector_config,
            clock,
            on_change=self._on_occupancy_changed,
            name=name,
        )
        logger.info(f"Created accessory {name!r} ({self._detector.mode.value} mode)")

        # Announce the starting state so subscribers can initialise characteristics
        self._publish("switch.changed", {"on": False, "name": self.name})
        self._on_occupancy_changed(self._detector.state)

    @property
    def detector(self) -> OccupancyDetector:
        return self._detector

    @property
    def mode(self) -> DetectorMode:
        return self._detector.mode

    # Characteristic handlers

    def set_on(self, value: Any) -> None:
        """
        Handle a SET request for the switch's On characteristic.

        Args:
            value: New switch value (truthy = on)
        """
        on = bool(value)
        logger.info(f"{self.name} switch turned {'on' if on else 'off'}")

        if self.mode is DetectorMode.DIRECT:
            self._detector.record_power_change(on)
            return

        if on:
            self._detector.record_trigger()
            # Momentary: flip straight back so the next pulse is a fresh edge
            self._publish("switch.changed", {"on": False, "name": self.name})

    def get_on(self) -> bool:
        """
        Handle a GET request for the switch's On characteristic.

        Returns:
            Power signal in direct mode, always False in windowed mode
        """
        if self.mode is DetectorMode.DIRECT:
            is_on = self._detector.is_powered()
        else:
            is_on = False
        logger.debug(f"Get Characteristic On -> {is_on}")
        return is_on

    def get_occupied(self) -> OccupancyState:
        """Handle a GET request for the OccupancyDetected characteristic."""
        state = self._detector.state
        logger.debug(f"Get Characteristic Occupied -> {state.name}")
        return state

    def get_state(self) -> Dict[str, Any]:
        """Diagnostic state for this accessory."""
        return {"id": self.id, **self._detector.snapshot()}

    def shutdown(self) -> None:
        """Cancel pending timers before the accessory is removed."""
        self._detector.shutdown()
        logger.debug(f"Shut down accessory {self.name!r}")

    # Internal

    def _on_occupancy_changed(self, state: OccupancyState) -> None:
        self._publish(
            "occupancy.changed",
            {"occupied": state.is_occupied, "state": state.value, "name": self.name},
        )

    def _publish(self, event_type: str, payload: Dict[str, Any]) -> None:
        if self._bus is None:
            return
        self._bus.publish(
            Event(
                type=event_type,
                source="dryer",
                accessory_id=self.id,
                payload=payload,
            )
        )

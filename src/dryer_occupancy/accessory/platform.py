"""
DryerPlatform for accessory discovery and lookup.

The platform owns the set of configured dryers, not their behavior.
"""

from typing import Any, Dict, List, Mapping, Optional
import logging

from dryer_occupancy.core.bus import EventBus
from dryer_occupancy.core.clock import Clock
from dryer_occupancy.exceptions import ConfigurationError

from .module import DryerAccessory

logger = logging.getLogger(__name__)


class DryerPlatform:
    """
    Manages the dryer accessories declared in a platform config.

    Responsibilities:
    - Create one DryerAccessory per configured device
    - Look accessories up by ID or name
    - Tear accessories down (cancelling their timers)

    Does NOT implement any detection logic.
    """

    def __init__(self, clock: Clock, bus: Optional[EventBus] = None) -> None:
        """
        Initialize an empty platform.

        Args:
            clock: Clock shared by every accessory
            bus: Optional EventBus shared by every accessory
        """
        self.clock = clock
        self.bus = bus
        self._accessories: Dict[str, DryerAccessory] = {}

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any],
        clock: Clock,
        bus: Optional[EventBus] = None,
    ) -> "DryerPlatform":
        """
        Build a platform and discover its devices.

        Args:
            config: Platform config ({"devices": [...]})
            clock: Clock shared by every accessory
            bus: Optional EventBus

        Returns:
            The populated platform

        Raises:
            ConfigurationError: If any device block is invalid
        """
        platform = cls(clock, bus)
        platform.discover_devices(config.get("devices", []))
        return platform

    def discover_devices(self, devices: List[Mapping[str, Any]]) -> List[DryerAccessory]:
        """
        Register an accessory for every device block.

        Args:
            devices: Device configuration blocks, each with a "name"

        Returns:
            The accessories created
        """
        created = []
        for device in devices:
            name = device.get("name")
            if not name:
                raise ConfigurationError(f"Device config is missing a name: {dict(device)}")
            created.append(self.add_accessory(name, device))

        logger.info(f"Discovered {len(created)} dryer accessories")
        return created

    def add_accessory(self, name: str, config: Mapping[str, Any]) -> DryerAccessory:
        """
        Create and register one accessory.

        Args:
            name: Display name (must be unique)
            config: Device configuration block

        Returns:
            The created accessory

        Raises:
            ConfigurationError: If the name is taken or the config is invalid
        """
        if self.get_by_name(name):
            raise ConfigurationError(f"Accessory with name '{name}' already exists")

        accessory = DryerAccessory(name, config, self.clock, self.bus)
        self._accessories[accessory.id] = accessory
        logger.info(f"Registered accessory: {accessory.id} ({name})")
        return accessory

    def get_accessory(self, accessory_id: str) -> Optional[DryerAccessory]:
        """
        Get an accessory by ID.

        Args:
            accessory_id: The accessory ID

        Returns:
            The DryerAccessory or None if not found
        """
        return self._accessories.get(accessory_id)

    def get_by_name(self, name: str) -> Optional[DryerAccessory]:
        """Get an accessory by display name."""
        for accessory in self._accessories.values():
            if accessory.name == name:
                return accessory
        return None

    def all_accessories(self) -> List[DryerAccessory]:
        """
        Get all accessories.

        Returns:
            List of all accessories
        """
        return list(self._accessories.values())

    def remove_accessory(self, accessory_id: str) -> None:
        """
        Remove an accessory and cancel its timers.

        Args:
            accessory_id: The accessory ID

        Raises:
            ValueError: If the accessory doesn't exist
        """
        accessory = self._accessories.pop(accessory_id, None)
        if accessory is None:
            raise ValueError(f"Accessory '{accessory_id}' does not exist")

        accessory.shutdown()
        logger.info(f"Removed accessory: {accessory_id} ({accessory.name})")

    def shutdown(self) -> None:
        """Cancel timers on every accessory."""
        for accessory in self._accessories.values():
            accessory.shutdown()

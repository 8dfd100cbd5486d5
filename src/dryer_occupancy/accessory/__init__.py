"""
Accessory layer for dryer-occupancy.

Binds detectors to switch and occupancy-sensor characteristics and manages
the set of configured dryers.
"""

from .module import DryerAccessory, accessory_id_for
from .platform import DryerPlatform

__all__ = [
    "DryerAccessory",
    "DryerPlatform",
    "accessory_id_for",
]

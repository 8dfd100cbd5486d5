"""
Core components of dryer-occupancy.

This package contains:
- bus: Event Bus implementation
- clock: Clock abstraction and implementations
- duration: Human-readable duration parsing
"""

from dryer_occupancy.core.bus import Event, EventBus, EventFilter
from dryer_occupancy.core.clock import AsyncioClock, Clock, ManualClock, TimerHandle
from dryer_occupancy.core.duration import format_duration, parse_duration

__all__ = [
    "Event",
    "EventBus",
    "EventFilter",
    "Clock",
    "ManualClock",
    "AsyncioClock",
    "TimerHandle",
    "parse_duration",
    "format_duration",
]

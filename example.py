#!/usr/bin/env python3
"""
Quick example demonstrating dryer-occupancy basic usage.

Run with: PYTHONPATH=src python3 example.py
"""

from dryer_occupancy import DryerPlatform, Event, EventBus, ManualClock

print("=" * 60)
print("dryer-occupancy Example")
print("=" * 60)

# 1. Kernel components
print("\n1. Creating clock and event bus...")
clock = ManualClock()
bus = EventBus()


def on_event(event: Event) -> None:
    print(f"   → [{clock.now() / 1000:>6.1f}s] {event.type}: {event.payload}")


bus.subscribe(on_event)
print("   ✓ ManualClock and EventBus created")

# 2. Discover accessories from a platform config
print("\n2. Discovering devices...")
platform = DryerPlatform.from_config(
    {
        "devices": [
            {"name": "Dryer", "minimumTime": "10 minutes"},
            {
                "name": "Basement Dryer",
                "mode": "windowed",
                "windowDurationSec": 30,
                "numberOfEvents": 3,
                "offTimeSpanSec": 120,
            },
        ]
    },
    clock,
    bus,
)
for accessory in platform.all_accessories():
    print(f"   ✓ {accessory.name} ({accessory.mode.value}, id={accessory.id})")

dryer = platform.get_by_name("Dryer")
basement = platform.get_by_name("Basement Dryer")

# 3. Direct mode: a smart plug reports power
print("\n3. Direct mode: power on, wait 10 minutes, power off...")
dryer.set_on(True)
clock.advance(10 * 60 * 1000)
print(f"   Occupied: {dryer.get_occupied().name}")
dryer.set_on(False)
print(f"   Occupied: {dryer.get_occupied().name}")

# 4. Windowed mode: vibration pulses every 5 seconds
print("\n4. Windowed mode: vibration pulses every 5s for one minute...")
for _ in range(12):
    basement.set_on(True)
    clock.advance(5_000)
print(f"   Occupied: {basement.get_occupied().name}")

print("\n   ...then silence for 2 minutes")
clock.advance(2 * 60 * 1000)
print(f"   Occupied: {basement.get_occupied().name}")

print("\n" + "=" * 60)
print("Example complete!")
print("=" * 60)

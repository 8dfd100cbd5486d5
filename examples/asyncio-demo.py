#!/usr/bin/env python3
"""
Dryer Detection Demo - Asyncio Clock

Drives a windowed detector from a simulated vibration sensor in real time.
Timings are scaled down so the demo finishes in a few seconds.

Run with: PYTHONPATH=src python3 examples/asyncio-demo.py
"""

import asyncio
import logging
import random

from dryer_occupancy import (
    AsyncioClock,
    DryerAccessory,
    Event,
    EventBus,
    EventFilter,
    WindowedEventConfig,
)


async def vibration_sensor(accessory: DryerAccessory, pulses: int, spacing: float) -> None:
    """Pulse the accessory's switch like a vibration sensor would."""
    for _ in range(pulses):
        accessory.set_on(True)
        await asyncio.sleep(spacing * random.uniform(0.5, 1.5))


async def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(name)s - %(levelname)s - %(message)s")

    print("=" * 70)
    print("Dryer Detection Demo - Asyncio Clock")
    print("=" * 70)

    clock = AsyncioClock()
    bus = EventBus()
    start = clock.now()

    def on_change(event: Event) -> None:
        elapsed = (clock.now() - start) / 1000
        print(f"   → [{elapsed:5.2f}s] dryer occupied={event.payload['occupied']}")

    bus.subscribe(on_change, EventFilter(event_type="occupancy.changed"))

    config = WindowedEventConfig(window_duration_sec=1, number_of_events=4, off_time_span_sec=2)
    accessory = DryerAccessory("Dryer", config, clock, bus)

    print("\n1. Sparse vibration (door slam, footsteps)...")
    await vibration_sensor(accessory, pulses=3, spacing=0.6)

    print("\n2. Dryer tumbling...")
    await vibration_sensor(accessory, pulses=20, spacing=0.1)

    print("\n3. Waiting for the off delay...")
    await asyncio.sleep(2.5)

    print(f"\nFinal state: {accessory.get_occupied().name}")
    accessory.shutdown()


if __name__ == "__main__":
    asyncio.run(main())

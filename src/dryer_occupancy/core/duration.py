"""
Human-readable duration parsing.

Accepts the strings users put in accessory configuration, e.g.
"10 minutes", "1h 30m", "90s", "1 hour and 15 mins". A bare number is
seconds.
"""

import re
from datetime import timedelta
from typing import Union

from dryer_occupancy.exceptions import ConfigurationError

DurationLike = Union[str, int, float, timedelta]

# Milliseconds per unit, keyed by every accepted spelling
UNITS: dict[str, int] = {}
for _names, _ms in (
    (("ms", "msec", "msecs", "milli", "millis", "millisecond", "milliseconds"), 1),
    (("s", "sec", "secs", "second", "seconds"), 1_000),
    (("m", "min", "mins", "minute", "minutes"), 60_000),
    (("h", "hr", "hrs", "hour", "hours"), 3_600_000),
    (("d", "day", "days"), 86_400_000),
    (("w", "wk", "wks", "week", "weeks"), 604_800_000),
    # 4 weeks per month, 365.25 days per year
    (("mon", "mth", "mths", "month", "months"), 2_419_200_000),
    (("y", "yr", "yrs", "year", "years"), 31_557_600_000),
):
    for _name in _names:
        UNITS[_name] = _ms

_TOKEN = re.compile(r"(\d+(?:\.\d+)?|\.\d+)(?:\s*(?!and\b)([a-z]+))?")
_FILLER = re.compile(r"[\s,]+|\band\b")


def parse_duration(value: DurationLike) -> int:
    """Parse a duration into whole milliseconds.

    Args:
        value: Duration string, number of seconds, or timedelta.

    Returns:
        Duration in milliseconds (always positive).

    Raises:
        ConfigurationError: If the value cannot be parsed or is not positive.
    """
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid duration: {value!r}")

    if isinstance(value, timedelta):
        total = value.total_seconds() * 1000
    elif isinstance(value, (int, float)):
        total = value * 1000
    elif isinstance(value, str):
        total = _parse_string(value)
    else:
        raise ConfigurationError(f"Invalid duration type: {type(value).__name__}")

    ms = round(total)
    if ms <= 0:
        raise ConfigurationError(f"Duration must be positive: {value!r}")
    return ms


def _parse_string(text: str) -> float:
    """Sum every <number><unit> group in text, rejecting leftovers."""
    remaining = text.strip().lower()
    if not remaining:
        raise ConfigurationError("Duration string is empty")

    total = 0.0
    pos = 0
    matched = False
    while pos < len(remaining):
        filler = _FILLER.match(remaining, pos)
        if filler and filler.end() > pos:
            pos = filler.end()
            continue

        token = _TOKEN.match(remaining, pos)
        if not token:
            raise ConfigurationError(f"Unparsable duration: {text!r}")

        amount, unit = token.groups()
        if unit and unit not in UNITS:
            raise ConfigurationError(f"Unknown duration unit {unit!r} in {text!r}")

        total += float(amount) * UNITS[unit or "s"]
        matched = True
        pos = token.end()

    if not matched:
        raise ConfigurationError(f"Unparsable duration: {text!r}")
    return total


def format_duration(ms: int) -> str:
    """Render milliseconds compactly for log messages (e.g. "1h 30m")."""
    if ms < 1000:
        return f"{ms}ms"

    parts = []
    for suffix, size in (("d", 86_400_000), ("h", 3_600_000), ("m", 60_000), ("s", 1_000)):
        count, ms = divmod(ms, size)
        if count:
            parts.append(f"{count}{suffix}")
    if ms:
        parts.append(f"{ms}ms")
    return " ".join(parts)

"""Time units for the polling delay — name lookup and exact integer conversion.

Units sit on a nanosecond ladder. Converting to a finer unit is exact,
converting to a coarser unit truncates toward zero (``90 seconds`` → ``1 minute``).
"""

from __future__ import annotations

from enum import Enum

_NANOS_PER_SECOND = 1_000_000_000


class TimeUnit(Enum):
    """Supported delay granularities, valued by their length in nanoseconds."""

    NANOSECONDS = 1
    MICROSECONDS = 1_000
    MILLISECONDS = 1_000_000
    SECONDS = _NANOS_PER_SECOND
    MINUTES = 60 * _NANOS_PER_SECOND
    HOURS = 60 * 60 * _NANOS_PER_SECOND
    DAYS = 24 * 60 * 60 * _NANOS_PER_SECOND

    @property
    def nanos(self) -> int:
        return self.value

    @property
    def label(self) -> str:
        return self.name.lower()

    def to_seconds(self, amount: int) -> float:
        """Length of ``amount`` of this unit in (fractional) seconds."""
        return amount * self.nanos / _NANOS_PER_SECOND


def resolve_unit(name: str) -> TimeUnit | None:
    """Case-insensitive lookup of a unit name, ``None`` when unknown."""
    if not name:
        return None
    key = name.strip().upper()
    return TimeUnit.__members__.get(key)


def convert(amount: int, from_unit: TimeUnit, to_unit: TimeUnit) -> int:
    """Convert ``amount`` from one unit to another, truncating toward zero."""
    if from_unit is to_unit:
        return amount
    magnitude = abs(amount) * from_unit.nanos // to_unit.nanos
    return magnitude if amount >= 0 else -magnitude


def is_compatible(delay_unit: TimeUnit, randomness_unit: TimeUnit) -> bool:
    """True when ``randomness_unit`` is at least as precise as ``delay_unit``."""
    return convert(1, delay_unit, randomness_unit) != 0

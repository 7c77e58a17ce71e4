"""Polling policy and poll outcome models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from checkthesite.scheduling.timeunit import TimeUnit, convert, is_compatible


class Outcome(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    FAILED = "failed"


class InvalidPolicyError(ValueError):
    """Raised when a polling policy violates its delay or unit invariants."""


@dataclass(frozen=True)
class PollingPolicy:
    """Where and how often to poll.

    ``min_delay``/``max_delay`` are given in ``delay_unit``; the random delay
    between two polls is drawn in ``randomness_unit``, which therefore must be
    at least as precise as ``delay_unit``. With ``3..5 minutes`` and a
    randomness unit of seconds, polls land anywhere in ``180..300`` seconds.
    """

    url: str
    min_delay: int
    max_delay: int
    delay_unit: TimeUnit
    randomness_unit: TimeUnit
    periodic_scheduling: bool = False
    verbose_logging: bool = False

    def __post_init__(self) -> None:
        if self.min_delay > self.max_delay:
            raise InvalidPolicyError(
                f"min_delay ({self.min_delay}) is larger than max_delay ({self.max_delay})"
            )
        if not is_compatible(self.delay_unit, self.randomness_unit):
            raise InvalidPolicyError(
                f"randomness unit {self.randomness_unit.label} is less precise "
                f"than delay unit {self.delay_unit.label}"
            )

    def delay_range(self) -> tuple[int, int]:
        """Inclusive delay bounds expressed in ``randomness_unit``."""
        return (
            convert(self.min_delay, self.delay_unit, self.randomness_unit),
            convert(self.max_delay, self.delay_unit, self.randomness_unit),
        )

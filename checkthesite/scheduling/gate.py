"""Suspend/confirm gate — the one flag shared by the timer and the operator."""

from __future__ import annotations

import logging
import threading

from checkthesite.scheduling.policy import Outcome

logger = logging.getLogger(__name__)


class SchedulingGate:
    """Thread-safe on/off switch for automatic rescheduling.

    Turned off by a POSITIVE outcome so a single change does not trigger a
    notification on every poll; turned back on by an explicit confirm.
    """

    def __init__(self) -> None:
        self._enabled = True
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        with self._lock:
            return self._enabled

    def disable(self) -> bool:
        """Switch off; returns the previous value."""
        with self._lock:
            previous, self._enabled = self._enabled, False
        return previous

    def enable(self) -> bool:
        """Switch on; returns the previous value."""
        with self._lock:
            previous, self._enabled = self._enabled, True
        return previous

    def on_outcome(self, outcome: Outcome) -> None:
        if outcome is Outcome.POSITIVE:
            self.disable()
            logger.info(
                "Turning off automatic scheduling due to a POSITIVE result. "
                'Type "confirm" to re-enable automatic scheduling'
            )

"""Outcome listener bus — ordered, synchronous fan-out of poll outcomes."""

from __future__ import annotations

import logging
from collections.abc import Callable

from checkthesite.scheduling.policy import Outcome

logger = logging.getLogger(__name__)

OutcomeListener = Callable[[Outcome], None]


def _listener_name(listener: OutcomeListener) -> str:
    return getattr(listener, "__qualname__", None) or repr(listener)


class OutcomeListenerBus:
    """Calls every subscribed listener, in registration order, after each poll.

    A listener that raises is logged and skipped; the remaining listeners
    still run and nothing propagates back to the poll scheduler.
    """

    def __init__(self) -> None:
        self._listeners: list[OutcomeListener] = []

    def subscribe(self, listener: OutcomeListener) -> None:
        self._listeners.append(listener)
        logger.debug("Subscribed outcome listener %s (#%d)", _listener_name(listener), len(self._listeners))

    def publish(self, outcome: Outcome) -> None:
        for listener in list(self._listeners):
            try:
                listener(outcome)
            except Exception:
                logger.warning(
                    "Outcome listener %s failed for %s", _listener_name(listener), outcome.name,
                    exc_info=True,
                )

    def __len__(self) -> int:
        return len(self._listeners)

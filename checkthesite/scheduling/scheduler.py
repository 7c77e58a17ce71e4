"""Poll scheduler — randomized one-shot polling with suspend/confirm.

Lifecycle:
    scheduler = PollScheduler(policy, checker, fetcher, bus)
    bus.subscribe(notifier)          # optional subscribers
    scheduler.start()                # arms the first poll
    ...
    scheduler.confirm()              # after a POSITIVE result
    scheduler.shutdown()

Every poll runs on a single worker thread; a ``threading.Timer`` only hands
the poll over to it, so at most one poll is ever in flight. After each poll
the outcome is published on the listener bus. With periodic scheduling the
bus carries, in this order, the gate listener (registered here, in the
constructor), any notifiers, and the re-arm listener (registered in
``start``). The re-arm listener therefore always sees the gate already
switched off by a POSITIVE result.
"""

from __future__ import annotations

import logging
import random
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Protocol

import httpx

from checkthesite.checkers.base import CheckerHandle, SiteCheckError
from checkthesite.scheduling.gate import SchedulingGate
from checkthesite.scheduling.listeners import OutcomeListenerBus
from checkthesite.scheduling.policy import Outcome, PollingPolicy
from checkthesite.scheduling.timeunit import convert

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    def get(self, url: str) -> httpx.Response: ...


class Cancellable(Protocol):
    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], Cancellable]


def start_daemon_timer(seconds: float, callback: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(seconds, callback)
    timer.daemon = True
    timer.start()
    return timer


class SchedulerState(str, Enum):
    IDLE = "idle"
    ARMED = "armed"
    RUNNING = "running"
    SUSPENDED = "suspended"


class ConfirmResult(str, Enum):
    CONFIRMED = "confirmed"
    ALREADY_ENABLED = "already_enabled"
    UNSUPPORTED = "unsupported"
    SHUT_DOWN = "shut_down"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class PollScheduler:
    """Schedules polls of ``policy.url`` and decides whether to re-arm."""

    def __init__(
        self,
        policy: PollingPolicy,
        checker: CheckerHandle,
        fetcher: Fetcher,
        bus: OutcomeListenerBus | None = None,
        gate: SchedulingGate | None = None,
        *,
        timer_factory: TimerFactory = start_daemon_timer,
        rng: random.Random | None = None,
    ) -> None:
        self.policy = policy
        self.checker = checker
        self.fetcher = fetcher
        self.bus = bus if bus is not None else OutcomeListenerBus()
        self.gate = gate if gate is not None else SchedulingGate()
        self._timer_factory = timer_factory
        self._rng = rng or random.Random()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="poll")
        self._lock = threading.Lock()
        self._timer: Cancellable | None = None
        self._state = SchedulerState.IDLE
        self._last_outcome: Outcome | None = None
        self._last_poll_at: str | None = None
        self._next_poll_at: str | None = None
        self._started = False
        self._shut_down = False

        if policy.periodic_scheduling:
            self.bus.subscribe(self.gate.on_outcome)

    # -- public API ------------------------------------------------------------

    @property
    def state(self) -> SchedulerState:
        with self._lock:
            return self._state

    def start(self) -> None:
        """Register the post-poll policy listener and arm the first poll."""
        if self._started:
            logger.warning("Poll scheduler already started")
            return
        self._started = True

        if self.policy.periodic_scheduling:
            self.bus.subscribe(self._reschedule_after)
            logger.info("Enabled periodic scheduling of HTTP requests")
        else:
            self.bus.subscribe(self._log_single_shot)

        logger.info(
            "Scheduling delay is between %d and %d %s",
            self.policy.min_delay, self.policy.max_delay, self.policy.delay_unit.label,
        )
        self.schedule()

    def schedule(self) -> int | None:
        """Arm a one-shot poll after a random delay within the policy range.

        Returns the delay in randomness units, or None when nothing was armed.
        """
        if self._shut_down:
            logger.warning("Tried to schedule request, but the poll scheduler is shut down")
            return None
        if not self.gate.enabled:
            logger.warning("Tried to schedule request, but scheduling is disabled. Scheduling prevented")
            return None

        low, high = self.policy.delay_range()
        delay = self._rng.randint(low, high)
        seconds = self.policy.randomness_unit.to_seconds(delay)

        with self._lock:
            if self._shut_down:
                return None
            if self._state is SchedulerState.ARMED:
                logger.warning("A request is already scheduled, ignoring additional schedule call")
                return None
            self._timer = self._timer_factory(seconds, self._submit_poll)
            self._state = SchedulerState.ARMED
            self._next_poll_at = (_now() + timedelta(seconds=seconds)).isoformat()

        delay_unit, randomness_unit = self.policy.delay_unit, self.policy.randomness_unit
        in_delay_unit = convert(delay, randomness_unit, delay_unit)
        if delay_unit is randomness_unit:
            logger.info("Scheduled HTTP request which will be executed in %d %s", delay, delay_unit.label)
        else:
            logger.info(
                "Scheduled HTTP request which will be executed in ~%d %s (%d %s)",
                in_delay_unit, delay_unit.label, delay, randomness_unit.label,
            )
        return delay

    def perform_poll(self) -> Outcome:
        """Poll right now in place of a pending timer. Never raises."""
        with self._lock:
            timer, self._timer = self._timer, None
            if timer is not None:
                timer.cancel()
                self._state = SchedulerState.IDLE
        return self._run_poll()

    def _run_poll(self) -> Outcome:
        """Fetch, check and publish the outcome. Never raises."""
        url = self.policy.url
        with self._lock:
            self._timer = None
            self._state = SchedulerState.RUNNING

        logger.info("Performing scheduled HTTP request to %s", url)
        outcome = Outcome.FAILED
        try:
            response = self.fetcher.get(url)
            if not response.is_success:
                logger.error("Response status was %d %s", response.status_code, response.reason_phrase)
            else:
                outcome = Outcome.POSITIVE if self.checker.check(response) else Outcome.NEGATIVE
                logger.info("HTTP request successful, site check yielded result %s", outcome.name)
        except SiteCheckError as e:
            logger.error("SiteChecker error: %s", e)
        except httpx.HTTPError as e:
            logger.error("HTTP request to %s failed: %s", url, e)
        except Exception:
            logger.exception("Error while performing request")

        if outcome is Outcome.FAILED:
            logger.info("HTTP request unsuccessful with result %s", outcome.name)

        with self._lock:
            self._last_outcome = outcome
            self._last_poll_at = _now().isoformat()

        self.bus.publish(outcome)

        with self._lock:
            # listeners may already have re-armed the timer
            if self._state is SchedulerState.RUNNING:
                self._state = SchedulerState.IDLE if self.gate.enabled else SchedulerState.SUSPENDED
                self._next_poll_at = None
        return outcome

    def confirm(self) -> ConfirmResult:
        """Re-enable automatic scheduling after a POSITIVE result."""
        if self._shut_down:
            logger.warning("Cannot confirm, the poll scheduler is shut down")
            return ConfirmResult.SHUT_DOWN
        if not self.policy.periodic_scheduling:
            logger.info("Command not supported: periodic scheduling is disabled in the configuration")
            return ConfirmResult.UNSUPPORTED
        if self.gate.enable():
            logger.info("Automatic scheduling is already enabled, there's nothing to confirm")
            return ConfirmResult.ALREADY_ENABLED

        logger.info("Thanks for confirming the previous POSITIVE result! Automatic scheduling is enabled again")
        with self._lock:
            if self._state is SchedulerState.SUSPENDED:
                self._state = SchedulerState.IDLE
        self.schedule()
        return ConfirmResult.CONFIRMED

    def status(self) -> dict[str, Any]:
        low, high = self.policy.delay_range()
        with self._lock:
            return {
                "url": self.policy.url,
                "checker": self.checker.name,
                "periodic_scheduling": self.policy.periodic_scheduling,
                "scheduling_enabled": self.gate.enabled,
                "state": self._state.value,
                "last_outcome": self._last_outcome.value if self._last_outcome else None,
                "last_poll_at": self._last_poll_at,
                "next_poll_at": self._next_poll_at,
                "delay_range": [low, high],
                "randomness_unit": self.policy.randomness_unit.label,
            }

    def shutdown(self) -> None:
        """Cancel a pending poll and stop the worker thread."""
        with self._lock:
            self._shut_down = True
            timer, self._timer = self._timer, None
            self._state = SchedulerState.IDLE
            self._next_poll_at = None
        if timer is not None:
            timer.cancel()
        self._executor.shutdown(wait=False, cancel_futures=True)
        logger.info("Poll scheduler stopped")

    # -- internals -------------------------------------------------------------

    def _submit_poll(self) -> Future[Outcome] | None:
        try:
            return self._executor.submit(self._run_poll)
        except RuntimeError:
            logger.info("Poll scheduler is shut down, dropping scheduled request")
            return None

    def _reschedule_after(self, outcome: Outcome) -> None:
        if not self.gate.enabled:
            logger.info("Automatic scheduling prevented because scheduling is disabled")
            return
        self.schedule()

    def _log_single_shot(self, outcome: Outcome) -> None:
        logger.info("Periodic scheduling is disabled in the configuration, so no further requests will be scheduled")

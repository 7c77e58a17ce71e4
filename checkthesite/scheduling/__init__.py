"""Polling core — time units, policy, listener bus, gate, scheduler."""

from checkthesite.scheduling.gate import SchedulingGate
from checkthesite.scheduling.listeners import OutcomeListener, OutcomeListenerBus
from checkthesite.scheduling.policy import InvalidPolicyError, Outcome, PollingPolicy
from checkthesite.scheduling.scheduler import ConfirmResult, PollScheduler, SchedulerState
from checkthesite.scheduling.timeunit import TimeUnit, convert, is_compatible, resolve_unit

__all__ = [
    "ConfirmResult",
    "InvalidPolicyError",
    "Outcome",
    "OutcomeListener",
    "OutcomeListenerBus",
    "PollScheduler",
    "PollingPolicy",
    "SchedulerState",
    "SchedulingGate",
    "TimeUnit",
    "convert",
    "is_compatible",
    "resolve_unit",
]

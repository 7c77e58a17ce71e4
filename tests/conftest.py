"""Shared test fixtures."""

from __future__ import annotations

import random

import httpx
import pytest

from checkthesite.checkers.base import CheckerConfig, CheckerHandle, SiteChecker
from checkthesite.scheduling import OutcomeListenerBus, PollingPolicy, PollScheduler, TimeUnit


class FakeTimer:
    """Stands in for ``threading.Timer``; fires only when told to."""

    def __init__(self, seconds: float, callback) -> None:
        self.seconds = seconds
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self):
        """Run the callback; for scheduler timers that is the submitted poll future."""
        return self.callback()


class FakeTimerFactory:
    def __init__(self) -> None:
        self.timers: list[FakeTimer] = []

    def __call__(self, seconds: float, callback) -> FakeTimer:
        timer = FakeTimer(seconds, callback)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> FakeTimer:
        return self.timers[-1]


class StubFetcher:
    """Returns a canned response (or raises) and records requested URLs."""

    def __init__(self, response: httpx.Response | None = None, error: Exception | None = None) -> None:
        self.response = response if response is not None else httpx.Response(200, text="hello")
        self.error = error
        self.calls: list[str] = []

    def get(self, url: str) -> httpx.Response:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.response


class StubChecker(SiteChecker):
    """Returns ``result`` (or raises ``error``) and counts invocations."""

    def __init__(self, result: bool = False, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.calls = 0

    def check(self, response: httpx.Response, config: CheckerConfig) -> bool:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def timers() -> FakeTimerFactory:
    return FakeTimerFactory()


@pytest.fixture
def periodic_policy() -> PollingPolicy:
    return PollingPolicy(
        url="https://example.com/shop",
        min_delay=3,
        max_delay=5,
        delay_unit=TimeUnit.MINUTES,
        randomness_unit=TimeUnit.SECONDS,
        periodic_scheduling=True,
    )


@pytest.fixture
def single_shot_policy() -> PollingPolicy:
    return PollingPolicy(
        url="https://example.com/shop",
        min_delay=1,
        max_delay=2,
        delay_unit=TimeUnit.SECONDS,
        randomness_unit=TimeUnit.SECONDS,
    )


@pytest.fixture
def make_scheduler(timers):
    """Factory for schedulers wired to fake timers; shut down after the test."""
    created: list[PollScheduler] = []

    def _make(
        policy: PollingPolicy,
        checker: SiteChecker | None = None,
        fetcher: StubFetcher | None = None,
        bus: OutcomeListenerBus | None = None,
        seed: int = 7,
    ) -> PollScheduler:
        scheduler = PollScheduler(
            policy,
            CheckerHandle(checker or StubChecker()),
            fetcher or StubFetcher(),
            bus,
            timer_factory=timers,
            rng=random.Random(seed),
        )
        created.append(scheduler)
        return scheduler

    yield _make
    for scheduler in created:
        scheduler.shutdown()

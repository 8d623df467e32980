"""
Name: Attempt Limiter Tests

Responsibilities:
  - Lockout after max attempts and retry_after reporting
  - Window expiry and lockout expiry with an injected clock
  - Reset and cleanup behaviour
"""

from datetime import datetime, timedelta, timezone

import pytest
from app.application.rate_limiting import (
    AttemptLimiter,
    login_key,
    register_key,
    too_many_attempts_message,
)

pytestmark = pytest.mark.unit


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def limiter(clock) -> AttemptLimiter:
    return AttemptLimiter(
        3, timedelta(minutes=15), timedelta(minutes=30), clock=clock
    )


def test_keys_are_namespaced():
    assert login_key(" Ada@Example.com ") == "login:ada@example.com"
    assert register_key("10.0.0.1") == "register:10.0.0.1"


def test_message_includes_seconds():
    assert too_many_attempts_message(90) == "Too many attempts. Try again after 90 seconds"


def test_allows_until_max_then_locks(limiter):
    key = "login:a@b.co"

    for _ in range(2):
        limiter.record_failure(key)
        assert limiter.check(key).allowed

    limiter.record_failure(key)
    decision = limiter.check(key)

    assert not decision.allowed
    assert decision.retry_after == 30 * 60


def test_retry_after_counts_down(limiter, clock):
    key = "k"
    for _ in range(3):
        limiter.record_failure(key)

    clock.advance(minutes=10)

    assert limiter.check(key).retry_after == 20 * 60


def test_lockout_expires(limiter, clock):
    key = "k"
    for _ in range(3):
        limiter.record_failure(key)

    clock.advance(minutes=30)

    assert limiter.check(key).allowed
    assert limiter.attempts(key) == 0


def test_window_expiry_restarts_counting(limiter, clock):
    key = "k"
    limiter.record_failure(key)
    limiter.record_failure(key)

    clock.advance(minutes=16)
    limiter.record_failure(key)

    assert limiter.attempts(key) == 1
    assert limiter.check(key).allowed


def test_reset_clears_record(limiter):
    limiter.record_failure("k")
    limiter.reset("k")
    assert limiter.attempts("k") == 0


def test_keys_are_independent(limiter):
    for _ in range(3):
        limiter.record_failure("a")
    assert limiter.check("b").allowed


def test_cleanup_drops_stale_entries(limiter, clock):
    limiter.record_failure("fresh-window")
    for _ in range(3):
        limiter.record_failure("locked")

    clock.advance(minutes=20)
    assert limiter.cleanup() == 1  # fresh-window vencida; locked sigue bloqueada

    clock.advance(minutes=15)
    assert limiter.cleanup() == 1


@pytest.mark.parametrize(
    "args",
    [
        (0, timedelta(minutes=1), timedelta(minutes=1)),
        (3, timedelta(0), timedelta(minutes=1)),
        (3, timedelta(minutes=1), timedelta(0)),
    ],
)
def test_invalid_configuration(args):
    with pytest.raises(ValueError):
        AttemptLimiter(*args)

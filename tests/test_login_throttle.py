"""Unit tests for the failed-login throttle."""

import threading
from unittest.mock import Mock

import pytest

from app.adapters.attempt_store.base import AttemptRecord
from app.adapters.attempt_store.in_memory import InMemoryAttemptStore
from app.services.login_throttle import LoginThrottle


def _fail(throttle: LoginThrottle, identity: str, times: int) -> None:
    for _ in range(times):
        throttle.record_failure(identity)


def test_unknown_identity_is_allowed(throttle: LoginThrottle) -> None:
    decision = throttle.check("nobody@x.com")

    assert decision.allowed is True
    assert decision.failure_count == 0
    assert decision.retry_after_seconds is None


@pytest.mark.parametrize("failures", [1, 2, 3, 4])
def test_allowed_below_threshold(throttle: LoginThrottle, failures: int) -> None:
    _fail(throttle, "a@x.com", failures)

    decision = throttle.check("a@x.com")
    assert decision.allowed is True
    assert decision.failure_count == failures


def test_blocked_after_five_failures(throttle: LoginThrottle) -> None:
    _fail(throttle, "b@x.com", 5)

    decision = throttle.check("b@x.com")
    assert decision.allowed is False
    assert decision.failure_count == 5
    assert decision.retry_after_seconds == 1800


def test_fifth_failure_reports_lockout(throttle: LoginThrottle) -> None:
    _fail(throttle, "b@x.com", 4)

    decision = throttle.record_failure("b@x.com")
    assert decision.allowed is False


def test_check_does_not_mutate(throttle: LoginThrottle) -> None:
    _fail(throttle, "a@x.com", 2)

    for _ in range(10):
        throttle.check("a@x.com")

    assert throttle.check("a@x.com").failure_count == 2


def test_stays_blocked_until_window_elapses(clock: Mock) -> None:
    throttle = LoginThrottle(clock=clock)
    _fail(throttle, "b@x.com", 5)

    clock.return_value += 1799
    decision = throttle.check("b@x.com")
    assert decision.allowed is False
    assert decision.retry_after_seconds == 1

    clock.return_value += 1
    decision = throttle.check("b@x.com")
    assert decision.allowed is True
    assert decision.failure_count == 0


def test_counter_restarts_from_zero_after_lockout(clock: Mock) -> None:
    throttle = LoginThrottle(clock=clock)
    _fail(throttle, "b@x.com", 5)

    clock.return_value += 1800
    decision = throttle.record_failure("b@x.com")

    assert decision.allowed is True
    assert decision.failure_count == 1


def test_late_failure_does_not_extend_lockout(clock: Mock) -> None:
    store = InMemoryAttemptStore()
    throttle = LoginThrottle(store=store, clock=clock)
    _fail(throttle, "b@x.com", 5)
    expires_at = store.get("b@x.com").lockout_expires_at

    clock.return_value += 600
    throttle.record_failure("b@x.com")

    record = store.get("b@x.com")
    assert record.failure_count == 6
    assert record.lockout_expires_at == expires_at

    clock.return_value += 1200
    assert throttle.check("b@x.com").allowed is True


@pytest.mark.parametrize("failures", [0, 1, 4, 5, 7])
def test_success_resets_at_any_count(throttle: LoginThrottle, failures: int) -> None:
    _fail(throttle, "c@x.com", failures)

    throttle.record_success("c@x.com")

    decision = throttle.check("c@x.com")
    assert decision.allowed is True
    assert decision.failure_count == 0


def test_success_without_record_is_noop(throttle: LoginThrottle) -> None:
    throttle.record_success("ghost@x.com")
    throttle.record_success("ghost@x.com")

    assert throttle.check("ghost@x.com").allowed is True


def test_four_failures_then_success_deletes_record(clock: Mock) -> None:
    store = InMemoryAttemptStore()
    throttle = LoginThrottle(store=store, clock=clock)
    _fail(throttle, "a@x.com", 4)

    throttle.record_success("a@x.com")

    assert store.get("a@x.com") is None
    assert throttle.check("a@x.com").allowed is True


def test_expiry_after_success_is_noop(clock: Mock) -> None:
    store = InMemoryAttemptStore()
    throttle = LoginThrottle(store=store, clock=clock)
    _fail(throttle, "d@x.com", 5)
    throttle.record_success("d@x.com")

    clock.return_value += 3600
    assert throttle.check("d@x.com").allowed is True
    assert store.get("d@x.com") is None


def test_elapsed_lockout_record_is_dropped_on_check(clock: Mock) -> None:
    store = InMemoryAttemptStore()
    throttle = LoginThrottle(store=store, clock=clock)
    _fail(throttle, "e@x.com", 5)

    clock.return_value += 1800
    throttle.check("e@x.com")

    assert store.get("e@x.com") is None


def test_identities_are_isolated(throttle: LoginThrottle) -> None:
    _fail(throttle, "locked@x.com", 5)

    assert throttle.check("locked@x.com").allowed is False
    assert throttle.check("other@x.com").allowed is True


def test_custom_policy(clock: Mock) -> None:
    throttle = LoginThrottle(max_failures=2, lockout_seconds=60, clock=clock)
    _fail(throttle, "f@x.com", 2)

    assert throttle.check("f@x.com").retry_after_seconds == 60

    clock.return_value += 60
    assert throttle.check("f@x.com").allowed is True


def test_uses_injected_store() -> None:
    store = InMemoryAttemptStore()
    store.save("g@x.com", AttemptRecord(failure_count=5, lockout_expires_at=None))
    throttle = LoginThrottle(store=store)

    decision = throttle.check("g@x.com")
    assert decision.allowed is False
    assert decision.retry_after_seconds == 1800


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_failures": 0},
        {"lockout_seconds": 0},
    ],
)
def test_invalid_constructor_args(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        LoginThrottle(**kwargs)


def test_concurrent_failures_are_not_lost(clock: Mock) -> None:
    store = InMemoryAttemptStore()
    throttle = LoginThrottle(store=store, max_failures=1000, clock=clock)
    workers = 20
    per_worker = 25
    barrier = threading.Barrier(workers)

    def _worker() -> None:
        barrier.wait()
        _fail(throttle, "race@x.com", per_worker)

    threads = [threading.Thread(target=_worker) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert store.get("race@x.com").failure_count == workers * per_worker


def test_concurrent_failures_hit_threshold_exactly_once(clock: Mock) -> None:
    store = InMemoryAttemptStore()
    throttle = LoginThrottle(store=store, clock=clock)
    barrier = threading.Barrier(5)
    decisions = []

    def _worker() -> None:
        barrier.wait()
        decisions.append(throttle.record_failure("h@x.com"))

    threads = [threading.Thread(target=_worker) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(d.failure_count for d in decisions) == [1, 2, 3, 4, 5]
    assert [d.allowed for d in decisions].count(False) == 1
    assert throttle.check("h@x.com").allowed is False

from __future__ import annotations

import asyncio

import pytest

from core.config import RetryConfig
from core.errors import RetryExhaustedError
from core.retry import RetryExecutor
from fakes import RecordingSleep


class FlakyOperation:
    def __init__(self, failures: int, result: str = "ok") -> None:
        self.failures = failures
        self.result = result
        self.calls = 0
        self.errors: list[Exception] = []

    async def __call__(self) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            error = ConnectionError(f"failure {self.calls}")
            self.errors.append(error)
            raise error
        return self.result


def test_first_success_returns_without_waiting() -> None:
    sleep = RecordingSleep()
    executor = RetryExecutor(RetryConfig(max_attempts=3, base_delay=0.5), sleep=sleep)
    operation = FlakyOperation(failures=0)

    assert asyncio.run(executor.execute(operation, "send")) == "ok"
    assert operation.calls == 1
    assert sleep.delays == []


def test_succeeds_on_third_attempt_with_linear_backoff() -> None:
    sleep = RecordingSleep()
    executor = RetryExecutor(RetryConfig(max_attempts=3, base_delay=0.5), sleep=sleep)
    operation = FlakyOperation(failures=2, result="sent")

    assert asyncio.run(executor.execute(operation, "send")) == "sent"
    assert operation.calls == 3
    assert sleep.delays == [0.5, 1.0]


def test_exhausts_attempts_and_reports_last_error() -> None:
    sleep = RecordingSleep()
    executor = RetryExecutor(RetryConfig(max_attempts=3, base_delay=0.5), sleep=sleep)
    operation = FlakyOperation(failures=10)

    with pytest.raises(RetryExhaustedError) as excinfo:
        asyncio.run(executor.execute(operation, "delete message"))

    assert operation.calls == 3
    assert sleep.delays == [0.5, 1.0]
    assert excinfo.value.label == "delete message"
    assert excinfo.value.attempts == 3
    assert excinfo.value.last_error is operation.errors[-1]
    assert excinfo.value.__cause__ is operation.errors[-1]


def test_default_policy_matches_three_attempts() -> None:
    executor = RetryExecutor()
    assert executor.config.max_attempts == 3
    assert executor.delay_for(1) < executor.delay_for(2) < executor.delay_for(3)


def test_rejects_zero_attempts() -> None:
    with pytest.raises(ValueError):
        RetryExecutor(RetryConfig(max_attempts=0))

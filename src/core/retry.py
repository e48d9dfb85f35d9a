"""Bounded retry for outbound platform calls."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from core.config import RetryConfig
from core.errors import RetryExhaustedError

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[None]]


class RetryExecutor:
    """Run an operation up to ``max_attempts`` times with linear backoff.

    After failed attempt ``n`` the executor waits ``base_delay * n`` seconds
    before trying again. The operation is a zero-argument callable returning
    a fresh awaitable on every call, since it may run more than once; a send
    whose acknowledgement was lost can therefore be delivered twice.
    """

    def __init__(self, config: Optional[RetryConfig] = None, sleep: SleepFunc = asyncio.sleep) -> None:
        self._config = config or RetryConfig()
        if self._config.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._sleep = sleep

    @property
    def config(self) -> RetryConfig:
        return self._config

    def delay_for(self, attempt: int) -> float:
        return self._config.base_delay * attempt

    async def execute(self, operation: Callable[[], Awaitable[T]], label: str) -> T:
        """Return the first successful result or raise RetryExhaustedError."""

        max_attempts = self._config.max_attempts
        last_error: Optional[Exception] = None
        for attempt in range(1, max_attempts + 1):
            try:
                result = await operation()
            except Exception as exc:
                last_error = exc
                if attempt == max_attempts:
                    break
                delay = self.delay_for(attempt)
                LOGGER.warning(
                    "Attempt %s of %s failed for %s: %r. Retrying in %.2fs",
                    attempt,
                    max_attempts,
                    label,
                    exc,
                    delay,
                )
                await self._sleep(delay)
                continue
            if attempt > 1:
                LOGGER.info("Completed %s after %s attempts", label, attempt)
            return result

        assert last_error is not None
        LOGGER.error("Failed to complete %s after %s attempts: %r", label, max_attempts, last_error)
        raise RetryExhaustedError(label, max_attempts, last_error) from last_error

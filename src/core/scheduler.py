"""Delayed deletion of bot notices."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from core.errors import RetryExhaustedError
from core.ports import PlatformPort
from core.retry import RetryExecutor, SleepFunc

LOGGER = logging.getLogger(__name__)


class DeletionScheduler:
    """Fire-and-forget scheduler that deletes a message after a delay.

    Each deletion runs as its own asyncio task and cannot be cancelled once
    scheduled. Failures after retries are logged and dropped, which also
    covers messages that were already removed by someone else.
    """

    def __init__(
        self,
        platform: PlatformPort,
        retry: RetryExecutor,
        default_delay: float = 30.0,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self._platform = platform
        self._retry = retry
        self._default_delay = default_delay
        self._sleep = sleep
        # The event loop only keeps weak references to tasks.
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def schedule_delete(self, chat_id: int, message_id: int, delay: Optional[float] = None) -> None:
        """Delete ``message_id`` in ``chat_id`` once ``delay`` seconds pass.

        Must be called from a running event loop; returns immediately.
        """

        delay = self._default_delay if delay is None else delay
        LOGGER.info("Scheduling deletion of message %s in chat %s in %s seconds", message_id, chat_id, delay)
        task = asyncio.get_running_loop().create_task(self._delete_later(chat_id, message_id, delay))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def join(self) -> None:
        """Wait until every deletion scheduled so far has finished."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def _delete_later(self, chat_id: int, message_id: int, delay: float) -> None:
        await self._sleep(delay)
        LOGGER.info("Executing scheduled deletion of message %s in chat %s", message_id, chat_id)
        try:
            await self._retry.execute(
                lambda: self._platform.delete_message(chat_id, message_id),
                "delete delayed message",
            )
        except RetryExhaustedError as exc:
            LOGGER.error(
                "Failed to delete scheduled message %s in chat %s: %s",
                message_id,
                chat_id,
                exc.last_error,
            )

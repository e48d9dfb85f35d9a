from __future__ import annotations

import asyncio

from core.config import RetryConfig
from core.retry import RetryExecutor
from core.scheduler import DeletionScheduler
from fakes import FakePlatform, RecordingSleep, no_sleep


def _scheduler(platform: FakePlatform, sleep: RecordingSleep) -> DeletionScheduler:
    retry = RetryExecutor(RetryConfig(max_attempts=3, base_delay=0.5), sleep=no_sleep)
    return DeletionScheduler(platform, retry, default_delay=30.0, sleep=sleep)


def test_deletes_after_delay() -> None:
    platform = FakePlatform()
    sleep = RecordingSleep()
    scheduler = _scheduler(platform, sleep)

    async def scenario() -> None:
        scheduler.schedule_delete(-100, 5)
        scheduler.schedule_delete(-100, 6, delay=10.0)
        assert scheduler.pending == 2
        await scheduler.join()

    asyncio.run(scenario())

    assert sorted(sleep.delays) == [10.0, 30.0]
    assert sorted(platform.deleted) == [(-100, 5), (-100, 6)]
    assert scheduler.pending == 0


def test_retries_then_swallows_failure() -> None:
    platform = FakePlatform()
    platform.fail_deletes = 5
    scheduler = _scheduler(platform, RecordingSleep())

    async def scenario() -> None:
        scheduler.schedule_delete(-100, 7)
        await scheduler.join()

    asyncio.run(scenario())

    assert platform.deleted == []
    assert platform.fail_deletes == 2
    assert scheduler.pending == 0


def test_transient_failure_is_retried() -> None:
    platform = FakePlatform()
    platform.fail_deletes = 1
    scheduler = _scheduler(platform, RecordingSleep())

    async def scenario() -> None:
        scheduler.schedule_delete(-100, 8)
        await scheduler.join()

    asyncio.run(scenario())

    assert platform.deleted == [(-100, 8)]

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from modgate.errors import TransientFailure
from modgate.scheduler.channel_deletion_scheduler import ChannelDeletionScheduler


def _executor(side_effect=None) -> MagicMock:
    executor = MagicMock()
    executor.execute = AsyncMock(side_effect=side_effect)
    return executor


@pytest.mark.asyncio
async def test_scheduled_deletion_runs_after_delay() -> None:
    executor = _executor()
    scheduler = ChannelDeletionScheduler(executor, delay_seconds=0)

    task = scheduler.schedule("77", reason="Ticket closed by mod")
    await task

    executor.execute.assert_awaited_once()
    request = executor.execute.await_args.args[0]
    assert (request.method, request.path) == ("DELETE", "/channels/77")
    assert request.audit_reason == "Ticket closed by mod"
    assert scheduler.pending == set()


@pytest.mark.asyncio
async def test_schedule_returns_before_deleting() -> None:
    executor = _executor()
    scheduler = ChannelDeletionScheduler(executor, delay_seconds=30)

    task = scheduler.schedule("77")

    assert task in scheduler.pending
    executor.execute.assert_not_awaited()

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task


@pytest.mark.asyncio
async def test_platform_failure_is_logged_not_raised() -> None:
    executor = _executor(side_effect=TransientFailure(500, "boom"))
    scheduler = ChannelDeletionScheduler(executor, delay_seconds=0)

    await scheduler.schedule("77")

    executor.execute.assert_awaited_once()


@pytest.mark.asyncio
async def test_unexpected_failure_is_contained() -> None:
    executor = _executor(side_effect=RuntimeError("unexpected"))
    scheduler = ChannelDeletionScheduler(executor, delay_seconds=0)

    await scheduler.schedule("77")

    assert scheduler.pending == set()

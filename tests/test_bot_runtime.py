import asyncio
from unittest.mock import AsyncMock

import pytest

from modgate.bot.bot_runtime import build_runtime
from modgate.configuration.app_configuration import BotSettings


def test_build_runtime_shares_one_executor() -> None:
    runtime = build_runtime(BotSettings(bot_token="token", application_id="999", ticket_deletion_delay_seconds=3))

    assert runtime.moderation.executor is runtime.executor
    assert runtime.tickets.controller.executor is runtime.executor
    assert runtime.deletion_scheduler.executor is runtime.executor
    assert runtime.deletion_scheduler.delay_seconds == 3
    assert runtime.moderation.gate.application_id == "999"
    assert runtime.tickets.controller.bot_user_id == "999"


@pytest.mark.asyncio
async def test_close_waits_for_pending_deletions() -> None:
    runtime = build_runtime(BotSettings(bot_token="token", ticket_deletion_delay_seconds=0))
    runtime.executor.execute = AsyncMock()  # type: ignore[method-assign]
    runtime.executor.close = AsyncMock()  # type: ignore[method-assign]

    runtime.deletion_scheduler.schedule("55")
    await runtime.close()

    runtime.executor.execute.assert_awaited_once()
    runtime.executor.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_close_can_cancel_pending_deletions() -> None:
    runtime = build_runtime(BotSettings(bot_token="token", ticket_deletion_delay_seconds=60))
    runtime.executor.execute = AsyncMock()  # type: ignore[method-assign]
    runtime.executor.close = AsyncMock()  # type: ignore[method-assign]

    task = runtime.deletion_scheduler.schedule("55")
    await runtime.close(drain_deletions=False)

    with pytest.raises(asyncio.CancelledError):
        await task
    runtime.executor.execute.assert_not_awaited()

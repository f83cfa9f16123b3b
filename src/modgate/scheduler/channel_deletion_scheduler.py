"""
Detached, best-effort channel deletion used when a ticket is closed.

The close command answers the caller first; the channel is removed later by
a task created here. The task is not persisted anywhere: if the process stops
before the delay elapses the deletion never happens. Failures are logged and
never reported to a user, since the triggering interaction has already been
answered.
"""

from __future__ import annotations

import asyncio

from modgate.errors import ModgateError
from modgate.moderation import platform_executor
from modgate.moderation.platform_executor import PlatformExecutor
from modgate.util.logger import get_logger

logger = get_logger("channel_deletion_scheduler")


class ChannelDeletionScheduler:
    """Fire-and-forget channel deletion after a fixed delay.

    Attributes:
        executor: Executor used for the ``DELETE /channels/{id}`` call.
        delay_seconds: Delay applied to every scheduled deletion.
        pending: Strong references to running tasks so the event loop does
            not drop them before they finish.
    """

    def __init__(self, executor: PlatformExecutor, delay_seconds: float = 10.0) -> None:
        self.executor = executor
        self.delay_seconds = delay_seconds
        self.pending: set[asyncio.Task[None]] = set()

    def schedule(self, channel_id: str, *, reason: str | None = None) -> asyncio.Task[None]:
        """Start the delayed deletion and return immediately.

        There is no cancel API; once scheduled the deletion runs unless the
        process exits first.
        """
        loop = asyncio.get_running_loop()
        task = loop.create_task(
            self.delete_later(channel_id, reason),
            name=f"modgate-delete-channel-{channel_id}",
        )
        self.pending.add(task)
        task.add_done_callback(self.pending.discard)
        logger.debug("Scheduled deletion of channel %s in %.1fs", channel_id, self.delay_seconds)
        return task

    async def delete_later(self, channel_id: str, reason: str | None) -> None:
        await asyncio.sleep(self.delay_seconds)
        try:
            await self.executor.execute(platform_executor.delete_channel(channel_id, reason=reason))
        except ModgateError as exc:
            logger.error("Failed to delete ticket channel %s: %s", channel_id, exc)
        except Exception:
            logger.exception("Unexpected error deleting ticket channel %s", channel_id)
        else:
            logger.info("Deleted ticket channel %s", channel_id)

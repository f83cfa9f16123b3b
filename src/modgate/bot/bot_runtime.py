"""
Wiring of the command layer for one bot process.

:func:`build_runtime` constructs the executor, deletion scheduler, gate and
command handlers from a single :class:`BotSettings` value; the cogs receive
the resulting :class:`BotRuntime` instead of reaching for module globals.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from modgate.command.moderation_cmds import ModerationCommands
from modgate.command.permissions_cmd import PermissionsCommand
from modgate.command.ticket_cmds import TicketCommands
from modgate.configuration.app_configuration import BotSettings
from modgate.moderation.authorization_gate import AuthorizationGate
from modgate.moderation.platform_executor import PlatformExecutor
from modgate.scheduler.channel_deletion_scheduler import ChannelDeletionScheduler
from modgate.tickets.ticket_lifecycle import TicketLifecycleController
from modgate.util.logger import get_logger

logger = get_logger("bot_runtime")


@dataclass(slots=True)
class BotRuntime:
    settings: BotSettings
    executor: PlatformExecutor
    deletion_scheduler: ChannelDeletionScheduler
    moderation: ModerationCommands
    tickets: TicketCommands
    permissions: PermissionsCommand

    async def close(self, *, drain_deletions: bool = True) -> None:
        """Close the HTTP session, optionally letting pending deletions finish first."""
        pending = list(self.deletion_scheduler.pending)
        if pending and drain_deletions:
            logger.info("Waiting for %d pending ticket channel deletion(s)…", len(pending))
            await asyncio.gather(*pending, return_exceptions=True)
        elif pending:
            for task in pending:
                task.cancel()
        await self.executor.close()


def build_runtime(settings: BotSettings) -> BotRuntime:
    executor = PlatformExecutor(settings)
    deletion_scheduler = ChannelDeletionScheduler(executor, settings.ticket_deletion_delay_seconds)
    gate = AuthorizationGate(settings.application_id)
    controller = TicketLifecycleController(
        executor,
        deletion_scheduler,
        bot_user_id=settings.application_id,
    )
    return BotRuntime(
        settings=settings,
        executor=executor,
        deletion_scheduler=deletion_scheduler,
        moderation=ModerationCommands(executor, gate),
        tickets=TicketCommands(controller),
        permissions=PermissionsCommand(),
    )

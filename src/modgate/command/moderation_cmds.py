"""
Ban, kick and timeout command handlers.

Each handler follows the same path:

1. refuse DM contexts,
2. validate options into a typed action,
3. run the authorization gate,
4. issue exactly one Discord call,
5. render the outcome.

Every :class:`~modgate.errors.ModgateError` becomes an ephemeral reply through
:func:`~modgate.ui.response_formatter.moderation_error`; anything else is
logged and answered with a generic error. Nothing is retried.
"""

from __future__ import annotations

import datetime
from typing import Callable

import discord

from modgate.command import option_parsing
from modgate.datatypes.action_datatypes import (
    ActionType,
    BanAction,
    KickAction,
    ModerationAction,
    TimeoutAction,
)
from modgate.datatypes.interaction_datatypes import Interaction
from modgate.datatypes.response_datatypes import Response
from modgate.errors import ModgateError
from modgate.moderation import platform_executor
from modgate.moderation.authorization_gate import AuthorizationGate
from modgate.moderation.platform_executor import PlatformExecutor, PlatformRequest
from modgate.ui import response_formatter
from modgate.util.logger import get_logger

logger = get_logger("moderation_cmds")

ActionParser = Callable[[Interaction], ModerationAction]


class ModerationCommands:
    """Stateless handlers for the ``/ban``, ``/kick`` and ``/timeout`` commands.

    Parameters
    ----------
    executor:
        Executor performing the Discord call.
    gate:
        Authorization gate applied before any call.
    clock:
        Returns the current UTC time; used for timeout expiry and timestamps.
    """

    def __init__(
        self,
        executor: PlatformExecutor,
        gate: AuthorizationGate,
        *,
        clock: Callable[[], datetime.datetime] = discord.utils.utcnow,
    ) -> None:
        self.executor = executor
        self.gate = gate
        self.clock = clock

    async def ban(self, interaction: Interaction) -> Response:
        return await self.run(interaction, ActionType.BAN, option_parsing.parse_ban)

    async def kick(self, interaction: Interaction) -> Response:
        return await self.run(interaction, ActionType.KICK, option_parsing.parse_kick)

    async def timeout(self, interaction: Interaction) -> Response:
        return await self.run(interaction, ActionType.TIMEOUT, option_parsing.parse_timeout)

    def build_request(self, guild_id: str, action: ModerationAction, now: datetime.datetime) -> PlatformRequest:
        match action:
            case BanAction():
                return platform_executor.ban_member(
                    guild_id,
                    action.target_user_id,
                    delete_message_seconds=action.delete_message_seconds,
                    reason=action.audit_reason,
                )
            case TimeoutAction():
                until = now + datetime.timedelta(minutes=action.duration_minutes)
                return platform_executor.timeout_member(
                    guild_id,
                    action.target_user_id,
                    until_iso=until.isoformat(),
                    reason=action.audit_reason,
                )
            case KickAction():
                return platform_executor.kick_member(guild_id, action.target_user_id, reason=action.audit_reason)
            case _:
                raise TypeError(f"Unsupported moderation action: {action!r}")

    async def run(self, interaction: Interaction, action_type: ActionType, parser: ActionParser) -> Response:
        """Validate, authorize, execute and render one moderation command."""
        try:
            guild_id = self.gate.require_guild(interaction)
            action = parser(interaction)
            target = self.gate.authorize_moderation(interaction, action_type, action.target_user_id)

            now = self.clock()
            await self.executor.execute(self.build_request(guild_id, action, now))
        except ModgateError as exc:
            logger.info(
                "%s by %s in guild %s rejected: %s",
                action_type, interaction.caller.id, interaction.guild_id, exc,
            )
            return response_formatter.moderation_error(exc, action_type)
        except Exception:
            logger.exception("Error in %s command", action_type)
            return response_formatter.generic_error(str(action_type))

        logger.info(
            "%s applied to %s in guild %s by %s (reason: %s)",
            action_type, target.id, interaction.guild_id, interaction.caller.id, action.audit_reason,
        )
        return response_formatter.moderation_success(action, target, interaction.caller, now)

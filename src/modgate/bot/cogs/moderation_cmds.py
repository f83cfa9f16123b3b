"""
Moderation cog: ``/ban``, ``/kick`` and ``/timeout``.

The option declarations below only shape the command as Discord shows it.
Validation, authorization and the Discord call itself happen in
:class:`~modgate.command.moderation_cmds.ModerationCommands`, which reads the
raw options from the interaction.

Quick usage example
    from modgate.bot.cogs import moderation_cmds
    moderation_cmds.setup(bot, runtime)
"""

import discord
from discord import Option
from discord.ext import commands

from modgate.bot.bot_runtime import BotRuntime
from modgate.bot.interaction_adapter import run_command
from modgate.datatypes.action_datatypes import (
    MAX_BAN_DELETE_DAYS,
    MAX_REASON_LENGTH,
    MAX_TIMEOUT_MINUTES,
    MIN_TIMEOUT_MINUTES,
)
from modgate.util.logger import get_logger

logger = get_logger("moderation_cog")


class ModerationActionCog(commands.Cog):
    """Cog containing the manual moderation slash commands."""

    def __init__(self, discord_bot_instance: discord.Bot, runtime: BotRuntime):
        self.discord_bot_instance = discord_bot_instance
        self.runtime = runtime
        logger.info("Moderation cog loaded")

    @commands.slash_command(name="ban", description="Ban a user from the server")
    async def ban(
        self,
        ctx: discord.ApplicationContext,
        user: Option(discord.User, "The user to ban", required=True),  # type: ignore
        reason: Option(str, "Reason for the ban", required=False, max_length=MAX_REASON_LENGTH),  # type: ignore
        delete_messages: Option(
            int,
            "Number of days of messages to delete (0-7)",
            required=False,
            min_value=0,
            max_value=MAX_BAN_DELETE_DAYS,
        ),  # type: ignore
    ) -> None:
        await run_command(ctx, self.runtime.moderation.ban)

    @commands.slash_command(name="kick", description="Kick a user from the server")
    async def kick(
        self,
        ctx: discord.ApplicationContext,
        user: Option(discord.User, "The user to kick", required=True),  # type: ignore
        reason: Option(str, "Reason for the kick", required=False, max_length=MAX_REASON_LENGTH),  # type: ignore
    ) -> None:
        await run_command(ctx, self.runtime.moderation.kick)

    @commands.slash_command(name="timeout", description="Timeout a user")
    async def timeout(
        self,
        ctx: discord.ApplicationContext,
        user: Option(discord.User, "The user to timeout", required=True),  # type: ignore
        duration: Option(
            int,
            "Duration in minutes (max 40320 = 28 days)",
            required=True,
            min_value=MIN_TIMEOUT_MINUTES,
            max_value=MAX_TIMEOUT_MINUTES,
        ),  # type: ignore
        reason: Option(str, "Reason for the timeout", required=False, max_length=MAX_REASON_LENGTH),  # type: ignore
    ) -> None:
        await run_command(ctx, self.runtime.moderation.timeout)


def setup(discord_bot_instance, runtime: BotRuntime):
    """Register the moderation cog with the running bot instance."""
    discord_bot_instance.add_cog(ModerationActionCog(discord_bot_instance, runtime))

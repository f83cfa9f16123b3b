"""
Ticket cog: the ``/ticket`` command group.
"""

import discord
from discord import Option
from discord.ext import commands

from modgate.bot.bot_runtime import BotRuntime
from modgate.bot.interaction_adapter import run_command
from modgate.datatypes.ticket_datatypes import (
    MAX_CLOSE_REASON_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    MAX_TITLE_LENGTH,
    TicketPriority,
)
from modgate.util.logger import get_logger

logger = get_logger("ticket_cog")

PRIORITY_CHOICES = [
    discord.OptionChoice(name=f"{priority.glyph} {priority.label}", value=priority.value)
    for priority in TicketPriority
]


class TicketCog(commands.Cog):
    """Support tickets backed by private text channels."""

    ticket = discord.SlashCommandGroup("ticket", "Manage support tickets")

    def __init__(self, discord_bot_instance: discord.Bot, runtime: BotRuntime):
        self.discord_bot_instance = discord_bot_instance
        self.runtime = runtime
        logger.info("Ticket cog loaded")

    @ticket.command(name="create", description="Create a new support ticket")
    async def create(
        self,
        ctx: discord.ApplicationContext,
        title: Option(str, "Brief title for your ticket", required=True, max_length=MAX_TITLE_LENGTH),  # type: ignore
        description: Option(str, "Detailed description of your issue", required=False, max_length=MAX_DESCRIPTION_LENGTH),  # type: ignore
        priority: Option(str, "Priority level of your ticket", required=False, choices=PRIORITY_CHOICES),  # type: ignore
    ) -> None:
        await run_command(ctx, self.runtime.tickets.handle)

    @ticket.command(name="close", description="Close the current ticket")
    async def close(
        self,
        ctx: discord.ApplicationContext,
        reason: Option(str, "Reason for closing the ticket", required=False, max_length=MAX_CLOSE_REASON_LENGTH),  # type: ignore
    ) -> None:
        await run_command(ctx, self.runtime.tickets.handle)

    @ticket.command(name="add", description="Add a user to the current ticket")
    async def add(
        self,
        ctx: discord.ApplicationContext,
        user: Option(discord.User, "User to add to the ticket", required=True),  # type: ignore
    ) -> None:
        await run_command(ctx, self.runtime.tickets.handle)

    @ticket.command(name="remove", description="Remove a user from the current ticket")
    async def remove(
        self,
        ctx: discord.ApplicationContext,
        user: Option(discord.User, "User to remove from the ticket", required=True),  # type: ignore
    ) -> None:
        await run_command(ctx, self.runtime.tickets.handle)


def setup(discord_bot_instance, runtime: BotRuntime):
    discord_bot_instance.add_cog(TicketCog(discord_bot_instance, runtime))

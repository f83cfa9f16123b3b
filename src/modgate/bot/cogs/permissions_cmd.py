"""
Permissions cog: ``/permissions`` shows the caller's server-level permissions.
"""

import discord
from discord import Option
from discord.ext import commands

from modgate.bot.bot_runtime import BotRuntime
from modgate.bot.interaction_adapter import run_command
from modgate.util.logger import get_logger

logger = get_logger("permissions_cog")


class PermissionsCog(commands.Cog):

    def __init__(self, discord_bot_instance: discord.Bot, runtime: BotRuntime):
        self.discord_bot_instance = discord_bot_instance
        self.runtime = runtime

    @commands.slash_command(name="permissions", description="Check your permissions in this server")
    async def permissions(
        self,
        ctx: discord.ApplicationContext,
        user: Option(discord.User, "User to check permissions for (defaults to yourself)", required=False),  # type: ignore
    ) -> None:
        await run_command(ctx, self.runtime.permissions.handle)


def setup(discord_bot_instance, runtime: BotRuntime):
    discord_bot_instance.add_cog(PermissionsCog(discord_bot_instance, runtime))

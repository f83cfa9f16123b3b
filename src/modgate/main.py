"""
Modgate Discord Bot
===================

Slash-command moderation (ban, kick, timeout), channel-backed support tickets
and a permissions overview for Discord servers.
"""

import os
import sys
from pathlib import Path


def resolve_base_dir() -> Path:
    """Determine the base directory of the project.

    Resolution order:
    1. MODGATE_HOME environment variable, if set.
    2. If running in a frozen/compiled context, use the executable's directory.
    3. Otherwise, assume running from source and use the grandparent of this file's directory.
    """
    if env_home := os.getenv("MODGATE_HOME"):
        return Path(env_home).resolve()

    if getattr(sys, "frozen", False) or getattr(sys, "compiled", False):
        return Path(sys.argv[0]).resolve().parent

    return Path(__file__).resolve().parents[2]


BASE_DIR = resolve_base_dir()
os.chdir(BASE_DIR)

import asyncio
import discord

from modgate.bot.bot_runtime import BotRuntime, build_runtime
from modgate.configuration.app_configuration import AppConfig, CONFIG_PATH, load_environment
from modgate.util.logger import get_logger, handle_exception

logger = get_logger("main")


def build_intents() -> discord.Intents:
    """Slash commands need no privileged intents."""
    return discord.Intents.default()


def load_cogs(discord_bot_instance: discord.Bot, runtime: BotRuntime) -> None:
    """Register the modgate cogs with the provided bot instance."""
    from modgate.bot.cogs import moderation_cmds, permissions_cmd, ticket_cmds

    moderation_cmds.setup(discord_bot_instance, runtime)
    ticket_cmds.setup(discord_bot_instance, runtime)
    permissions_cmd.setup(discord_bot_instance, runtime)

    logger.info("All cogs loaded successfully.")


def create_bot(runtime: BotRuntime) -> discord.Bot:
    bot = discord.Bot(intents=build_intents())
    load_cogs(bot, runtime)
    return bot


async def start_bot(bot: discord.Bot, token: str) -> None:
    logger.info("Attempting to connect to Discord…")
    try:
        await bot.start(token)
    except asyncio.CancelledError:
        logger.info("Discord bot start cancelled; shutting down")
    finally:
        logger.info("Discord bot start routine finished.")


async def shutdown_runtime(bot: discord.Bot | None, runtime: BotRuntime) -> None:
    """Close the bot connection and the REST session."""
    if bot is not None and not bot.is_closed():
        try:
            await bot.close()
        except Exception as exc:
            logger.exception("Error while closing the Discord bot: %s", exc)

    try:
        await runtime.close()
    except Exception as exc:
        logger.exception("Error during runtime shutdown: %s", exc)

    logger.info("Shutdown complete.")


async def async_main() -> int:
    """Bootstrap configuration, the command layer and the bot, returning an exit code."""
    load_environment(BASE_DIR / ".env")
    settings = AppConfig(CONFIG_PATH).build_settings()
    if not settings.has_credential:
        logger.critical("'DISCORD_BOT_TOKEN' environment variable not set. Bot cannot start.")
        return 1

    runtime = build_runtime(settings)
    try:
        bot = create_bot(runtime)
    except Exception as exc:
        logger.critical("Failed to initialize Discord bot: %s", exc)
        await runtime.close()
        return 1

    exit_code = 0
    try:
        await start_bot(bot, settings.bot_token or "")
    except Exception as exc:
        logger.critical("Discord bot runtime error: %s", exc)
        exit_code = 1
    finally:
        await shutdown_runtime(bot, runtime)

    return exit_code


def main() -> int:
    """Entrypoint that runs the async runtime and returns the process exit code."""
    sys.excepthook = handle_exception
    logger.info("Starting Modgate…")
    try:
        return asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user.")
        return 0
    except Exception as exc:
        logger.critical("An unexpected error occurred while running the bot: %s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""
Pytest configuration and fixtures for Modgate tests.
"""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from discord import SlashCommandOptionType  # noqa: E402

from modgate.datatypes.interaction_datatypes import (  # noqa: E402
    CommandOption,
    Interaction,
    InvokingMember,
    ResolvedUser,
)

GUILD_ID = "4242"
CHANNEL_ID = "7000"
APPLICATION_ID = "999"

CALLER = ResolvedUser(id="100", username="mod")
TARGET = ResolvedUser(id="200", username="target", discriminator="1234")
BOT_USER = ResolvedUser(id=APPLICATION_ID, username="modgate", bot=True)


def user_option(value: str, name: str = "user") -> CommandOption:
    return CommandOption(name=name, type=SlashCommandOptionType.user, value=value)


def string_option(name: str, value: str) -> CommandOption:
    return CommandOption(name=name, type=SlashCommandOptionType.string, value=value)


def integer_option(name: str, value: int) -> CommandOption:
    return CommandOption(name=name, type=SlashCommandOptionType.integer, value=value)


def subcommand(name: str, *options: CommandOption) -> CommandOption:
    return CommandOption(name=name, type=SlashCommandOptionType.sub_command, options=tuple(options))


def build_interaction(
    *options: CommandOption,
    command_name: str = "ban",
    permissions: str = "8",
    guild_id: str | None = GUILD_ID,
    caller: ResolvedUser = CALLER,
    channel_id: str = CHANNEL_ID,
    resolved: tuple[ResolvedUser, ...] = (TARGET, BOT_USER, CALLER),
) -> Interaction:
    return Interaction(
        id="1",
        application_id=APPLICATION_ID,
        channel_id=channel_id,
        member=InvokingMember(user=caller, permissions=permissions),
        command_name=command_name,
        guild_id=guild_id,
        resolved_users={user.id: user for user in resolved},
        options=options,
    )


@pytest.fixture()
def executor() -> MagicMock:
    """Executor double: ``execute`` is awaited once per Discord call."""
    mock = MagicMock()
    mock.execute = AsyncMock(return_value=None)
    mock.ensure_credential = MagicMock(return_value="token")
    return mock


@pytest.fixture()
def deletion_scheduler() -> MagicMock:
    scheduler = MagicMock()
    scheduler.delay_seconds = 10.0
    return scheduler

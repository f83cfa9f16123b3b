from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from modgate.bot.bot_runtime import build_runtime
from modgate.bot.cogs import moderation_cmds, permissions_cmd, ticket_cmds
from modgate.configuration.app_configuration import BotSettings


@pytest.fixture()
def runtime():
    return build_runtime(BotSettings(bot_token="token", application_id="999"))


def test_setup_functions_register_cogs(runtime) -> None:
    bot = MagicMock()

    moderation_cmds.setup(bot, runtime)
    ticket_cmds.setup(bot, runtime)
    permissions_cmd.setup(bot, runtime)

    cogs = [call.args[0] for call in bot.add_cog.call_args_list]
    assert [type(cog).__name__ for cog in cogs] == ["ModerationActionCog", "TicketCog", "PermissionsCog"]
    assert all(cog.runtime is runtime for cog in cogs)


def test_priority_choices_cover_every_priority() -> None:
    values = [choice.value for choice in ticket_cmds.PRIORITY_CHOICES]

    assert values == ["low", "medium", "high", "urgent"]


@pytest.mark.asyncio
async def test_ban_command_routes_to_handler(runtime) -> None:
    cog = moderation_cmds.ModerationActionCog(MagicMock(), runtime)
    ctx = SimpleNamespace()

    with patch("modgate.bot.cogs.moderation_cmds.run_command", new=AsyncMock()) as mock_run:
        await moderation_cmds.ModerationActionCog.ban.callback(cog, ctx, None, None, None)

    mock_run.assert_awaited_once_with(ctx, runtime.moderation.ban)


@pytest.mark.asyncio
async def test_ticket_subcommands_share_one_handler(runtime) -> None:
    cog = ticket_cmds.TicketCog(MagicMock(), runtime)
    ctx = SimpleNamespace()

    with patch("modgate.bot.cogs.ticket_cmds.run_command", new=AsyncMock()) as mock_run:
        await ticket_cmds.TicketCog.close.callback(cog, ctx, None)

    mock_run.assert_awaited_once_with(ctx, runtime.tickets.handle)

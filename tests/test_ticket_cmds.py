from typing import Any

import pytest

from conftest import GUILD_ID, TARGET, build_interaction, string_option, subcommand, user_option
from modgate.command.ticket_cmds import TicketCommands
from modgate.errors import MissingCredentialError, PermissionDenied
from modgate.moderation.platform_executor import PlatformRequest
from modgate.permissions.permission_evaluator import MANAGE_CHANNELS
from modgate.tickets.ticket_lifecycle import TicketLifecycleController

TICKET_CHANNEL = {"id": "555", "name": "ticket-000001", "topic": "Ticket #000001 - Printer | Created by mod"}


@pytest.fixture()
def calls(executor) -> list[PlatformRequest]:
    recorded: list[PlatformRequest] = []
    routes: dict[tuple[str, str], Any] = {
        ("POST", f"/guilds/{GUILD_ID}/channels"): {"id": "555"},
        ("GET", "/channels/555"): TICKET_CHANNEL,
        ("GET", "/channels/777"): {"id": "777", "name": "general"},
    }

    async def fake_execute(request: PlatformRequest) -> Any:
        recorded.append(request)
        outcome = routes.get((request.method, request.path))
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    executor.execute.side_effect = fake_execute
    executor.routes = routes
    return recorded


@pytest.fixture()
def tickets(executor, deletion_scheduler) -> TicketCommands:
    return TicketCommands(TicketLifecycleController(executor, deletion_scheduler))


def _ticket(*options, **kwargs):
    return build_interaction(*options, command_name="ticket", **kwargs)


@pytest.mark.asyncio
async def test_dm_is_rejected(tickets, calls) -> None:
    response = await tickets.handle(_ticket(subcommand("create", string_option("title", "T")), guild_id=None))

    assert response.content == "This command can only be used in a server (guild)."
    assert response.ephemeral is True
    assert calls == []


@pytest.mark.asyncio
async def test_missing_token_is_reported(tickets, executor, calls) -> None:
    executor.ensure_credential.side_effect = MissingCredentialError()

    response = await tickets.handle(_ticket(subcommand("create", string_option("title", "T"))))

    assert response.content == "❌ Bot token not configured."
    assert calls == []


@pytest.mark.asyncio
async def test_missing_subcommand(tickets) -> None:
    response = await tickets.handle(_ticket())

    assert response.content == "❌ No subcommand specified."


@pytest.mark.asyncio
async def test_unknown_subcommand(tickets) -> None:
    response = await tickets.handle(_ticket(subcommand("reopen")))

    assert response.content == "❌ Unknown subcommand."


@pytest.mark.asyncio
async def test_create_success(tickets, calls) -> None:
    response = await tickets.handle(
        _ticket(subcommand("create", string_option("title", "T"), string_option("description", "D"),
                           string_option("priority", "urgent")))
    )

    assert "Ticket Created Successfully" in response.content
    assert "⚠️" not in response.content
    assert response.ephemeral is True
    welcome = calls[1].body["content"]
    assert "T" in welcome and "D" in welcome and "🔴" in welcome


@pytest.mark.asyncio
async def test_create_with_failed_welcome_still_succeeds(tickets, executor, calls) -> None:
    executor.routes[("POST", "/channels/555/messages")] = PermissionDenied(403)

    response = await tickets.handle(_ticket(subcommand("create", string_option("title", "T"))))

    assert "Ticket Created Successfully" in response.content
    assert "⚠️" in response.content
    assert all(request.method != "DELETE" for request in calls)


@pytest.mark.asyncio
async def test_create_without_channel_permission(tickets, executor, calls) -> None:
    executor.routes[("POST", f"/guilds/{GUILD_ID}/channels")] = PermissionDenied(403)

    response = await tickets.handle(_ticket(subcommand("create", string_option("title", "T"))))

    assert "I don't have permission to create channels" in response.content


@pytest.mark.asyncio
async def test_create_without_title(tickets, calls) -> None:
    response = await tickets.handle(_ticket(subcommand("create")))

    assert response.content == "❌ Title is required."
    assert calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("permissions", ["0", "8", str(MANAGE_CHANNELS)])
@pytest.mark.parametrize(
    "command",
    [subcommand("close"), subcommand("add", user_option(TARGET.id)), subcommand("remove", user_option(TARGET.id))],
    ids=["close", "add", "remove"],
)
async def test_outside_ticket_channel_is_rejected_for_any_caller(
    tickets, deletion_scheduler, calls, command, permissions
) -> None:
    response = await tickets.handle(_ticket(command, channel_id="777", permissions=permissions))

    assert response.content == "❌ This command can only be used in ticket channels."
    assert response.ephemeral is True
    assert [(request.method, request.path) for request in calls] == [("GET", "/channels/777")]
    deletion_scheduler.schedule.assert_not_called()


@pytest.mark.asyncio
async def test_close_by_creator(tickets, deletion_scheduler, calls) -> None:
    response = await tickets.handle(_ticket(subcommand("close"), channel_id="555", permissions="0"))

    assert response.content == "✅ Ticket is being closed..."
    deletion_scheduler.schedule.assert_called_once()


@pytest.mark.asyncio
async def test_add_participant_is_public(tickets, calls) -> None:
    response = await tickets.handle(_ticket(subcommand("add", user_option(TARGET.id)), channel_id="555"))

    assert response.content == f"✅ Added <@{TARGET.id}> to the ticket."
    assert response.ephemeral is False


@pytest.mark.asyncio
async def test_remove_participant(tickets, calls) -> None:
    response = await tickets.handle(_ticket(subcommand("remove", user_option(TARGET.id)), channel_id="555"))

    assert response.content == f"✅ Removed <@{TARGET.id}> from the ticket."
    assert calls[-1].method == "DELETE"


@pytest.mark.asyncio
async def test_unexpected_error(tickets, executor) -> None:
    executor.execute.side_effect = RuntimeError("boom")

    response = await tickets.handle(_ticket(subcommand("create", string_option("title", "T"))))

    assert response.content == "❌ An error occurred while processing the ticket command."

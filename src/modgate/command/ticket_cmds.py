"""
``/ticket`` command handler.

Dispatches the ``create``, ``close``, ``add`` and ``remove`` subcommands to
:class:`~modgate.tickets.ticket_lifecycle.TicketLifecycleController` and
renders the result. Guild context and the bot credential are checked before
any subcommand runs.
"""

from __future__ import annotations

from modgate.command import option_parsing
from modgate.datatypes.interaction_datatypes import CommandOption, Interaction
from modgate.datatypes.response_datatypes import Response
from modgate.datatypes.ticket_datatypes import TicketOperation
from modgate.errors import ModgateError
from modgate.moderation.authorization_gate import AuthorizationGate
from modgate.tickets.ticket_lifecycle import TicketLifecycleController
from modgate.ui import response_formatter
from modgate.util.logger import get_logger

logger = get_logger("ticket_cmds")


class TicketCommands:
    """Handler for the ``/ticket`` command group."""

    def __init__(self, controller: TicketLifecycleController) -> None:
        self.controller = controller

    async def handle(self, interaction: Interaction) -> Response:
        operation: TicketOperation | None = None
        try:
            AuthorizationGate.require_guild(interaction)
            self.controller.executor.ensure_credential()

            subcommand = interaction.subcommand()
            if subcommand is None:
                return Response.private("❌ No subcommand specified.")
            try:
                operation = TicketOperation(subcommand.name)
            except ValueError:
                return response_formatter.unknown_subcommand()

            return await self.dispatch(interaction, operation, subcommand)
        except ModgateError as exc:
            logger.info("ticket %s by %s rejected: %s", operation or "?", interaction.caller.id, exc)
            return response_formatter.ticket_error(exc, operation)
        except Exception:
            logger.exception("Error in ticket command (%s)", operation or "?")
            return response_formatter.generic_error("ticket")

    async def dispatch(self, interaction: Interaction, operation: TicketOperation, subcommand: CommandOption) -> Response:
        match operation:
            case TicketOperation.CREATE:
                request = option_parsing.parse_ticket_create(subcommand)
                created = await self.controller.create(interaction, request)
                return response_formatter.ticket_created(created)
            case TicketOperation.CLOSE:
                await self.controller.close(interaction, option_parsing.parse_ticket_close(subcommand))
                return response_formatter.ticket_closing()
            case TicketOperation.ADD:
                target = await self.controller.add_participant(
                    interaction, option_parsing.parse_ticket_participant(subcommand)
                )
                return response_formatter.participant_added(target)
            case TicketOperation.REMOVE:
                target = await self.controller.remove_participant(
                    interaction, option_parsing.parse_ticket_participant(subcommand)
                )
                return response_formatter.participant_removed(target)

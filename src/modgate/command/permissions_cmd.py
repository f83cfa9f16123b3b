"""
``/permissions`` command handler.

Shows the caller's own server-level permissions as decoded by the permission
evaluator. Only the member bitmask of the caller is part of the interaction,
so asking about another user is answered with an explanation instead.
"""

from __future__ import annotations

from modgate.command import option_parsing
from modgate.datatypes.interaction_datatypes import Interaction
from modgate.datatypes.response_datatypes import Response
from modgate.errors import ConfigurationError, ModgateError
from modgate.moderation.authorization_gate import AuthorizationGate
from modgate.permissions import permission_evaluator
from modgate.ui import response_formatter
from modgate.util.logger import get_logger

logger = get_logger("permissions_cmd")


class PermissionsCommand:

    async def handle(self, interaction: Interaction) -> Response:
        try:
            AuthorizationGate.require_guild(interaction)

            requested = option_parsing.option_value(interaction.options, "user")
            if requested is not None and str(requested) != interaction.caller.id:
                return response_formatter.permissions_other_user()

            permissions = permission_evaluator.evaluate(interaction.member.permissions)
        except ConfigurationError as exc:
            return Response.private(str(exc))
        except ModgateError as exc:
            return Response.private(f"❌ {exc}")
        except Exception:
            logger.exception("Error in permissions command")
            return Response.private("❌ An error occurred while checking permissions.")

        return response_formatter.permissions_summary(interaction.caller, permissions, interaction.guild_id or "")

"""
Authorization gate for moderation actions.

Every check is pure and runs in a fixed order; the first failure wins and the
remaining checks are not evaluated:

1. guild context (``GuildContextRequiredError``)
2. caller capability, with administrator granting everything (``AuthorizationError``)
3. self-target (``InvalidTargetError``)
4. bot-target (``InvalidTargetError``)
5. target resolves to a known user (``NotFoundError``)

No external call is made here, so a rejected action never reaches Discord.
"""

from __future__ import annotations

from dataclasses import dataclass

from modgate.datatypes.action_datatypes import ActionType
from modgate.datatypes.interaction_datatypes import Interaction, ResolvedUser
from modgate.errors import (
    AuthorizationError,
    GuildContextRequiredError,
    InvalidTargetError,
    NotFoundError,
    TargetRejection,
)
from modgate.permissions import permission_evaluator
from modgate.util.logger import get_logger

logger = get_logger("authorization_gate")


@dataclass(frozen=True, slots=True)
class ActionRequirement:
    """What an action needs from the caller and its target.

    Attributes:
        capability: Bit the caller must hold (administrator always suffices).
        capability_name: Display name used in the rejection message.
        requires_guild: Reject in DM contexts.
        forbid_self_target: Reject when the target is the caller.
        forbid_bot_target: Reject when the target is the bot.
    """
    capability: int
    capability_name: str
    requires_guild: bool = True
    forbid_self_target: bool = True
    forbid_bot_target: bool = True


MODERATION_REQUIREMENTS: dict[ActionType, ActionRequirement] = {
    ActionType.BAN: ActionRequirement(permission_evaluator.BAN_MEMBERS, "Ban Members"),
    ActionType.KICK: ActionRequirement(permission_evaluator.KICK_MEMBERS, "Kick Members"),
    ActionType.TIMEOUT: ActionRequirement(permission_evaluator.MODERATE_MEMBERS, "Moderate Members"),
}


class AuthorizationGate:
    """Admits or rejects an action before any platform call is made.

    Parameters
    ----------
    application_id:
        The bot's own identity from configuration. When unset, the
        interaction's ``application_id`` is used instead.
    """

    def __init__(self, application_id: str | None = None) -> None:
        self.application_id = application_id

    def bot_identity(self, interaction: Interaction) -> str:
        return self.application_id or interaction.application_id

    @staticmethod
    def require_guild(interaction: Interaction) -> str:
        """Return the guild id, refusing DM contexts."""
        if interaction.guild_id is None:
            raise GuildContextRequiredError()
        return interaction.guild_id

    def authorize(
        self,
        interaction: Interaction,
        requirement: ActionRequirement,
        target_user_id: str | None,
    ) -> ResolvedUser | None:
        """Run the ordered checks and return the resolved target.

        Returns
        -------
        ResolvedUser | None
            The target's user record, or ``None`` when ``target_user_id`` is
            ``None`` (actions without a user target).

        Raises
        ------
        GuildContextRequiredError, AuthorizationError, InvalidTargetError, NotFoundError
            The first failing check, in the order documented on this module.
        """
        if requirement.requires_guild:
            self.require_guild(interaction)

        permissions = permission_evaluator.evaluate(interaction.member.permissions)
        if not permissions.grants(requirement.capability):
            logger.debug(
                "Caller %s lacks %s (bitmask %#x)",
                interaction.caller.id, requirement.capability_name, permissions.value,
            )
            raise AuthorizationError(requirement.capability_name)

        if target_user_id is None:
            return None
        return self.check_target(interaction, requirement, str(target_user_id))

    def check_target(self, interaction: Interaction, requirement: ActionRequirement, target_user_id: str) -> ResolvedUser:
        if requirement.forbid_self_target and target_user_id == interaction.caller.id:
            raise InvalidTargetError(TargetRejection.SELF)

        if requirement.forbid_bot_target and target_user_id == self.bot_identity(interaction):
            raise InvalidTargetError(TargetRejection.BOT)

        target = interaction.resolve_user(target_user_id)
        if target is None:
            raise NotFoundError(target_user_id)
        return target

    def authorize_moderation(self, interaction: Interaction, action_type: ActionType, target_user_id: str) -> ResolvedUser:
        """Shortcut for ban/kick/timeout, which always have a target."""
        requirement = MODERATION_REQUIREMENTS[action_type]
        self.authorize(interaction, requirement, None)
        return self.check_target(interaction, requirement, str(target_user_id))

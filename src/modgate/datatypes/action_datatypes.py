"""
Moderation actions built from validated command options.

This module defines the ActionType enum and one frozen dataclass per
moderation command. Instances are created at the command boundary, read by
the authorization gate and the executor, and discarded with the response.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DEFAULT_REASON = "No reason provided"

MAX_REASON_LENGTH = 512
MAX_BAN_DELETE_DAYS = 7
MIN_TIMEOUT_MINUTES = 1
MAX_TIMEOUT_MINUTES = 40320  # 28 days, the Discord maximum


class ActionType(Enum):
    """Enumeration of supported moderation actions."""

    BAN = "ban"
    KICK = "kick"
    TIMEOUT = "timeout"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class ModerationAction:
    """Fields shared by every moderation action.

    Attributes:
        target_user_id: Snowflake of the user the action applies to.
        reason: Audit-log reason; ``None`` when the caller gave none.
    """
    target_user_id: str
    reason: str | None = None

    @property
    def action_type(self) -> ActionType:
        raise NotImplementedError

    @property
    def audit_reason(self) -> str:
        """Reason sent to Discord and echoed to the channel."""
        return self.reason or DEFAULT_REASON


@dataclass(frozen=True, slots=True)
class BanAction(ModerationAction):
    """Ban with an optional message-deletion window (0-7 days)."""
    delete_message_days: int = 0

    @property
    def action_type(self) -> ActionType:
        return ActionType.BAN

    @property
    def delete_message_seconds(self) -> int:
        return self.delete_message_days * 24 * 60 * 60


@dataclass(frozen=True, slots=True)
class KickAction(ModerationAction):
    """Remove a member from the guild."""

    @property
    def action_type(self) -> ActionType:
        return ActionType.KICK


@dataclass(frozen=True, slots=True)
class TimeoutAction(ModerationAction):
    """Communication timeout lasting ``duration_minutes`` (1-40320)."""
    duration_minutes: int = MIN_TIMEOUT_MINUTES

    @property
    def action_type(self) -> ActionType:
        return ActionType.TIMEOUT

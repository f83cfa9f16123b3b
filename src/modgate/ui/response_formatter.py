"""
response_formatter.py
=====================

Renders command outcomes into the outbound :class:`Response` contract.

- Every error is ephemeral. Moderation successes are public; ticket
  confirmations other than add/remove are ephemeral.
- Content never exceeds :data:`MAX_CONTENT_LENGTH`. Overflow handling is
  chosen by the call site: :func:`truncate` for list-style output,
  :func:`overflow_to_attachment` for free-form text. Every current command
  produces list-style output, so only :func:`truncate` has callers here;
  :func:`overflow_to_attachment` is the path for free-form replies such as
  chat answers, which this bot does not serve.
- Timestamps use Discord's ``<t:epoch:F>`` markup through
  :func:`discord.utils.format_dt`.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass

import discord

from modgate.datatypes.action_datatypes import (
    ActionType,
    BanAction,
    ModerationAction,
    TimeoutAction,
)
from modgate.datatypes.interaction_datatypes import ResolvedUser
from modgate.datatypes.response_datatypes import MAX_CONTENT_LENGTH, FileAttachment, Response
from modgate.datatypes.ticket_datatypes import (
    TicketCreated,
    TicketCreateRequest,
    TicketOperation,
)
from modgate.errors import (
    AuthorizationError,
    ConfigurationError,
    Conflict,
    InvalidContextError,
    InvalidTargetError,
    MalformedRequest,
    MissingCredentialError,
    ModgateError,
    NotFoundError,
    ParseError,
    PermissionDenied,
    TargetNotFound,
    TargetRejection,
)
from modgate.permissions.permission_evaluator import PERMISSION_NAMES, PermissionSet, Role

TRUNCATION_MARKER = "\n… (truncated)"
OVERFLOW_NOTICE = "The response is too large, so it was sent as a file:"

DIVIDER = "─────────────────────────────"


@dataclass(frozen=True, slots=True)
class ActionPhrase:
    verb: str
    capability: str
    heading: str
    performed_by: str | None = None


ACTION_PHRASES: dict[ActionType, ActionPhrase] = {
    ActionType.BAN: ActionPhrase("ban", "Ban Members", "User Banned", "Banned by"),
    ActionType.KICK: ActionPhrase("kick", "Kick Members", "User Kicked", "Kicked by"),
    ActionType.TIMEOUT: ActionPhrase("timeout", "Moderate Members", "User Timed Out"),
}


# ==========================================
# Length handling
# ==========================================

def truncate(content: str, limit: int = MAX_CONTENT_LENGTH, marker: str = TRUNCATION_MARKER) -> str:
    """Cut ``content`` so that it plus ``marker`` fits in ``limit`` characters."""
    if len(content) <= limit:
        return content
    return content[: max(limit - len(marker), 0)] + marker


def overflow_to_attachment(
    content: str,
    *,
    filename_prefix: str = "response",
    description: str | None = None,
    ephemeral: bool = False,
    now: datetime.datetime | None = None,
) -> Response:
    """Send short text inline and route long text to a ``.txt`` attachment."""
    if len(content) <= MAX_CONTENT_LENGTH:
        return Response(content=content, ephemeral=ephemeral)

    moment = now or discord.utils.utcnow()
    stamp = moment.strftime("%Y-%m-%dT%H-%M-%S")
    attachment = FileAttachment(
        filename=f"{filename_prefix}-{stamp}.txt",
        data=content.encode("utf-8"),
        description=description,
    )
    return Response(content=OVERFLOW_NOTICE, ephemeral=ephemeral, file=attachment)


# ==========================================
# Small helpers
# ==========================================

def format_timestamp(moment: datetime.datetime, style: str = "F") -> str:
    return discord.utils.format_dt(moment, style)  # type: ignore[arg-type]


def plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count != 1 else ''}"


def format_timeout_duration(minutes: int) -> str:
    """Human-readable timeout length, e.g. ``"2 hours and 5 minutes"``."""
    if minutes < 60:
        return plural(minutes, "minute")
    hours, remaining_minutes = divmod(minutes, 60)
    if hours < 24:
        if remaining_minutes:
            return f"{plural(hours, 'hour')} and {plural(remaining_minutes, 'minute')}"
        return plural(hours, "hour")
    days, remaining_hours = divmod(hours, 24)
    if remaining_hours:
        return f"{plural(days, 'day')} and {plural(remaining_hours, 'hour')}"
    return plural(days, "day")


def format_deleted_messages(days: int) -> str:
    return f"Last {plural(days, 'day')}" if days > 0 else "None"


def detail_line(emoji: str, label: str, value: str) -> str:
    return f"{emoji} {label}: {value}"


# ==========================================
# Moderation
# ==========================================

def moderation_success(
    action: ModerationAction,
    target: ResolvedUser,
    moderator: ResolvedUser,
    now: datetime.datetime | None = None,
) -> Response:
    """Public confirmation posted after a ban, kick or timeout succeeds."""
    moment = now or discord.utils.utcnow()
    phrase = ACTION_PHRASES[action.action_type]

    lines = [f"✅ **{phrase.heading}**", "", detail_line("👤", "User", target.tag)]
    if phrase.performed_by:
        lines.append(detail_line("👮", phrase.performed_by, moderator.tag))

    match action:
        case BanAction():
            lines.append(detail_line("📝", "Reason", action.audit_reason))
            lines.append(detail_line("🗑️", "Messages Deleted", format_deleted_messages(action.delete_message_days)))
            lines.append(detail_line("⏰", "Time", format_timestamp(moment)))
        case TimeoutAction():
            expires = moment + datetime.timedelta(minutes=action.duration_minutes)
            lines.append(detail_line("⏰", "Duration", format_timeout_duration(action.duration_minutes)))
            lines.append(detail_line("📝", "Reason", action.audit_reason))
            lines.append(detail_line("⏱️", "Expires", format_timestamp(expires)))
        case _:
            lines.append(detail_line("📝", "Reason", action.audit_reason))
            lines.append(detail_line("⏰", "Time", format_timestamp(moment)))

    return Response.public(truncate("\n".join(lines)))


def moderation_error(error: ModgateError, action_type: ActionType) -> Response:
    """Ephemeral explanation of why a ban, kick or timeout did not happen."""
    phrase = ACTION_PHRASES[action_type]

    match error:
        case MissingCredentialError():
            content = f"❌ {error}"
        case ConfigurationError():
            content = str(error)
        case AuthorizationError():
            content = (
                f"❌ You don't have permission to {phrase.verb} members. "
                f"You need the **{error.capability}** permission."
            )
        case InvalidTargetError(rejection=TargetRejection.SELF):
            content = f"❌ You cannot {phrase.verb} yourself."
        case InvalidTargetError():
            content = f"❌ You cannot {phrase.verb} the bot."
        case NotFoundError():
            content = "❌ Could not find the specified user."
        case ParseError():
            content = f"❌ {error}"
        case PermissionDenied():
            content = (
                f"❌ I don't have permission to {phrase.verb} this user. "
                f"Make sure I have the **{phrase.capability}** permission and my role "
                "is higher than the target user's highest role."
            )
        case TargetNotFound():
            content = "❌ User not found in this server."
        case MalformedRequest():
            content = f"❌ Invalid request: {error.detail or 'Unknown error'}"
        case Conflict() if action_type is ActionType.BAN:
            content = "❌ User is already banned from this server."
        case _:
            content = f"❌ Failed to {phrase.verb} the user. Please try again later."

    return Response.private(truncate(content))


# ==========================================
# Tickets
# ==========================================

def ticket_welcome_message(
    *,
    number: str,
    request: TicketCreateRequest,
    creator_id: str,
    created_at: datetime.datetime,
) -> str:
    """First message posted into a new ticket channel."""
    priority = request.priority
    content = "\n".join([
        f"🎫 **Ticket #{number} Created**",
        "",
        f"**Title:** {request.title}",
        f"**Description:** {request.description}",
        f"**Priority:** {priority.glyph} {priority.label}",
        f"**Created by:** <@{creator_id}>",
        f"**Created at:** {format_timestamp(created_at)}",
        "",
        DIVIDER,
        "",
        "📋 **Instructions:**",
        "• Please describe your issue in detail",
        "• Staff will respond as soon as possible",
        "• Use `/ticket close` to close this ticket when resolved",
        "• Use `/ticket add <user>` to add someone to this ticket",
        "",
        "🏷️ This ticket will be automatically deleted after closure.",
    ])
    return truncate(content)


def ticket_closing_message(
    *,
    closer_id: str,
    reason: str | None,
    closed_at: datetime.datetime,
    delay_seconds: float,
) -> str:
    """Notice posted into the ticket channel right before deletion is scheduled."""
    return truncate("\n".join([
        "🔒 **Ticket Closed**",
        "",
        f"**Closed by:** <@{closer_id}>",
        f"**Reason:** {reason or 'No reason provided'}",
        f"**Closed at:** {format_timestamp(closed_at)}",
        "",
        f"This channel will be deleted in {plural(int(delay_seconds), 'second')}...",
    ]))


def ticket_created(result: TicketCreated) -> Response:
    priority = result.priority
    lines = [
        "✅ **Ticket Created Successfully!**",
        "",
        f"🎫 **Ticket #{result.number}**",
        f"📺 **Channel:** <#{result.channel_id}>",
        f"📋 **Title:** {result.title}",
        f"{priority.glyph} **Priority:** {priority.label}",
        "",
        "Please head to the ticket channel to continue the conversation.",
    ]
    if not result.welcome_posted:
        lines.append("⚠️ The welcome message could not be posted in the ticket channel.")
    return Response.private(truncate("\n".join(lines)))


def ticket_closing() -> Response:
    return Response.private("✅ Ticket is being closed...")


def participant_added(target: ResolvedUser) -> Response:
    return Response.public(f"✅ Added {target.mention} to the ticket.")


def participant_removed(target: ResolvedUser) -> Response:
    return Response.public(f"✅ Removed {target.mention} from the ticket.")


TICKET_FAILURES: dict[TicketOperation, str] = {
    TicketOperation.CREATE: "❌ Failed to create ticket. Please try again later.",
    TicketOperation.CLOSE: "❌ Failed to close ticket. Please try again later.",
    TicketOperation.ADD: "❌ Failed to add user to ticket.",
    TicketOperation.REMOVE: "❌ Failed to remove user from ticket.",
}


def ticket_error(error: ModgateError, operation: TicketOperation | None) -> Response:
    """Ephemeral explanation of a failed ticket subcommand."""
    match error:
        case MissingCredentialError():
            content = f"❌ {error}"
        case ConfigurationError():
            content = str(error)
        case ParseError():
            content = f"❌ {error}"
        case InvalidContextError():
            content = "❌ This command can only be used in ticket channels."
        case AuthorizationError():
            content = (
                "❌ You can only close tickets you created, or if you have the "
                f"**{error.capability}** permission."
            )
        case NotFoundError():
            content = "❌ Could not find the specified user."
        case PermissionDenied() if operation is TicketOperation.CREATE:
            content = (
                "❌ I don't have permission to create channels. "
                "Please make sure I have the **Manage Channels** permission."
            )
        case PermissionDenied():
            content = (
                "❌ I don't have permission to manage this ticket channel. "
                "Please make sure I have the **Manage Channels** permission."
            )
        case _ if operation is not None:
            content = TICKET_FAILURES[operation]
        case _:
            content = "❌ An error occurred while processing the ticket command."

    return Response.private(truncate(content))


# ==========================================
# Permissions listing
# ==========================================

ROLE_LINES = {
    Role.ADMINISTRATOR: "👑 **Role:** Administrator (has all permissions)",
    Role.MODERATOR: "🛡️ **Role:** Moderator",
    Role.MEMBER: "👤 **Role:** Member",
}


def permissions_summary(user: ResolvedUser, permissions: PermissionSet, guild_id: str) -> Response:
    """List-style overview of the caller's own server-level permissions."""
    lines = [f"🔑 **Permissions for {user.username}**", ""]

    key_names = permissions.key_names()
    if key_names:
        lines.append("🌟 **Key Permissions:**")
        lines.extend(f"✅ {name}" for name in key_names)
        lines.append("")

    lines.append(ROLE_LINES[permissions.role])
    lines.append("")
    lines.append(f"📊 Permission Count: {len(permissions.granted_names())}/{len(PERMISSION_NAMES)}")
    lines.append(f"🆔 User ID: `{user.id}`")
    lines.append(f"🏰 Guild ID: `{guild_id}`")
    lines.append("")
    lines.append(f"🔢 Raw Permissions: `{permissions.value}`")
    lines.append("")
    granted = permissions.granted_names()
    if granted:
        lines.append("📜 **All Permissions:**")
        lines.extend(f"• {name}" for name in granted)
        lines.append("")
    lines.append("💡 **Note:** This shows server-level permissions. Channel-specific permissions may override these.")

    return Response.private(truncate("\n".join(lines)))


def permissions_other_user() -> Response:
    return Response.private(
        "❌ I can only check your own permissions. "
        "Use this command without specifying a user to check your permissions."
    )


def generic_error(command_name: str) -> Response:
    """Catch-all reply for unexpected exceptions."""
    return Response.private(f"❌ An error occurred while processing the {command_name} command.")


def unknown_subcommand() -> Response:
    return Response.private("❌ Unknown subcommand.")

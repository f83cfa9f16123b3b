"""
Validates raw command options into typed action and ticket requests.

This is the only place option lists are searched by name. Everything past
the command boundary receives a :class:`BanAction`, :class:`KickAction`,
:class:`TimeoutAction` or one of the ticket request dataclasses, already
bounds-checked. Violations raise :class:`~modgate.errors.ParseError` with a
message meant for the invoking user.
"""

from __future__ import annotations

from typing import Any, Sequence

from modgate.datatypes.action_datatypes import (
    MAX_BAN_DELETE_DAYS,
    MAX_REASON_LENGTH,
    MAX_TIMEOUT_MINUTES,
    MIN_TIMEOUT_MINUTES,
    BanAction,
    KickAction,
    TimeoutAction,
)
from modgate.datatypes.interaction_datatypes import CommandOption, Interaction
from modgate.datatypes.ticket_datatypes import (
    DEFAULT_DESCRIPTION,
    DEFAULT_PRIORITY,
    MAX_CLOSE_REASON_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    MAX_TITLE_LENGTH,
    TicketCloseRequest,
    TicketCreateRequest,
    TicketParticipantRequest,
    TicketPriority,
)
from modgate.errors import ParseError


def find_option(options: Sequence[CommandOption], name: str) -> CommandOption | None:
    return next((option for option in options if option.name == name), None)


def option_value(options: Sequence[CommandOption], name: str) -> Any:
    option = find_option(options, name)
    return None if option is None else option.value


def parse_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ParseError(f"Option '{name}' must be a whole number.")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        raise ParseError(f"Option '{name}' must be a whole number.") from None


def bounded_int(options: Sequence[CommandOption], name: str, *, minimum: int, maximum: int, default: int | None = None) -> int:
    value = option_value(options, name)
    if value is None:
        if default is None:
            raise ParseError("Missing required parameters.")
        return default
    number = parse_int(value, name)
    if not minimum <= number <= maximum:
        raise ParseError(f"Option '{name}' must be between {minimum} and {maximum}.")
    return number


def bounded_text(options: Sequence[CommandOption], name: str, *, max_length: int) -> str | None:
    """Return the stripped string value, ``None`` when absent or blank."""
    value = option_value(options, name)
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    if len(text) > max_length:
        raise ParseError(f"Option '{name}' must be at most {max_length} characters.")
    return text


def required_user_id(options: Sequence[CommandOption], name: str = "user") -> str:
    value = option_value(options, name)
    if value is None or not str(value).strip():
        raise ParseError("Missing required user parameter.")
    user_id = str(value).strip()
    if not user_id.isdigit():
        raise ParseError(f"Option '{name}' is not a valid user id.")
    return user_id


# --------------------------
# Moderation actions
# --------------------------

def parse_ban(interaction: Interaction) -> BanAction:
    options = interaction.options
    return BanAction(
        target_user_id=required_user_id(options),
        reason=bounded_text(options, "reason", max_length=MAX_REASON_LENGTH),
        delete_message_days=bounded_int(options, "delete_messages", minimum=0, maximum=MAX_BAN_DELETE_DAYS, default=0),
    )


def parse_kick(interaction: Interaction) -> KickAction:
    options = interaction.options
    return KickAction(
        target_user_id=required_user_id(options),
        reason=bounded_text(options, "reason", max_length=MAX_REASON_LENGTH),
    )


def parse_timeout(interaction: Interaction) -> TimeoutAction:
    options = interaction.options
    return TimeoutAction(
        target_user_id=required_user_id(options),
        reason=bounded_text(options, "reason", max_length=MAX_REASON_LENGTH),
        duration_minutes=bounded_int(options, "duration", minimum=MIN_TIMEOUT_MINUTES, maximum=MAX_TIMEOUT_MINUTES),
    )


# --------------------------
# Ticket subcommands
# --------------------------

def parse_priority(value: Any) -> TicketPriority:
    if value is None or not str(value).strip():
        return DEFAULT_PRIORITY
    try:
        return TicketPriority(str(value).strip().lower())
    except ValueError:
        choices = ", ".join(priority.value for priority in TicketPriority)
        raise ParseError(f"Priority must be one of: {choices}.") from None


def parse_ticket_create(subcommand: CommandOption) -> TicketCreateRequest:
    options = subcommand.options
    title = bounded_text(options, "title", max_length=MAX_TITLE_LENGTH)
    if title is None:
        raise ParseError("Title is required.")
    return TicketCreateRequest(
        title=title,
        description=bounded_text(options, "description", max_length=MAX_DESCRIPTION_LENGTH) or DEFAULT_DESCRIPTION,
        priority=parse_priority(option_value(options, "priority")),
    )


def parse_ticket_close(subcommand: CommandOption) -> TicketCloseRequest:
    return TicketCloseRequest(reason=bounded_text(subcommand.options, "reason", max_length=MAX_CLOSE_REASON_LENGTH))


def parse_ticket_participant(subcommand: CommandOption) -> TicketParticipantRequest:
    return TicketParticipantRequest(user_id=required_user_id(subcommand.options))

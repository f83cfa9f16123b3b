"""
Bridges py-cord application contexts and the command layer.

:func:`build_interaction` turns a :class:`discord.ApplicationContext` into the
immutable :class:`~modgate.datatypes.interaction_datatypes.Interaction` the
handlers read, using the raw interaction ``data`` so options and resolved
users reach the handlers exactly as Discord sent them.
:func:`send_response` delivers a
:class:`~modgate.datatypes.response_datatypes.Response` back to Discord.
"""

from __future__ import annotations

import io
from typing import Any, Awaitable, Callable

import discord

from modgate.datatypes.interaction_datatypes import (
    CommandOption,
    Interaction,
    InvokingMember,
    ResolvedUser,
)
from modgate.datatypes.response_datatypes import Response
from modgate.ui import response_formatter
from modgate.util.logger import get_logger

logger = get_logger("interaction_adapter")

CommandHandler = Callable[[Interaction], Awaitable[Response]]


def resolved_user_from(user: Any) -> ResolvedUser:
    """Build a :class:`ResolvedUser` from a py-cord ``User`` or ``Member``."""
    return ResolvedUser(
        id=str(user.id),
        username=str(user.name),
        discriminator=str(getattr(user, "discriminator", None) or "0"),
        global_name=getattr(user, "global_name", None),
        bot=bool(getattr(user, "bot", False)),
    )


def member_permissions(raw: discord.Interaction) -> int:
    """Permission bitmask Discord sent for the invoker, channel overwrites included.

    py-cord fills this from the payload's ``member.permissions`` and leaves it at 0
    outside a guild, so it works even when the guild is not cached.
    """
    return raw.permissions.value


def build_interaction(application_context: discord.ApplicationContext) -> Interaction:
    raw = application_context.interaction
    data = raw.data or {}
    resolved = (data.get("resolved") or {}).get("users") or {}

    return Interaction(
        id=str(raw.id),
        application_id=str(raw.application_id),
        channel_id=str(raw.channel_id or ""),
        guild_id=str(raw.guild_id) if raw.guild_id else None,
        member=InvokingMember(
            user=resolved_user_from(raw.user),
            permissions=member_permissions(raw),
        ),
        command_name=str(data.get("name", "")),
        locale=str(raw.locale) if raw.locale else None,
        resolved_users={str(user_id): ResolvedUser.from_payload(payload) for user_id, payload in resolved.items()},
        options=tuple(CommandOption.from_payload(option) for option in data.get("options") or ()),
    )


async def send_response(application_context: discord.ApplicationContext, response: Response) -> None:
    kwargs: dict[str, Any] = {"ephemeral": response.ephemeral}
    if response.file is not None:
        kwargs["file"] = discord.File(
            io.BytesIO(response.file.data),
            filename=response.file.filename,
            description=response.file.description,
        )
    await application_context.respond(response.content, **kwargs)


async def run_command(application_context: discord.ApplicationContext, handler: CommandHandler) -> None:
    """Run ``handler`` for this context and reply with whatever it returns."""
    command_name = str((application_context.interaction.data or {}).get("name", "command"))
    try:
        interaction = build_interaction(application_context)
    except Exception:
        logger.exception("Failed to read /%s interaction", command_name)
        response = response_formatter.generic_error(command_name)
    else:
        logger.debug(
            "/%s invoked by %s in guild %s",
            interaction.command_name, interaction.caller.id, interaction.guild_id,
        )
        response = await handler(interaction)

    try:
        await send_response(application_context, response)
    except discord.HTTPException as exc:
        logger.error("Failed to send /%s response: %s", command_name, exc)

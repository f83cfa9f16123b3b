"""
Normalized view of one slash-command invocation.

The transport layer (see :mod:`modgate.bot.interaction_adapter`) builds an
:class:`Interaction` from whatever it receives from Discord; everything in the
command layer only ever reads this immutable snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from discord import SlashCommandOptionType


@dataclass(frozen=True, slots=True)
class ResolvedUser:
    """Minimal user record from the interaction's ``resolved.users`` map."""
    id: str
    username: str
    discriminator: str = "0"
    global_name: str | None = None
    bot: bool = False

    @property
    def tag(self) -> str:
        """``name#1234`` for legacy accounts, plain username otherwise."""
        if self.discriminator and self.discriminator != "0":
            return f"{self.username}#{self.discriminator}"
        return self.username

    @property
    def mention(self) -> str:
        return f"<@{self.id}>"

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ResolvedUser":
        return cls(
            id=str(payload["id"]),
            username=str(payload.get("username", "")),
            discriminator=str(payload.get("discriminator") or "0"),
            global_name=payload.get("global_name"),
            bot=bool(payload.get("bot", False)),
        )


@dataclass(frozen=True, slots=True)
class InvokingMember:
    """The member who invoked the command.

    Attributes:
        user: The member's user record.
        permissions: Raw permission bitmask as Discord sends it (a decimal
            string) or an already-parsed integer.
    """
    user: ResolvedUser
    permissions: str | int = "0"

    @property
    def id(self) -> str:
        return self.user.id


@dataclass(frozen=True, slots=True)
class CommandOption:
    """One typed command option; subcommands carry their own nested options."""
    name: str
    type: SlashCommandOptionType
    value: Any = None
    options: tuple["CommandOption", ...] = ()

    @property
    def is_subcommand(self) -> bool:
        return self.type in (SlashCommandOptionType.sub_command, SlashCommandOptionType.sub_command_group)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "CommandOption":
        return cls(
            name=str(payload["name"]),
            type=SlashCommandOptionType(int(payload["type"])),
            value=payload.get("value"),
            options=tuple(cls.from_payload(child) for child in payload.get("options") or ()),
        )


@dataclass(frozen=True, slots=True)
class Interaction:
    """Immutable snapshot of one command invocation.

    ``guild_id`` is ``None`` in a direct-message context.
    """
    id: str
    application_id: str
    channel_id: str
    member: InvokingMember
    command_name: str
    guild_id: str | None = None
    locale: str | None = None
    resolved_users: Mapping[str, ResolvedUser] = field(default_factory=dict)
    options: tuple[CommandOption, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "resolved_users", MappingProxyType(dict(self.resolved_users)))
        object.__setattr__(self, "options", tuple(self.options))

    @property
    def in_guild(self) -> bool:
        return self.guild_id is not None

    @property
    def caller(self) -> ResolvedUser:
        return self.member.user

    def resolve_user(self, user_id: str | None) -> ResolvedUser | None:
        if user_id is None:
            return None
        return self.resolved_users.get(str(user_id))

    def subcommand(self) -> CommandOption | None:
        """Return the first option when it is a subcommand, else ``None``."""
        if self.options and self.options[0].is_subcommand:
            return self.options[0]
        return None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Interaction":
        """Build an Interaction from a raw ``APPLICATION_COMMAND`` payload.

        Used by transports that receive the interaction JSON directly (HTTP
        interactions endpoints, tests). Gateway transports build it from the
        library objects instead.
        """
        data = payload.get("data") or {}
        member_payload = payload.get("member") or {}
        user_payload = member_payload.get("user") or payload.get("user") or {}
        resolved = (data.get("resolved") or {}).get("users") or {}
        guild_id = payload.get("guild_id")

        return cls(
            id=str(payload["id"]),
            application_id=str(payload["application_id"]),
            channel_id=str(payload.get("channel_id") or (payload.get("channel") or {}).get("id", "")),
            guild_id=str(guild_id) if guild_id else None,
            member=InvokingMember(
                user=ResolvedUser.from_payload(user_payload),
                permissions=member_payload.get("permissions", "0"),
            ),
            command_name=str(data.get("name", "")),
            locale=payload.get("locale"),
            resolved_users={str(uid): ResolvedUser.from_payload(raw) for uid, raw in resolved.items()},
            options=tuple(CommandOption.from_payload(opt) for opt in data.get("options") or ()),
        )

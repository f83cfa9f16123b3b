"""
permission_evaluator.py
=======================

Decodes a caller's raw permission bitmask into capabilities and a coarse role.

Discord sends member permissions as a decimal string holding an unsigned
integer of 64+ bits. :func:`evaluate` parses it once; the resulting
:class:`PermissionSet` answers ``has(flag)`` with plain bit arithmetic and
exposes the same value as a :class:`discord.Permissions` for attribute-style
checks. Nothing here has side effects.
"""

from __future__ import annotations

from enum import Enum

import discord

from modgate.errors import ParseError

# Bit values of the capability flags the command layer checks.
CREATE_INSTANT_INVITE = 1 << 0
KICK_MEMBERS = 1 << 1
BAN_MEMBERS = 1 << 2
ADMINISTRATOR = 1 << 3
MANAGE_CHANNELS = 1 << 4
MANAGE_GUILD = 1 << 5
VIEW_CHANNEL = 1 << 10
SEND_MESSAGES = 1 << 11
READ_MESSAGE_HISTORY = 1 << 16
MANAGE_ROLES = 1 << 28
MODERATE_MEMBERS = 1 << 40

# Display name -> bit, in Discord's bit order.
PERMISSION_NAMES: dict[str, int] = {
    "Create Instant Invite": 1 << 0,
    "Kick Members": 1 << 1,
    "Ban Members": 1 << 2,
    "Administrator": 1 << 3,
    "Manage Channels": 1 << 4,
    "Manage Guild": 1 << 5,
    "Add Reactions": 1 << 6,
    "View Audit Log": 1 << 7,
    "Priority Speaker": 1 << 8,
    "Stream": 1 << 9,
    "View Channel": 1 << 10,
    "Send Messages": 1 << 11,
    "Send TTS Messages": 1 << 12,
    "Manage Messages": 1 << 13,
    "Embed Links": 1 << 14,
    "Attach Files": 1 << 15,
    "Read Message History": 1 << 16,
    "Mention Everyone": 1 << 17,
    "Use External Emojis": 1 << 18,
    "View Guild Insights": 1 << 19,
    "Connect": 1 << 20,
    "Speak": 1 << 21,
    "Mute Members": 1 << 22,
    "Deafen Members": 1 << 23,
    "Move Members": 1 << 24,
    "Use Voice Activity": 1 << 25,
    "Change Nickname": 1 << 26,
    "Manage Nicknames": 1 << 27,
    "Manage Roles": 1 << 28,
    "Manage Webhooks": 1 << 29,
    "Manage Emojis and Stickers": 1 << 30,
    "Use Application Commands": 1 << 31,
    "Request to Speak": 1 << 32,
    "Manage Events": 1 << 33,
    "Manage Threads": 1 << 34,
    "Create Public Threads": 1 << 35,
    "Create Private Threads": 1 << 36,
    "Use External Stickers": 1 << 37,
    "Send Messages in Threads": 1 << 38,
    "Use Embedded Activities": 1 << 39,
    "Moderate Members": 1 << 40,
}

# Any of these makes a non-administrator a moderator.
MODERATOR_FLAGS: tuple[int, ...] = (
    MANAGE_GUILD,
    BAN_MEMBERS,
    KICK_MEMBERS,
    MODERATE_MEMBERS,
    MANAGE_ROLES,
    MANAGE_CHANNELS,
)

KEY_PERMISSION_NAMES: tuple[str, ...] = (
    "Administrator",
    "Manage Guild",
    "Ban Members",
    "Kick Members",
    "Moderate Members",
    "Manage Roles",
    "Manage Channels",
)


class Role(Enum):
    """Coarse classification derived from a bitmask."""

    ADMINISTRATOR = "administrator"
    MODERATOR = "moderator"
    MEMBER = "member"

    def __str__(self) -> str:
        return self.value


class PermissionSet:
    """Capability view over one parsed bitmask.

    Attributes:
        value: The unsigned integer bitmask.
    """

    __slots__ = ("value",)

    def __init__(self, value: int) -> None:
        if value < 0:
            raise ParseError("Permission bitmask must be an unsigned integer.")
        self.value = value

    def __repr__(self) -> str:
        return f"PermissionSet(value={self.value:#x})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, PermissionSet) and other.value == self.value

    def __hash__(self) -> int:
        return hash(self.value)

    def has(self, flag: int) -> bool:
        """Return True when every bit of ``flag`` is set."""
        return (self.value & flag) == flag

    @property
    def is_administrator(self) -> bool:
        return self.has(ADMINISTRATOR)

    def grants(self, flag: int) -> bool:
        """Like :meth:`has`, but administrator grants everything."""
        return self.is_administrator or self.has(flag)

    @property
    def role(self) -> Role:
        if self.is_administrator:
            return Role.ADMINISTRATOR
        if any(self.has(flag) for flag in MODERATOR_FLAGS):
            return Role.MODERATOR
        return Role.MEMBER

    @property
    def discord_permissions(self) -> discord.Permissions:
        """The same bitmask as a py-cord :class:`discord.Permissions`."""
        return discord.Permissions(self.value)

    def granted_names(self) -> list[str]:
        """Display names of every known flag present in the bitmask."""
        return [name for name, flag in PERMISSION_NAMES.items() if self.has(flag)]

    def key_names(self) -> list[str]:
        """Display names of the moderation/administration flags present."""
        return [name for name in KEY_PERMISSION_NAMES if self.has(PERMISSION_NAMES[name])]


def parse_bitmask(raw: str | int) -> int:
    """Parse a raw permission value into an unsigned integer.

    Raises:
        ParseError: If ``raw`` is not a non-negative base-10 integer.
    """
    if isinstance(raw, bool):
        raise ParseError("Permission bitmask must be numeric.")
    if isinstance(raw, int):
        value = raw
    else:
        text = str(raw).strip()
        if not text.isdigit():
            raise ParseError(f"Permission bitmask {raw!r} is not numeric.")
        value = int(text)
    if value < 0:
        raise ParseError("Permission bitmask must be an unsigned integer.")
    return value


def evaluate(raw: str | int) -> PermissionSet:
    """Decode a raw bitmask into a :class:`PermissionSet`."""
    return PermissionSet(parse_bitmask(raw))

"""
Ticket requests and the channel view a ticket is re-derived from.

A ticket has no local record. Its identity is the channel name
``ticket-<number>`` and its metadata lives in the channel topic
``Ticket #<number> - <title> | Created by <username>``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

TICKET_CHANNEL_PREFIX = "ticket-"
TICKET_NUMBER_DIGITS = 6

MAX_TITLE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 1000
MAX_CLOSE_REASON_LENGTH = 500

DEFAULT_DESCRIPTION = "No description provided"


class TicketPriority(Enum):
    """Closed set of ticket priorities, each with a fixed display glyph."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    def __str__(self) -> str:
        return self.value

    @property
    def glyph(self) -> str:
        return PRIORITY_GLYPHS[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()


PRIORITY_GLYPHS = {
    TicketPriority.LOW: "🟢",
    TicketPriority.MEDIUM: "🟡",
    TicketPriority.HIGH: "🟠",
    TicketPriority.URGENT: "🔴",
}

DEFAULT_PRIORITY = TicketPriority.MEDIUM


class TicketOperation(Enum):
    """Ticket subcommands."""

    CREATE = "create"
    CLOSE = "close"
    ADD = "add"
    REMOVE = "remove"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class TicketCreateRequest:
    title: str
    description: str = DEFAULT_DESCRIPTION
    priority: TicketPriority = DEFAULT_PRIORITY


@dataclass(frozen=True, slots=True)
class TicketCloseRequest:
    reason: str | None = None


@dataclass(frozen=True, slots=True)
class TicketParticipantRequest:
    """Target of an ``add`` or ``remove`` subcommand."""
    user_id: str


@dataclass(frozen=True, slots=True)
class TicketChannel:
    """The subset of a Discord channel object ticket operations look at."""
    id: str
    name: str
    topic: str | None = None

    @property
    def is_ticket(self) -> bool:
        # Name-based identity: any channel named ticket-* is treated as a ticket.
        return self.name.startswith(TICKET_CHANNEL_PREFIX)

    def created_by(self, username: str) -> bool:
        """True when ``username`` is a substring of the topic.

        The topic is the only place the creator is recorded, so this is a
        plain substring match over the whole topic.
        """
        if not self.topic or not username:
            return False
        return username in self.topic

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "TicketChannel":
        return cls(
            id=str(payload.get("id", "")),
            name=str(payload.get("name") or ""),
            topic=payload.get("topic"),
        )


@dataclass(frozen=True, slots=True)
class TicketCreated:
    """Result of a successful ``create``.

    Attributes:
        welcome_posted: False when the channel exists but the welcome message
            could not be posted; the channel is kept either way.
    """
    number: str
    channel_id: str
    title: str
    priority: TicketPriority
    welcome_posted: bool = True


def ticket_channel_name(number: str) -> str:
    return f"{TICKET_CHANNEL_PREFIX}{number}"


def ticket_topic(number: str, title: str, creator_username: str) -> str:
    return f"Ticket #{number} - {title} | Created by {creator_username}"

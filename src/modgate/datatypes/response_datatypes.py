"""
Outbound response contract returned by every command handler.
"""

from __future__ import annotations

from dataclasses import dataclass

MAX_CONTENT_LENGTH = 2000


@dataclass(frozen=True, slots=True)
class FileAttachment:
    """A file sent alongside the message, used when text overflows."""
    filename: str
    data: bytes
    description: str | None = None


@dataclass(frozen=True, slots=True)
class Response:
    """Text reply plus visibility and an optional file payload.

    ``ephemeral`` replies are only visible to the invoking user.
    """
    content: str
    ephemeral: bool = True
    file: FileAttachment | None = None

    @classmethod
    def public(cls, content: str) -> "Response":
        return cls(content=content, ephemeral=False)

    @classmethod
    def private(cls, content: str) -> "Response":
        return cls(content=content, ephemeral=True)

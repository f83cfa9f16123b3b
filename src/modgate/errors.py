"""
Exception hierarchy shared by every modgate command.

Three families live here:

- **Request errors** raised before any external call: configuration problems,
  missing capabilities, invalid targets, unresolved users, wrong channel kind
  and malformed option values.
- **Platform errors** produced by :mod:`modgate.moderation.platform_executor`
  when Discord answers a REST call with a non-2xx status or the call fails on
  the network.
- :class:`ModgateError`, the common base the command boundary catches.

None of these escape a command handler; they are rendered by
:mod:`modgate.ui.response_formatter` into an ephemeral reply.
"""

from __future__ import annotations

from enum import Enum


class ModgateError(Exception):
    """Base class for every error a command handler knows how to render."""


class ConfigurationError(ModgateError):
    """Missing bot credential or missing guild context."""


class GuildContextRequiredError(ConfigurationError):
    """The command was invoked in a DM but needs a guild."""

    def __init__(self) -> None:
        super().__init__("This command can only be used in a server (guild).")


class MissingCredentialError(ConfigurationError):
    """No bot token has been configured."""

    def __init__(self) -> None:
        super().__init__("Bot token not configured.")


class AuthorizationError(ModgateError):
    """The caller lacks the capability an action requires.

    Attributes:
        capability: Display name of the missing permission, e.g. ``"Ban Members"``.
    """

    def __init__(self, capability: str) -> None:
        super().__init__(f"missing capability: {capability}")
        self.capability = capability


class TargetRejection(Enum):
    """Why a target identity was refused."""

    SELF = "self"
    BOT = "bot"

    def __str__(self) -> str:
        return self.value


class InvalidTargetError(ModgateError):
    """The action targets the caller or the bot itself."""

    def __init__(self, rejection: TargetRejection) -> None:
        super().__init__(f"invalid target: {rejection}")
        self.rejection = rejection


class NotFoundError(ModgateError):
    """A target id did not resolve to a known user record."""

    def __init__(self, target_id: str | None = None) -> None:
        super().__init__(f"could not resolve target {target_id!r}")
        self.target_id = target_id


class InvalidContextError(ModgateError):
    """A ticket operation was invoked outside a ticket channel."""

    def __init__(self, channel_name: str | None = None) -> None:
        super().__init__(f"channel {channel_name!r} is not a ticket channel")
        self.channel_name = channel_name


class ParseError(ModgateError, ValueError):
    """Malformed numeric input or option value.

    The message is written for the invoking user and is shown as-is.
    """


# -------------------- Platform classification --------------------

class PlatformError(ModgateError):
    """A classified failure of a single Discord REST call.

    Attributes:
        status: HTTP status returned by Discord, or ``None`` on network failure.
        detail: Human-readable detail from the response body, when present.
    """

    def __init__(self, status: int | None = None, detail: str | None = None) -> None:
        super().__init__(f"platform call failed (status={status}, detail={detail!r})")
        self.status = status
        self.detail = detail


class PermissionDenied(PlatformError):
    """403: the bot lacks the platform-side grant or role hierarchy."""


class TargetNotFound(PlatformError):
    """404: the target member, channel or ban does not exist."""


class MalformedRequest(PlatformError):
    """400: Discord rejected the request body."""


class Conflict(PlatformError):
    """409: the resource is already in the requested state (e.g. already banned)."""


class TransientFailure(PlatformError):
    """Any other status, or a network/timeout failure."""

"""
platform_executor.py
====================

Issues single Discord REST calls and classifies the outcome.

Each call is described by a :class:`PlatformRequest` (verb, path, JSON body,
optional audit reason). :class:`PlatformExecutor` adds the bot credential and
the common headers, performs exactly one request over an aiohttp session and
either returns the decoded payload (2xx) or raises one of the
:class:`~modgate.errors.PlatformError` subclasses. There are no retries: a
429 or a 5xx is a :class:`~modgate.errors.TransientFailure` like any other
unexpected status.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import aiohttp

from modgate.configuration.app_configuration import BotSettings
from modgate.errors import (
    Conflict,
    MalformedRequest,
    MissingCredentialError,
    PermissionDenied,
    PlatformError,
    TargetNotFound,
    TransientFailure,
)
from modgate.util.logger import get_logger

logger = get_logger("platform_executor")

AUDIT_LOG_REASON_HEADER = "X-Audit-Log-Reason"


@dataclass(frozen=True, slots=True)
class PlatformRequest:
    """One REST operation against the Discord API.

    Attributes:
        method: HTTP verb.
        path: Resource path relative to the API base, starting with ``/``.
        body: JSON body, or ``None`` for body-less requests.
        audit_reason: Reason recorded in the guild audit log, when supported.
    """
    method: str
    path: str
    body: dict[str, Any] | None = None
    audit_reason: str | None = None

    def __str__(self) -> str:
        return f"{self.method} {self.path}"


# --------------------------
# Request builders
# --------------------------

def ban_member(guild_id: str, user_id: str, *, delete_message_seconds: int, reason: str | None) -> PlatformRequest:
    return PlatformRequest(
        "PUT",
        f"/guilds/{guild_id}/bans/{user_id}",
        body={"delete_message_seconds": delete_message_seconds},
        audit_reason=reason,
    )


def kick_member(guild_id: str, user_id: str, *, reason: str | None) -> PlatformRequest:
    return PlatformRequest("DELETE", f"/guilds/{guild_id}/members/{user_id}", audit_reason=reason)


def timeout_member(guild_id: str, user_id: str, *, until_iso: str, reason: str | None) -> PlatformRequest:
    return PlatformRequest(
        "PATCH",
        f"/guilds/{guild_id}/members/{user_id}",
        body={"communication_disabled_until": until_iso},
        audit_reason=reason,
    )


def create_guild_channel(guild_id: str, payload: dict[str, Any], *, reason: str | None = None) -> PlatformRequest:
    return PlatformRequest("POST", f"/guilds/{guild_id}/channels", body=payload, audit_reason=reason)


def get_channel(channel_id: str) -> PlatformRequest:
    return PlatformRequest("GET", f"/channels/{channel_id}")


def delete_channel(channel_id: str, *, reason: str | None = None) -> PlatformRequest:
    return PlatformRequest("DELETE", f"/channels/{channel_id}", audit_reason=reason)


def create_message(channel_id: str, content: str) -> PlatformRequest:
    return PlatformRequest("POST", f"/channels/{channel_id}/messages", body={"content": content})


def put_permission_overwrite(
    channel_id: str,
    overwrite_id: str,
    *,
    allow: int = 0,
    deny: int = 0,
    overwrite_type: int = 1,
    reason: str | None = None,
) -> PlatformRequest:
    """Grant/deny bits for a single role (type 0) or member (type 1)."""
    return PlatformRequest(
        "PUT",
        f"/channels/{channel_id}/permissions/{overwrite_id}",
        body={"type": overwrite_type, "allow": str(allow), "deny": str(deny)},
        audit_reason=reason,
    )


def delete_permission_overwrite(channel_id: str, overwrite_id: str, *, reason: str | None = None) -> PlatformRequest:
    return PlatformRequest("DELETE", f"/channels/{channel_id}/permissions/{overwrite_id}", audit_reason=reason)


# --------------------------
# Classification
# --------------------------

def classify_status(status: int, payload: Any) -> PlatformError | None:
    """Map an HTTP status to a platform error, or ``None`` for 2xx."""
    if 200 <= status < 300:
        return None
    detail = extract_detail(payload)
    match status:
        case 403:
            return PermissionDenied(status, detail)
        case 404:
            return TargetNotFound(status, detail)
        case 400:
            return MalformedRequest(status, detail)
        case 409:
            return Conflict(status, detail)
        case _:
            return TransientFailure(status, detail)


def extract_detail(payload: Any) -> str | None:
    """Pull Discord's ``message`` field out of an error body."""
    if isinstance(payload, dict):
        message = payload.get("message")
        return str(message) if message else None
    if isinstance(payload, str) and payload.strip():
        return payload.strip()
    return None


class PlatformExecutor:
    """Performs Discord REST calls with the bot credential.

    Parameters
    ----------
    settings:
        Injected bot settings. The token is checked before every call.
    session:
        Optional aiohttp session. When omitted, one is created on first use
        and closed by :meth:`close`.
    """

    def __init__(self, settings: BotSettings, session: aiohttp.ClientSession | None = None) -> None:
        self.settings = settings
        self._session = session
        self._owns_session = session is None

    def ensure_credential(self) -> str:
        """Return the bot token or raise before any network activity."""
        if not self.settings.bot_token:
            raise MissingCredentialError()
        return self.settings.bot_token

    def build_headers(self, request: PlatformRequest) -> dict[str, str]:
        headers = {
            "Authorization": f"Bot {self.ensure_credential()}",
            "User-Agent": self.settings.user_agent,
        }
        if request.body is not None:
            headers["Content-Type"] = "application/json"
        if request.audit_reason:
            # Discord URL-decodes this header.
            headers[AUDIT_LOG_REASON_HEADER] = quote(request.audit_reason, safe=" ")
        return headers

    def get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.settings.request_timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def execute(self, request: PlatformRequest) -> Any:
        """Perform ``request`` once and return the decoded 2xx payload.

        Returns
        -------
        Any
            Parsed JSON body, or ``None`` for empty (204) responses.

        Raises
        ------
        MissingCredentialError
            No bot token is configured; nothing is sent.
        PermissionDenied, TargetNotFound, MalformedRequest, Conflict, TransientFailure
            Classified failure of the call.
        """
        headers = self.build_headers(request)
        url = f"{self.settings.api_base_url}{request.path}"
        logger.debug("Discord API %s", request)

        try:
            async with self.get_session().request(
                request.method,
                url,
                json=request.body,
                headers=headers,
            ) as response:
                status = response.status
                payload = await self.read_payload(response)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            logger.warning("Discord API %s failed on the network: %s", request, exc)
            raise TransientFailure(None, str(exc) or exc.__class__.__name__) from exc

        error = classify_status(status, payload)
        if error is not None:
            logger.warning("Discord API %s returned %s (%s)", request, status, error.detail or "no detail")
            raise error

        logger.debug("Discord API %s returned %s", request, status)
        return payload

    @staticmethod
    async def read_payload(response: aiohttp.ClientResponse) -> Any:
        if response.status == 204:
            return None
        try:
            return await response.json(content_type=None)
        except ValueError:
            return await response.text()

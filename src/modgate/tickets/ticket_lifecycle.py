"""
Ticket lifecycle controller.

Tickets are private text channels; nothing about them is stored locally.
Every operation re-reads the live channel and decides from its name and topic
whether it is a ticket and who opened it::

    Absent --create--> Open --add/remove--> Open --close--> Closing --(delay)--> Deleted

``create`` builds the channel and posts the welcome message. A failed welcome
post does not roll the channel back; the ticket is still reported as created.
``close`` posts the closing notice and hands the deletion to
:class:`~modgate.scheduler.channel_deletion_scheduler.ChannelDeletionScheduler`.
"""

from __future__ import annotations

import datetime
from typing import Callable

import discord

from modgate.datatypes.interaction_datatypes import Interaction, ResolvedUser
from modgate.datatypes.ticket_datatypes import (
    TICKET_NUMBER_DIGITS,
    TicketChannel,
    TicketCloseRequest,
    TicketCreated,
    TicketCreateRequest,
    TicketParticipantRequest,
    ticket_channel_name,
    ticket_topic,
)
from modgate.errors import AuthorizationError, InvalidContextError, ModgateError, NotFoundError
from modgate.moderation import platform_executor
from modgate.moderation.platform_executor import PlatformExecutor
from modgate.permissions import permission_evaluator
from modgate.scheduler.channel_deletion_scheduler import ChannelDeletionScheduler
from modgate.ui import response_formatter
from modgate.util.logger import get_logger

logger = get_logger("ticket_lifecycle")

GUILD_TEXT_CHANNEL = 0
ROLE_OVERWRITE = 0
MEMBER_OVERWRITE = 1

PARTICIPANT_ALLOW = (
    permission_evaluator.VIEW_CHANNEL
    | permission_evaluator.SEND_MESSAGES
    | permission_evaluator.READ_MESSAGE_HISTORY
)
BOT_ALLOW = PARTICIPANT_ALLOW | permission_evaluator.MANAGE_CHANNELS


def ticket_number_for(moment: datetime.datetime) -> str:
    """Last six digits of the creation time in epoch milliseconds."""
    millis = int(moment.timestamp() * 1000)
    return f"{millis % 10 ** TICKET_NUMBER_DIGITS:0{TICKET_NUMBER_DIGITS}d}"


class TicketLifecycleController:
    """Sequences the REST calls behind each ticket subcommand.

    Parameters
    ----------
    executor:
        Executor for every Discord call.
    deletion_scheduler:
        Receives the channel after a successful close.
    bot_user_id:
        The bot's own user id, granted access to every ticket channel. When
        ``None``, the interaction's ``application_id`` is used.
    clock:
        Returns the current UTC time; replaced in tests.
    """

    def __init__(
        self,
        executor: PlatformExecutor,
        deletion_scheduler: ChannelDeletionScheduler,
        *,
        bot_user_id: str | None = None,
        clock: Callable[[], datetime.datetime] = discord.utils.utcnow,
    ) -> None:
        self.executor = executor
        self.deletion_scheduler = deletion_scheduler
        self.bot_user_id = bot_user_id
        self.clock = clock

    # --------------------------
    # Helpers
    # --------------------------
    def build_channel_payload(self, interaction: Interaction, number: str, title: str) -> dict:
        bot_id = self.bot_user_id or interaction.application_id
        return {
            "name": ticket_channel_name(number),
            "type": GUILD_TEXT_CHANNEL,
            "topic": ticket_topic(number, title, interaction.caller.username),
            "permission_overwrites": [
                # @everyone shares the guild's id
                {"id": interaction.guild_id, "type": ROLE_OVERWRITE, "deny": str(permission_evaluator.VIEW_CHANNEL)},
                {"id": interaction.caller.id, "type": MEMBER_OVERWRITE, "allow": str(PARTICIPANT_ALLOW)},
                {"id": bot_id, "type": MEMBER_OVERWRITE, "allow": str(BOT_ALLOW)},
            ],
        }

    async def fetch_ticket_channel(self, channel_id: str) -> TicketChannel:
        """Load the live channel and insist that it is a ticket.

        Raises
        ------
        InvalidContextError
            The channel name does not start with ``ticket-``.
        """
        payload = await self.executor.execute(platform_executor.get_channel(channel_id))
        channel = TicketChannel.from_payload(payload or {"id": channel_id})
        if not channel.is_ticket:
            raise InvalidContextError(channel.name)
        return channel

    # --------------------------
    # Operations
    # --------------------------
    async def create(self, interaction: Interaction, request: TicketCreateRequest) -> TicketCreated:
        """Create the ticket channel, then post the welcome message."""
        created_at = self.clock()
        number = ticket_number_for(created_at)

        payload = self.build_channel_payload(interaction, number, request.title)
        channel = await self.executor.execute(
            platform_executor.create_guild_channel(interaction.guild_id, payload)
        )
        channel_id = str((channel or {}).get("id", ""))
        logger.info("Created ticket #%s (channel %s) for %s", number, channel_id, interaction.caller.id)

        welcome = response_formatter.ticket_welcome_message(
            number=number,
            request=request,
            creator_id=interaction.caller.id,
            created_at=created_at,
        )
        welcome_posted = True
        try:
            await self.executor.execute(platform_executor.create_message(channel_id, welcome))
        except ModgateError as exc:
            # The channel is kept; there is no compensating delete.
            welcome_posted = False
            logger.warning("Ticket #%s created but welcome message failed: %s", number, exc)

        return TicketCreated(
            number=number,
            channel_id=channel_id,
            title=request.title,
            priority=request.priority,
            welcome_posted=welcome_posted,
        )

    async def close(self, interaction: Interaction, request: TicketCloseRequest) -> TicketChannel:
        """Post the closing notice and schedule the channel deletion.

        Only the ticket creator or a caller with Manage Channels (or
        Administrator) may close a ticket.
        """
        channel = await self.fetch_ticket_channel(interaction.channel_id)

        permissions = permission_evaluator.evaluate(interaction.member.permissions)
        is_creator = channel.created_by(interaction.caller.username)
        if not is_creator and not permissions.grants(permission_evaluator.MANAGE_CHANNELS):
            raise AuthorizationError("Manage Channels")

        notice = response_formatter.ticket_closing_message(
            closer_id=interaction.caller.id,
            reason=request.reason,
            closed_at=self.clock(),
            delay_seconds=self.deletion_scheduler.delay_seconds,
        )
        await self.executor.execute(platform_executor.create_message(channel.id, notice))

        self.deletion_scheduler.schedule(channel.id, reason=f"Ticket closed by {interaction.caller.username}")
        logger.info("Ticket channel %s closed by %s", channel.id, interaction.caller.id)
        return channel

    async def resolve_participant(self, interaction: Interaction, request: TicketParticipantRequest) -> tuple[TicketChannel, ResolvedUser]:
        channel = await self.fetch_ticket_channel(interaction.channel_id)
        target = interaction.resolve_user(request.user_id)
        if target is None:
            raise NotFoundError(request.user_id)
        return channel, target

    async def add_participant(self, interaction: Interaction, request: TicketParticipantRequest) -> ResolvedUser:
        """Grant the target view/send/read-history on the ticket channel."""
        channel, target = await self.resolve_participant(interaction, request)
        await self.executor.execute(
            platform_executor.put_permission_overwrite(
                channel.id,
                target.id,
                allow=PARTICIPANT_ALLOW,
                overwrite_type=MEMBER_OVERWRITE,
            )
        )
        logger.info("Added %s to ticket channel %s", target.id, channel.id)
        return target

    async def remove_participant(self, interaction: Interaction, request: TicketParticipantRequest) -> ResolvedUser:
        """Drop the target's member overwrite from the ticket channel."""
        channel, target = await self.resolve_participant(interaction, request)
        await self.executor.execute(platform_executor.delete_permission_overwrite(channel.id, target.id))
        logger.info("Removed %s from ticket channel %s", target.id, channel.id)
        return target

import datetime

import pytest

from conftest import CALLER, TARGET
from modgate.datatypes.action_datatypes import ActionType, BanAction, KickAction, TimeoutAction
from modgate.datatypes.response_datatypes import MAX_CONTENT_LENGTH
from modgate.datatypes.ticket_datatypes import TicketCreated, TicketOperation, TicketPriority
from modgate.errors import (
    AuthorizationError,
    Conflict,
    GuildContextRequiredError,
    InvalidContextError,
    InvalidTargetError,
    MissingCredentialError,
    PermissionDenied,
    TargetRejection,
    TransientFailure,
)
from modgate.permissions import permission_evaluator
from modgate.permissions.permission_evaluator import PERMISSION_NAMES
from modgate.ui import response_formatter
from modgate.ui.response_formatter import OVERFLOW_NOTICE, TRUNCATION_MARKER

NOW = datetime.datetime(2024, 5, 1, 12, 30, tzinfo=datetime.timezone.utc)


class TestLengthHandling:

    def test_short_content_is_untouched(self) -> None:
        assert response_formatter.truncate("hello") == "hello"

    def test_long_content_is_cut_with_marker(self) -> None:
        result = response_formatter.truncate("x" * 5000)

        assert len(result) == MAX_CONTENT_LENGTH
        assert result.endswith(TRUNCATION_MARKER)

    def test_content_at_limit_is_kept(self) -> None:
        text = "y" * MAX_CONTENT_LENGTH
        assert response_formatter.truncate(text) == text

    def test_overflow_goes_to_attachment(self) -> None:
        text = "line\n" * 1000

        response = response_formatter.overflow_to_attachment(text, filename_prefix="audit", now=NOW)

        assert response.content == OVERFLOW_NOTICE
        assert response.file is not None
        assert response.file.filename == "audit-2024-05-01T12-30-00.txt"
        assert response.file.data == text.encode("utf-8")

    def test_overflow_helper_keeps_short_text_inline(self) -> None:
        response = response_formatter.overflow_to_attachment("short", ephemeral=True)

        assert response.content == "short"
        assert response.file is None
        assert response.ephemeral is True


@pytest.mark.parametrize(
    "minutes, expected",
    [
        (1, "1 minute"),
        (45, "45 minutes"),
        (60, "1 hour"),
        (90, "1 hour and 30 minutes"),
        (1440, "1 day"),
        (1500, "1 day and 1 hour"),
        (40320, "28 days"),
    ],
)
def test_format_timeout_duration(minutes: int, expected: str) -> None:
    assert response_formatter.format_timeout_duration(minutes) == expected


class TestModerationMessages:

    def test_ban_success_defaults(self) -> None:
        response = response_formatter.moderation_success(BanAction(target_user_id=TARGET.id), TARGET, CALLER, NOW)

        assert response.ephemeral is False
        assert "✅ **User Banned**" in response.content
        assert "User: target#1234" in response.content
        assert "Banned by: mod" in response.content
        assert "Reason: No reason provided" in response.content
        assert "Messages Deleted: None" in response.content
        assert f"<t:{int(NOW.timestamp())}:F>" in response.content

    def test_ban_success_with_delete_window(self) -> None:
        action = BanAction(target_user_id=TARGET.id, reason="raid", delete_message_days=7)

        content = response_formatter.moderation_success(action, TARGET, CALLER, NOW).content

        assert "Messages Deleted: Last 7 days" in content
        assert "Reason: raid" in content

    def test_timeout_success_shows_expiry(self) -> None:
        action = TimeoutAction(target_user_id=TARGET.id, duration_minutes=10)

        content = response_formatter.moderation_success(action, TARGET, CALLER, NOW).content

        expires = NOW + datetime.timedelta(minutes=10)
        assert "User Timed Out" in content
        assert "Duration: 10 minutes" in content
        assert f"<t:{int(expires.timestamp())}:F>" in content

    def test_kick_success(self) -> None:
        content = response_formatter.moderation_success(KickAction(target_user_id=TARGET.id), TARGET, CALLER, NOW).content

        assert "User Kicked" in content
        assert "Kicked by: mod" in content

    def test_missing_capability_names_permission(self) -> None:
        response = response_formatter.moderation_error(AuthorizationError("Ban Members"), ActionType.BAN)

        assert response.ephemeral is True
        assert "**Ban Members**" in response.content

    def test_guild_context_message_is_verbatim(self) -> None:
        response = response_formatter.moderation_error(GuildContextRequiredError(), ActionType.KICK)

        assert response.content == "This command can only be used in a server (guild)."

    def test_missing_credential(self) -> None:
        response = response_formatter.moderation_error(MissingCredentialError(), ActionType.KICK)

        assert response.content == "❌ Bot token not configured."

    def test_conflict_on_ban_is_already_banned(self) -> None:
        response = response_formatter.moderation_error(Conflict(409), ActionType.BAN)

        assert response.content == "❌ User is already banned from this server."

    def test_conflict_on_kick_is_generic(self) -> None:
        response = response_formatter.moderation_error(Conflict(409), ActionType.KICK)

        assert "Failed to kick" in response.content

    def test_self_and_bot_targets(self) -> None:
        assert response_formatter.moderation_error(
            InvalidTargetError(TargetRejection.SELF), ActionType.TIMEOUT
        ).content == "❌ You cannot timeout yourself."
        assert response_formatter.moderation_error(
            InvalidTargetError(TargetRejection.BOT), ActionType.BAN
        ).content == "❌ You cannot ban the bot."

    def test_platform_permission_denied(self) -> None:
        content = response_formatter.moderation_error(PermissionDenied(403), ActionType.TIMEOUT).content

        assert "I don't have permission to timeout this user" in content
        assert "**Moderate Members**" in content


class TestTicketMessages:

    def test_welcome_message_lists_details(self) -> None:
        from modgate.datatypes.ticket_datatypes import TicketCreateRequest

        content = response_formatter.ticket_welcome_message(
            number="123456",
            request=TicketCreateRequest("Printer", "On fire", TicketPriority.URGENT),
            creator_id=CALLER.id,
            created_at=NOW,
        )

        assert "Ticket #123456" in content
        assert "**Title:** Printer" in content
        assert "**Description:** On fire" in content
        assert "**Priority:** 🔴 Urgent" in content
        assert "**Created by:** <@100>" in content

    def test_created_confirmation_without_welcome_warns(self) -> None:
        result = TicketCreated("000001", "55", "Printer", TicketPriority.MEDIUM, welcome_posted=False)

        response = response_formatter.ticket_created(result)

        assert response.ephemeral is True
        assert "Ticket Created Successfully" in response.content
        assert "⚠️" in response.content
        assert "📺 **Channel:** <#55>" in response.content
        assert "📋 **Title:** Printer" in response.content

    def test_created_confirmation_with_welcome_has_no_warning(self) -> None:
        result = TicketCreated("000001", "55", "Printer", TicketPriority.LOW)

        assert "⚠️" not in response_formatter.ticket_created(result).content

    def test_participant_changes_are_public(self) -> None:
        assert response_formatter.participant_added(TARGET).ephemeral is False
        assert response_formatter.participant_removed(TARGET).content == "✅ Removed <@200> from the ticket."

    def test_wrong_channel(self) -> None:
        content = response_formatter.ticket_error(InvalidContextError("general"), TicketOperation.CLOSE).content

        assert content == "❌ This command can only be used in ticket channels."

    def test_create_permission_denied(self) -> None:
        content = response_formatter.ticket_error(PermissionDenied(403), TicketOperation.CREATE).content

        assert "create channels" in content

    def test_transient_failure_uses_operation_message(self) -> None:
        content = response_formatter.ticket_error(TransientFailure(500), TicketOperation.ADD).content

        assert content == "❌ Failed to add user to ticket."


class TestPermissionsSummary:

    def test_every_permission_fits_in_one_message(self) -> None:
        permissions = permission_evaluator.evaluate(str(sum(PERMISSION_NAMES.values())))

        response = response_formatter.permissions_summary(CALLER, permissions, "4242")

        assert len(response.content) <= MAX_CONTENT_LENGTH
        assert response.ephemeral is True
        assert "Administrator (has all permissions)" in response.content

    def test_member_summary(self) -> None:
        content = response_formatter.permissions_summary(CALLER, permission_evaluator.evaluate("0"), "4242").content

        assert "👤 **Role:** Member" in content
        assert "Permission Count: 0/41" in content
        assert "Key Permissions" not in content

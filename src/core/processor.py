"""Core moderation pipeline.

This module is integration-agnostic. It only relies on the platform port,
the whitelist store and the pattern matcher, so every decision can be tested
with fakes.

Decision order for one message:
1) Ignore messages without a human sender
2) Commands: /start reports status, /confirm verifies against the
   reference group
3) Unverified senders: delete the message and ask them to /confirm
4) Verified senders: delete text that hits a forbidden pattern

Every outbound call goes through the retry executor and every notice is
scheduled for deletion once it has been sent.
"""

from __future__ import annotations

import logging

from core import notices
from core.commands import Command, parse_command
from core.config import ModerationConfig
from core.errors import PersistenceError, RetryExhaustedError
from core.models import IncomingMessage, MemberStatus, Sender
from core.patterns import PatternMatcher
from core.ports import PlatformPort
from core.retry import RetryExecutor
from core.scheduler import DeletionScheduler
from core.whitelist import WhitelistStore

LOGGER = logging.getLogger(__name__)


class ModerationPipeline:
    """Decides what to do with each incoming message."""

    def __init__(
        self,
        platform: PlatformPort,
        whitelist: WhitelistStore,
        matcher: PatternMatcher,
        retry: RetryExecutor,
        scheduler: DeletionScheduler,
        config: ModerationConfig,
    ) -> None:
        self._platform = platform
        self._whitelist = whitelist
        self._matcher = matcher
        self._retry = retry
        self._scheduler = scheduler
        self._config = config

    async def handle(self, message: IncomingMessage) -> None:
        """Process one message through the moderation pipeline."""

        sender = message.sender
        if sender is None:
            return

        LOGGER.info(
            "Processing message %s from user %s (%s) in chat %s",
            message.message_id,
            sender.user_id,
            sender.display_name,
            message.chat_id,
        )

        command = parse_command(message.text)
        if command is Command.START:
            await self._handle_start(message, sender)
            return
        if command is Command.CONFIRM:
            await self._handle_confirm(message, sender)
            return

        if not await self._whitelist.is_whitelisted(sender.user_id):
            LOGGER.warning("User %s is not whitelisted, deleting message", sender.user_id)
            await self._delete(message, "delete unwhitelisted message")
            # Non-text content (stickers, media) is removed silently to avoid
            # flooding the chat with warnings.
            if message.text is not None:
                await self._notify(message.chat_id, notices.confirm_required(sender.first_name), "send unwhitelisted warning")
            return

        if message.text is None:
            return
        if not self._matcher.matches(message.text):
            return

        LOGGER.warning("Message from user %s contains forbidden pattern, deleting", sender.user_id)
        await self._delete(message, "delete forbidden message")
        await self._notify(message.chat_id, notices.rules_violation(sender.first_name), "send forbidden pattern warning")

    async def _handle_start(self, message: IncomingMessage, sender: Sender) -> None:
        LOGGER.info("Received /start from user %s in chat %s", sender.user_id, message.chat_id)
        if await self._whitelist.is_whitelisted(sender.user_id):
            text = notices.START_VERIFIED
        else:
            text = notices.START_INSTRUCTIONS
        await self._notify(message.chat_id, text, "send start response")

    async def _handle_confirm(self, message: IncomingMessage, sender: Sender) -> None:
        LOGGER.info("Received /confirm from user %s in chat %s", sender.user_id, message.chat_id)
        chat_id = message.chat_id
        await self._delete(message, "delete confirm command")

        if await self._whitelist.is_whitelisted(sender.user_id):
            LOGGER.info("User %s is already whitelisted", sender.user_id)
            await self._notify(chat_id, notices.ALREADY_VERIFIED, "send already confirmed message")
            return

        reference_chat_id = self._config.reference_chat_id
        LOGGER.info("Checking group membership for user %s in group %s", sender.user_id, reference_chat_id)
        try:
            status = await self._retry.execute(
                lambda: self._platform.get_member_status(reference_chat_id, sender.user_id),
                "get chat member",
            )
        except RetryExhaustedError as exc:
            LOGGER.error("Failed to check group membership for user %s: %s", sender.user_id, exc.last_error)
            await self._notify(chat_id, notices.MEMBERSHIP_CHECK_FAILED, "send membership check error")
            return

        if not status.is_eligible:
            LOGGER.warning(
                "User %s is not a member of group %s (status: %s)",
                sender.user_id,
                reference_chat_id,
                status.value,
            )
            await self._notify(chat_id, notices.NOT_A_MEMBER, "send not member message")
            return

        LOGGER.info("User %s is a member of group %s, adding to whitelist", sender.user_id, reference_chat_id)
        try:
            await self._whitelist.add_if_absent(sender.user_id, sender.display_name)
        except PersistenceError:
            LOGGER.exception("Failed to add user %s to whitelist", sender.user_id)
            await self._notify(chat_id, notices.TRY_LATER, "send whitelist error")
            return

        # Admins and owners get a different reply but the same whitelist entry.
        text = notices.VERIFIED if status is MemberStatus.MEMBER else notices.ADMIN_VERIFIED
        LOGGER.info("User %s successfully confirmed", sender.user_id)
        await self._notify(chat_id, text, "send confirmation message")

    async def _delete(self, message: IncomingMessage, label: str) -> None:
        """Delete the triggering message, best effort."""

        try:
            await self._retry.execute(
                lambda: self._platform.delete_message(message.chat_id, message.message_id),
                label,
            )
        except RetryExhaustedError as exc:
            LOGGER.error(
                "Failed to %s %s in chat %s: %s",
                label,
                message.message_id,
                message.chat_id,
                exc.last_error,
            )

    async def _notify(self, chat_id: int, text: str, label: str) -> None:
        """Send a transient notice and schedule its deletion."""

        try:
            notice_id = await self._retry.execute(lambda: self._platform.send_message(chat_id, text), label)
        except RetryExhaustedError as exc:
            LOGGER.error("Failed to %s in chat %s: %s", label, chat_id, exc.last_error)
            return
        self._scheduler.schedule_delete(chat_id, notice_id, self._config.notice_ttl)

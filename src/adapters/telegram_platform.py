"""Telethon implementation of the core PlatformPort.

Every Telethon or network failure is re-raised as TransientPlatformError so
the core retry policy treats them uniformly.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from telethon import TelegramClient, errors

from core.errors import TransientPlatformError
from core.models import MemberStatus

LOGGER = logging.getLogger(__name__)

_TRANSIENT_ERRORS = (errors.RPCError, OSError, asyncio.TimeoutError)


def status_from_permissions(permissions: Any) -> MemberStatus:
    """Map Telethon ParticipantPermissions onto a MemberStatus."""

    if permissions.is_creator:
        return MemberStatus.OWNER
    if permissions.is_admin:
        return MemberStatus.ADMINISTRATOR
    if permissions.has_left:
        return MemberStatus.LEFT
    if permissions.is_banned:
        rights = getattr(permissions.participant, "banned_rights", None)
        # Users who cannot even view messages were removed from the group.
        if rights is not None and getattr(rights, "view_messages", False):
            return MemberStatus.KICKED
        return MemberStatus.RESTRICTED
    if permissions.participant is None:
        return MemberStatus.OTHER
    return MemberStatus.MEMBER


class TelethonPlatform:
    """Send, delete and membership lookups through a bot-authorized client."""

    def __init__(self, client: TelegramClient) -> None:
        self._client = client

    async def send_message(self, chat_id: int, text: str) -> int:
        LOGGER.info("Sending message to chat %s", chat_id)
        try:
            sent = await self._client.send_message(chat_id, text)
        except _TRANSIENT_ERRORS as exc:
            raise TransientPlatformError(f"send_message to {chat_id} failed: {exc}") from exc
        return sent.id

    async def delete_message(self, chat_id: int, message_id: int) -> None:
        LOGGER.info("Deleting message %s in chat %s", message_id, chat_id)
        try:
            affected = await self._client.delete_messages(chat_id, [message_id])
        except _TRANSIENT_ERRORS as exc:
            raise TransientPlatformError(f"delete_messages {message_id} in {chat_id} failed: {exc}") from exc
        # A zero count means the message was already gone, which is fine.
        if not any(getattr(item, "pts_count", 0) for item in affected or []):
            LOGGER.debug("Message %s in chat %s was already deleted", message_id, chat_id)

    async def get_member_status(self, chat_id: int, user_id: int) -> MemberStatus:
        try:
            permissions = await self._client.get_permissions(chat_id, user_id)
        except errors.UserNotParticipantError:
            return MemberStatus.LEFT
        except _TRANSIENT_ERRORS as exc:
            raise TransientPlatformError(f"get_permissions for {user_id} in {chat_id} failed: {exc}") from exc
        status = status_from_permissions(permissions)
        LOGGER.debug("User %s has status %s in chat %s", user_id, status.value, chat_id)
        return status

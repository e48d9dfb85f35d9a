"""Telegram-to-core message mapping adapter.

This keeps Telethon-specific details out of the core pipeline.
"""

from __future__ import annotations

from typing import Optional

from telethon.tl.custom import Message
from telethon.tl.types import User
from telethon.utils import get_display_name

from core.models import IncomingMessage, Sender


def build_sender(sender_id: Optional[int], entity) -> Optional[Sender]:
    """Return the Sender for a message author.

    Any author with an id is moderated, including users posting as one of
    their channels and users whose entity could not be resolved; names
    fall back to the id. Only messages without an author id yield None.
    """

    if sender_id is None:
        return None

    full_name = (get_display_name(entity) if entity is not None else "") or str(sender_id)
    username = getattr(entity, "username", None)
    if isinstance(entity, User) and entity.first_name:
        first_name = entity.first_name
    else:
        first_name = full_name
    return Sender(
        user_id=sender_id,
        first_name=first_name,
        display_name=f"@{username}" if username else full_name,
    )


async def build_message(message: Message) -> IncomingMessage:
    """Build a core IncomingMessage from a Telethon Message."""

    sender_id = message.sender_id
    # Anonymous group admins post as the group itself.
    if sender_id is not None and sender_id == message.chat_id:
        sender_id = None
    entity = await message.get_sender() if sender_id is not None else None
    # Media captions count as text; media without a caption carries none.
    text = message.raw_text or None
    return IncomingMessage(
        sender=build_sender(sender_id, entity),
        chat_id=message.chat_id,
        message_id=message.id,
        text=text,
    )

"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for the messaging platform so that the
core can be exercised with fakes and reused with different clients.
"""

from __future__ import annotations

from typing import Protocol

from core.models import MemberStatus


class PlatformPort(Protocol):
    """Messaging-platform operations required by the core pipeline."""

    async def send_message(self, chat_id: int, text: str) -> int:
        """Send a text message and return the new message id."""
        ...

    async def delete_message(self, chat_id: int, message_id: int) -> None:
        ...

    async def get_member_status(self, chat_id: int, user_id: int) -> MemberStatus:
        ...

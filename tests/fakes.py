from __future__ import annotations

from typing import Optional

from core.models import MemberStatus


async def no_sleep(delay: float) -> None:
    return None


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class FakePlatform:
    def __init__(self, statuses: Optional[dict[int, MemberStatus]] = None) -> None:
        self.statuses = statuses or {}
        self.sent: list[tuple[int, int, str]] = []
        self.deleted: list[tuple[int, int]] = []
        self.status_queries: list[tuple[int, int]] = []
        self.fail_sends = 0
        self.fail_deletes = 0
        self.fail_status = 0
        self._next_id = 1000

    async def send_message(self, chat_id: int, text: str) -> int:
        if self.fail_sends:
            self.fail_sends -= 1
            raise ConnectionError("send failed")
        self._next_id += 1
        self.sent.append((chat_id, self._next_id, text))
        return self._next_id

    async def delete_message(self, chat_id: int, message_id: int) -> None:
        if self.fail_deletes:
            self.fail_deletes -= 1
            raise ConnectionError("delete failed")
        self.deleted.append((chat_id, message_id))

    async def get_member_status(self, chat_id: int, user_id: int) -> MemberStatus:
        self.status_queries.append((chat_id, user_id))
        if self.fail_status:
            self.fail_status -= 1
            raise ConnectionError("lookup failed")
        return self.statuses.get(user_id, MemberStatus.LEFT)


class DummyMessage:
    """Stand-in for a Telethon Message as seen by the mapper."""

    def __init__(
        self,
        *,
        sender,
        text: str,
        sender_id: "int | None" = 42,
        chat_id: int = -100123,
        message_id: int = 10,
    ) -> None:
        self._sender = sender
        self.sender_id = sender_id
        self.raw_text = text
        self.chat_id = chat_id
        self.id = message_id

    async def get_sender(self):
        return self._sender

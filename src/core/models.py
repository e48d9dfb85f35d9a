"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MemberStatus(str, Enum):
    """Membership status of a user in a chat, as reported by the platform."""

    MEMBER = "member"
    ADMINISTRATOR = "administrator"
    OWNER = "owner"
    LEFT = "left"
    KICKED = "kicked"
    RESTRICTED = "restricted"
    OTHER = "other"

    @property
    def is_eligible(self) -> bool:
        return self in ELIGIBLE_STATUSES


ELIGIBLE_STATUSES = frozenset(
    {MemberStatus.MEMBER, MemberStatus.ADMINISTRATOR, MemberStatus.OWNER}
)


@dataclass(frozen=True)
class Sender:
    """Author of an incoming message."""

    user_id: int
    first_name: str
    display_name: str


@dataclass(frozen=True)
class IncomingMessage:
    """Minimal message context used by the moderation pipeline."""

    sender: Optional[Sender]
    chat_id: int
    message_id: int
    text: Optional[str]


@dataclass(frozen=True)
class WhitelistEntry:
    """One persisted whitelist record. The name is informational only."""

    user_id: int
    display_name: str

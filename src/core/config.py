"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RetryConfig:
    """Bounded retry policy for outbound platform calls."""

    max_attempts: int = 3
    base_delay: float = 0.5


@dataclass(frozen=True)
class ModerationConfig:
    """Settings consumed by the moderation pipeline."""

    reference_chat_id: int
    notice_ttl: float = 30.0

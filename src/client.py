"""Telegram client factory for gatekeeper.

We explicitly manage the client's lifecycle (start/run_until_disconnected)
so it is obvious when the session is created and when it ends.
"""

from __future__ import annotations

import logging

from telethon import TelegramClient

import settings
from core.errors import ConfigurationError


def build_client() -> TelegramClient:
    """Create a Telethon client for the bot account.

    Bots still log in over MTProto, so API_ID/API_HASH are required in
    addition to the bot token. The client is not started here.
    """

    # Fail fast on missing credentials before touching the network.
    if not settings.BOT_TOKEN:
        raise ConfigurationError("VERIFICATION_BOT_TOKEN must be set")
    if not settings.API_ID or not settings.API_HASH:
        raise ConfigurationError("Missing API_ID or API_HASH in environment")
    try:
        api_id = int(settings.API_ID)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid API_ID: {settings.API_ID!r}") from exc

    logging.getLogger(__name__).info("Initializing Telegram client")

    return TelegramClient(settings.SESSION_NAME, api_id, settings.API_HASH)

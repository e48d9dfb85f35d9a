from __future__ import annotations

import asyncio
from types import SimpleNamespace

from telethon.tl.types import User

from adapters.telegram_mapper import build_message, build_sender
from fakes import DummyMessage


def test_user_sender_prefers_username() -> None:
    user = User(id=42, first_name="Alice", last_name="Smith", username="alice")
    sender = build_sender(42, user)
    assert sender is not None
    assert sender.user_id == 42
    assert sender.first_name == "Alice"
    assert sender.display_name == "@alice"


def test_user_without_username_uses_full_name() -> None:
    sender = build_sender(7, User(id=7, first_name="Bob", last_name="Marley"))
    assert sender is not None
    assert sender.display_name == "Bob Marley"


def test_channel_sender_is_kept() -> None:
    channel = SimpleNamespace(id=9999, title="Followers", username="cheapfollowers")
    sender = build_sender(-1009999, channel)
    assert sender is not None
    assert sender.user_id == -1009999
    assert sender.display_name == "@cheapfollowers"


def test_unresolved_sender_falls_back_to_id() -> None:
    sender = build_sender(555, None)
    assert sender is not None
    assert sender.user_id == 555
    assert sender.first_name == "555"
    assert sender.display_name == "555"


def test_no_sender_id_means_no_sender() -> None:
    assert build_sender(None, User(id=1, first_name="Ghost")) is None


def test_build_message_maps_fields() -> None:
    message = DummyMessage(sender=User(id=42, first_name="Alice"), text="hello")
    incoming = asyncio.run(build_message(message))

    assert incoming.sender is not None
    assert incoming.sender.user_id == 42
    assert incoming.chat_id == -100123
    assert incoming.message_id == 10
    assert incoming.text == "hello"


def test_build_message_keeps_channel_and_unresolved_senders() -> None:
    channel = SimpleNamespace(id=9999, title="Followers", username=None)
    posted_as_channel = DummyMessage(sender=channel, sender_id=-1009999, text="buy cheap followers")
    unresolved = DummyMessage(sender=None, sender_id=77, text="hi")

    assert asyncio.run(build_message(posted_as_channel)).sender.user_id == -1009999
    assert asyncio.run(build_message(unresolved)).sender.user_id == 77


def test_anonymous_admin_posting_as_group_is_exempt() -> None:
    message = DummyMessage(sender=None, sender_id=-100123, chat_id=-100123, text="announcement")
    assert asyncio.run(build_message(message)).sender is None


def test_build_message_without_text() -> None:
    message = DummyMessage(sender=User(id=42, first_name="Alice"), text="")
    incoming = asyncio.run(build_message(message))
    assert incoming.text is None

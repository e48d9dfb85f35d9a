from __future__ import annotations

from core.commands import Command, parse_command


def test_parses_plain_commands() -> None:
    assert parse_command("/start") is Command.START
    assert parse_command("/confirm") is Command.CONFIRM


def test_strips_bot_suffix_and_arguments() -> None:
    assert parse_command("/confirm@verify_bot") is Command.CONFIRM
    assert parse_command("  /start@verify_bot please") is Command.START
    assert parse_command("/confirm now") is Command.CONFIRM


def test_rejects_non_commands() -> None:
    assert parse_command(None) is None
    assert parse_command("") is None
    assert parse_command("   ") is None
    assert parse_command("hello /confirm") is None
    assert parse_command("/Confirm") is None
    assert parse_command("/confirmed") is None

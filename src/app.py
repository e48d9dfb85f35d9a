"""Application entry point for the gatekeeper bot."""

from __future__ import annotations

import argparse
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from telethon import events

import settings
from adapters.telegram_mapper import build_message
from adapters.telegram_platform import TelethonPlatform
from client import build_client
from core.config import ModerationConfig, RetryConfig
from core.patterns import PatternMatcher
from core.processor import ModerationPipeline
from core.retry import RetryExecutor
from core.scheduler import DeletionScheduler
from core.whitelist import WhitelistStore

NAME = "GATEKEEPER"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = []
    for name in redact_cfg.get("patterns", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = _RedactingFormatter(_collect_redaction_values(config), fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/gatekeeper.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _run() -> None:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)

    logger.info("Starting verification bot")
    logger.info("Group chat ID: %s", settings.GROUP_CHAT_ID)

    # Credentials are checked before any state is loaded.
    client = build_client()

    whitelist = WhitelistStore.load(settings.WHITELIST_FILE)
    matcher = PatternMatcher.load(settings.FORBIDDEN_PATTERNS_FILE)

    platform = TelethonPlatform(client)
    retry = RetryExecutor(
        RetryConfig(base_delay=settings.RETRY_BASE_DELAY)
    )
    scheduler = DeletionScheduler(platform, retry, default_delay=settings.NOTICE_TTL_SECONDS)
    pipeline = ModerationPipeline(
        platform=platform,
        whitelist=whitelist,
        matcher=matcher,
        retry=retry,
        scheduler=scheduler,
        config=ModerationConfig(
            reference_chat_id=settings.GROUP_CHAT_ID,
            notice_ttl=settings.NOTICE_TTL_SECONDS,
        ),
    )

    # Telethon runs each handler in its own task, so one slow message never
    # holds up the others. Errors stay inside the task that raised them.
    @client.on(events.NewMessage(incoming=True))
    async def handler(event) -> None:
        try:
            message = await build_message(event.message)
            await pipeline.handle(message)
        except Exception:
            logger.exception("Error while processing message")

    client.start(bot_token=settings.BOT_TOKEN)
    logger.info("Bot connected. Listening for incoming messages...")
    try:
        client.run_until_disconnected()
    except KeyboardInterrupt:
        # Scheduled deletions still pending at this point are abandoned.
        logger.info("Stopping, %s scheduled deletions abandoned", scheduler.pending)


def _check(text: str) -> None:
    matcher = PatternMatcher.load(settings.FORBIDDEN_PATTERNS_FILE)
    if matcher.matches(text):
        print("FLAGGED: message matches a forbidden pattern")
    else:
        print("OK: message does not match any forbidden pattern")


def _list_whitelist() -> None:
    store = WhitelistStore.load(settings.WHITELIST_FILE)
    user_ids = sorted(store.snapshot())
    print(f"{len(user_ids)} verified users in {store.path}")
    for user_id in user_ids:
        print(user_id)


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="gatekeeper")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start the bot")
    check_parser = subparsers.add_parser("check", help="Test a message against the forbidden patterns")
    check_parser.add_argument("text", help="Message text to test")
    subparsers.add_parser("whitelist", help="List verified users")

    args = parser.parse_args(argv)
    if args.command == "check":
        _check(args.text)
        return
    if args.command == "whitelist":
        _list_whitelist()
        return
    _run()


if __name__ == "__main__":
    main()

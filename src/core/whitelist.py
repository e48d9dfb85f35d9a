"""Persistent whitelist of verified users.

The store keeps the verified user ids in memory and mirrors every insertion
to an append-only text log, one ``<user_id> <display_name>`` line per entry.
The log is written before the in-memory set is updated, so the log is
always a superset of what the bot treats as verified.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import FrozenSet, Iterable, Optional

from core.errors import PersistenceError
from core.models import WhitelistEntry

LOGGER = logging.getLogger(__name__)


def parse_user_id(line: str) -> Optional[int]:
    """Return the user id at the start of a log line, or None if malformed."""

    tokens = line.split(maxsplit=1)
    if not tokens:
        return None
    try:
        return int(tokens[0])
    except ValueError:
        return None


def format_entry(entry: WhitelistEntry) -> str:
    """Render one log line. The display name is collapsed onto a single line."""

    name = " ".join(entry.display_name.split())
    if not name:
        return f"{entry.user_id}\n"
    return f"{entry.user_id} {name}\n"


class WhitelistStore:
    """Set of verified user ids backed by an append-only log file.

    Reads and writes share one asyncio lock, so the check-then-append in
    ``add_if_absent`` is atomic with respect to concurrent handlers.
    """

    def __init__(self, path: str, user_ids: Iterable[int] = ()) -> None:
        self._path = path
        self._user_ids: set[int] = set(user_ids)
        self._lock = asyncio.Lock()

    @classmethod
    def load(cls, path: str) -> "WhitelistStore":
        """Load the whitelist log. A missing file yields an empty store."""

        LOGGER.info("Loading whitelist from %s", path)
        if not os.path.exists(path):
            LOGGER.warning("Whitelist file %s does not exist, starting with an empty whitelist", path)
            return cls(path)

        user_ids: set[int] = set()
        with open(path, "r", encoding="utf-8", errors="replace") as handle:
            for line_number, line in enumerate(handle, start=1):
                if not line.strip():
                    continue
                user_id = parse_user_id(line)
                if user_id is None:
                    LOGGER.debug("Skipping malformed whitelist line %s", line_number)
                    continue
                user_ids.add(user_id)

        LOGGER.info("Loaded %s whitelisted users", len(user_ids))
        return cls(path, user_ids)

    @property
    def path(self) -> str:
        return self._path

    def snapshot(self) -> FrozenSet[int]:
        """Return a point-in-time copy of the verified user ids."""

        return frozenset(self._user_ids)

    async def is_whitelisted(self, user_id: int) -> bool:
        async with self._lock:
            whitelisted = user_id in self._user_ids
        LOGGER.debug("Checking if user %s is whitelisted: %s", user_id, whitelisted)
        return whitelisted

    async def add_if_absent(self, user_id: int, display_name: str) -> bool:
        """Whitelist a user, returning False if they were already present.

        Raises PersistenceError if the log append fails; the user is then not
        whitelisted in memory either.
        """

        entry = WhitelistEntry(user_id=user_id, display_name=display_name)
        async with self._lock:
            if user_id in self._user_ids:
                LOGGER.warning("User %s was already in whitelist", user_id)
                return False
            try:
                await asyncio.to_thread(self._append, entry)
            except OSError as exc:
                raise PersistenceError(f"Failed to append user {user_id} to {self._path}") from exc
            self._user_ids.add(user_id)

        LOGGER.info("Added user %s (%s) to whitelist", user_id, display_name)
        return True

    def _append(self, entry: WhitelistEntry) -> None:
        with open(self._path, "a", encoding="utf-8") as handle:
            handle.write(format_entry(entry))
            handle.flush()
            os.fsync(handle.fileno())

"""Bot command parsing."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class Command(Enum):
    START = "/start"
    CONFIRM = "/confirm"


def parse_command(text: Optional[str]) -> Optional[Command]:
    """Return the command carried by a message text, if any.

    Only the first whitespace-delimited token is considered and a trailing
    ``@botname`` is stripped, so ``/confirm@my_bot`` and ``/confirm now`` both
    parse as CONFIRM. Matching is exact and case-sensitive.
    """

    if not text:
        return None
    tokens = text.split(maxsplit=1)
    if not tokens:
        return None
    name = tokens[0].split("@", 1)[0]
    for command in Command:
        if command.value == name:
            return command
    return None

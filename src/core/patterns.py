"""Forbidden-content patterns (core domain).

The pattern source is line oriented: blank lines are ignored, a line starting
with ``*`` adds its remainder to the ``contains`` list, and any other line is
a ``starts_with`` pattern. Everything is lowercased at load time so each
check only has to normalize the message text.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from typing import Iterable, Tuple

LOGGER = logging.getLogger(__name__)

CONTAINS_MARKER = "*"


@dataclass(frozen=True)
class ForbiddenPatterns:
    """Normalized pattern lists. Immutable, so readers never need a lock."""

    starts_with: Tuple[str, ...] = ()
    contains: Tuple[str, ...] = ()


def parse_patterns(lines: Iterable[str]) -> ForbiddenPatterns:
    """Build a pattern set from raw source lines."""

    starts_with: list[str] = []
    contains: list[str] = []
    for raw in lines:
        line = raw.strip()
        if not line:
            continue
        if line.startswith(CONTAINS_MARKER):
            pattern = line[len(CONTAINS_MARKER):].strip().lower()
            # A lone marker would match every message.
            if not pattern:
                LOGGER.debug("Skipping empty contains pattern")
                continue
            contains.append(pattern)
        else:
            starts_with.append(line.lower())
    return ForbiddenPatterns(starts_with=tuple(starts_with), contains=tuple(contains))


class PatternMatcher:
    """Answers whether a message text hits any forbidden pattern."""

    def __init__(self, patterns: ForbiddenPatterns) -> None:
        self._patterns = patterns

    @classmethod
    def load(cls, path: str) -> "PatternMatcher":
        """Load patterns from a file. A missing file yields an empty matcher."""

        LOGGER.info("Loading forbidden patterns from %s", path)
        if not os.path.exists(path):
            LOGGER.warning("Forbidden patterns file %s does not exist, nothing will be flagged", path)
            return cls(ForbiddenPatterns())

        with open(path, "r", encoding="utf-8", errors="replace") as handle:
            patterns = parse_patterns(handle)

        LOGGER.info(
            "Loaded %s starts_with and %s contains patterns",
            len(patterns.starts_with),
            len(patterns.contains),
        )
        return cls(patterns)

    @property
    def patterns(self) -> ForbiddenPatterns:
        return self._patterns

    def matches(self, text: str) -> bool:
        """Return True if the text starts with or contains a forbidden pattern."""

        patterns = self._patterns
        normalized = text.strip().lower()
        if any(normalized.startswith(p) for p in patterns.starts_with):
            return True
        return any(p in normalized for p in patterns.contains)

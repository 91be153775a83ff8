"""Allow-list field sanitizer for untrusted import records.

Imported records are parsed from files the user picked, so nothing in
them is trusted: only allow-listed keys are carried over, every other
key is reported, and a record that does not supply every allow-listed
key is invalid as a whole.  Values are never inspected.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

PROFILE_KEYS: tuple[str, ...] = (
    "_id",
    "name",
    "bgColor",
    "textColor",
    "subscriptions",
)

HISTORY_KEYS: tuple[str, ...] = (
    "_id",
    "author",
    "authorId",
    "description",
    "isLive",
    "lengthSeconds",
    "paid",
    "published",
    "timeWatched",
    "title",
    "type",
    "videoId",
    "viewCount",
    "watchProgress",
)


@dataclass(frozen=True, slots=True)
class SanitizeResult:
    """Outcome of :func:`sanitize`."""

    sanitized: dict[str, Any]
    """Allow-listed keys and their untouched values."""

    rejected_keys: frozenset[str]
    """Keys present in the input but absent from the allow-list."""

    required_count: int

    @property
    def is_valid(self) -> bool:
        return len(self.sanitized) >= self.required_count


def sanitize(
    record: Mapping[str, Any],
    required_keys: Sequence[str],
) -> SanitizeResult:
    """Keep only the keys in *required_keys*.

    Every rejected key is logged at warning level.  Check
    :attr:`SanitizeResult.is_valid` before storing the result.
    """
    allowed = frozenset(required_keys)
    sanitized: dict[str, Any] = {}
    rejected: set[str] = set()

    for key, value in record.items():
        if key in allowed:
            sanitized[key] = value
        else:
            logger.warning("Unknown data key: %s", key)
            rejected.add(key)

    return SanitizeResult(
        sanitized=sanitized,
        rejected_keys=frozenset(rejected),
        required_count=len(allowed),
    )

"""Domain models for tubeport.

Profiles, subscriptions and history entries are **frozen** dataclasses
— immutable value objects.  Each knows how to convert itself to and
from the camelCase record shape used on the wire and on disk; nothing
here performs I/O.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from tubeport.exceptions import RecordValidationError


# ---------------------------------------------------------------------------
# Interchange formats and backends
# ---------------------------------------------------------------------------

class SubscriptionFormat(str, Enum):
    """External formats a subscription list can be imported from / exported to."""

    FREETUBE = "freetube"
    YOUTUBE = "youtube"
    NEWPIPE = "newpipe"


class Backend(str, Enum):
    """Channel-metadata resolution backends."""

    INVIDIOUS = "invidious"
    LOCAL = "local"

    @property
    def other(self) -> Backend:
        return Backend.LOCAL if self is Backend.INVIDIOUS else Backend.INVIDIOUS

    @property
    def label(self) -> str:
        return "Invidious API" if self is Backend.INVIDIOUS else "local API"


def _require_string_id(record: Mapping[str, Any], noun: str) -> None:
    """Stored documents are keyed on ``_id``; anything but a string is rejected."""
    if "_id" in record and not isinstance(record["_id"], str):
        raise RecordValidationError(f"{noun} _id must be a string.")


# ---------------------------------------------------------------------------
# Subscription
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Subscription:
    """A channel held by a profile."""

    id: str
    """Opaque platform channel id (e.g. ``UCxxxx``)."""

    name: str
    """Display name of the channel."""

    thumbnail: str = ""
    """Avatar URL; empty when unknown."""

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Subscription:
        return cls(
            id=record.get("id", ""),
            name=record.get("name", ""),
            thumbnail=record.get("thumbnail", ""),
        )

    def to_record(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "thumbnail": self.thumbnail}


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Profile:
    """A named collection of subscriptions plus display colours."""

    id: str
    name: str
    bg_color: str
    text_color: str
    subscriptions: tuple[Subscription, ...] = field(default_factory=tuple)

    @classmethod
    def default(cls) -> Profile:
        """The profile every installation starts with."""
        return cls(
            id="allChannels",
            name="All Channels",
            bg_color="#000000",
            text_color="#FFFFFF",
        )

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Profile:
        """Build a profile from a sanitized record.

        Raises
        ------
        RecordValidationError
            If ``_id`` is not a string or ``subscriptions`` is not a list
            of objects.
        """
        _require_string_id(record, "Profile")
        raw_subscriptions = record.get("subscriptions")
        if not isinstance(raw_subscriptions, list):
            raise RecordValidationError(
                "Profile subscriptions must be a list.",
            )
        if not all(isinstance(entry, Mapping) for entry in raw_subscriptions):
            raise RecordValidationError(
                "Profile subscriptions must be objects.",
            )
        return cls(
            id=record["_id"],
            name=record["name"],
            bg_color=record["bgColor"],
            text_color=record["textColor"],
            subscriptions=tuple(
                Subscription.from_record(entry) for entry in raw_subscriptions
            ),
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "name": self.name,
            "bgColor": self.bg_color,
            "textColor": self.text_color,
            "subscriptions": [sub.to_record() for sub in self.subscriptions],
        }

    def with_subscriptions_appended(
        self,
        subscriptions: tuple[Subscription, ...],
    ) -> Profile:
        """Return a copy with *subscriptions* concatenated onto the existing ones."""
        return replace(self, subscriptions=self.subscriptions + subscriptions)


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------

# Record key → attribute name.  Order matches the allow-list order.
_HISTORY_FIELDS: tuple[tuple[str, str], ...] = (
    ("_id", "id"),
    ("author", "author"),
    ("authorId", "author_id"),
    ("description", "description"),
    ("isLive", "is_live"),
    ("lengthSeconds", "length_seconds"),
    ("paid", "paid"),
    ("published", "published"),
    ("timeWatched", "time_watched"),
    ("title", "title"),
    ("type", "type"),
    ("videoId", "video_id"),
    ("viewCount", "view_count"),
    ("watchProgress", "watch_progress"),
)


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """A previously watched video and its watch state.

    Values are carried exactly as they appeared in the source record.
    """

    id: str
    author: Any
    author_id: Any
    description: Any
    is_live: Any
    length_seconds: Any
    paid: Any
    published: Any
    time_watched: Any
    title: Any
    type: Any
    video_id: Any
    view_count: Any
    watch_progress: Any

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> HistoryEntry:
        """Raises ``KeyError`` for a missing key, ``RecordValidationError`` for a non-string ``_id``."""
        _require_string_id(record, "History")
        return cls(**{attr: record[key] for key, attr in _HISTORY_FIELDS})

    def to_record(self) -> dict[str, Any]:
        return {key: getattr(self, attr) for key, attr in _HISTORY_FIELDS}


# ---------------------------------------------------------------------------
# Transient resolution values
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ChannelRef:
    """A channel id decoded from a subscription list, with the name the file gave it."""

    channel_id: str
    name: str = ""


@dataclass(frozen=True, slots=True)
class ChannelInfo:
    """Display metadata returned by a resolution backend."""

    author_name: str | None = None
    thumbnail_url: str | None = None

    @classmethod
    def empty(cls) -> ChannelInfo:
        return cls()

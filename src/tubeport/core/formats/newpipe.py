"""NewPipe subscription export format.

A single JSON object with a ``subscriptions`` array; each entry names a
channel by its ``https://www.youtube.com/channel/<id>`` URL.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable
from typing import Any

from tubeport.core.models import ChannelRef, Subscription
from tubeport.exceptions import FormatError

logger = logging.getLogger(__name__)

APP_VERSION: str = "0.19.8"
APP_VERSION_INT: int = 953
YOUTUBE_SERVICE_ID: int = 0

CHANNEL_URL_PREFIX: str = "https://www.youtube.com/channel/"
_CHANNEL_URL_RE = re.compile(r"^https://(www\.)?youtube\.com/channel/")


def channel_id_from_url(url: str) -> str:
    """Strip the channel URL prefix, leaving the bare channel id."""
    return _CHANNEL_URL_RE.sub("", url, count=1)


def decode_newpipe(data: bytes) -> list[ChannelRef]:
    """Extract channel references from a NewPipe export.

    Raises
    ------
    FormatError
        If *data* is not JSON or lacks a ``subscriptions`` array.
    """
    try:
        document: Any = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise FormatError(f"Invalid subscriptions file: {exc}") from exc

    entries = document.get("subscriptions") if isinstance(document, dict) else None
    if not isinstance(entries, list):
        raise FormatError(
            "Invalid subscriptions file",
            hint="A NewPipe export must contain a 'subscriptions' list.",
        )

    refs: list[ChannelRef] = []
    for entry in entries:
        url = entry.get("url") if isinstance(entry, dict) else None
        if not isinstance(url, str):
            logger.warning("Skipping NewPipe entry without a channel url: %r", entry)
            continue
        name = entry.get("name")
        refs.append(
            ChannelRef(
                channel_id=channel_id_from_url(url),
                name=name if isinstance(name, str) else "",
            ),
        )
    return refs


def encode_newpipe(subscriptions: Iterable[Subscription]) -> bytes:
    """Render *subscriptions* as a NewPipe export document."""
    document = {
        "app_version": APP_VERSION,
        "app_version_int": APP_VERSION_INT,
        "subscriptions": [
            {
                "service_id": YOUTUBE_SERVICE_ID,
                "url": f"{CHANNEL_URL_PREFIX}{sub.id}",
                "name": sub.name,
            }
            for sub in subscriptions
        ],
    }
    return json.dumps(document, ensure_ascii=False).encode("utf-8")

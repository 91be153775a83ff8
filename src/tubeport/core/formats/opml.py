"""OPML feed-list format, as produced by YouTube's subscription export.

Subscriptions live as child outlines of the first outline in
``<body>``; each child points at the channel's video feed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from xml.etree import ElementTree as ET
from xml.sax.saxutils import escape

from tubeport.core.models import ChannelRef, Subscription
from tubeport.exceptions import FormatError

logger = logging.getLogger(__name__)

FEED_URL_PREFIX: str = "https://www.youtube.com/feeds/videos.xml?channel_id="

_HEADER: str = (
    '<opml version="1.1"><body>'
    '<outline text="YouTube Subscriptions" title="YouTube Subscriptions">'
)
_FOOTER: str = "</outline></body></opml>"


# ---------------------------------------------------------------------------
# Decode
# ---------------------------------------------------------------------------

def _attr(element: ET.Element, name: str) -> str | None:
    """Case-insensitive attribute lookup (``xmlUrl`` vs ``xmlurl``)."""
    wanted = name.lower()
    for key, value in element.attrib.items():
        if key.lower() == wanted:
            return value
    return None


def decode_opml(data: bytes) -> list[ChannelRef]:
    """Extract channel references from an OPML document.

    Raises
    ------
    FormatError
        If *data* is not well-formed XML or the first outline under
        ``<body>`` has no child outlines.
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise FormatError(f"Invalid subscriptions file: {exc}") from exc

    body = root.find("body")
    group = body.find("outline") if body is not None else None
    children = group.findall("outline") if group is not None else []

    if not children:
        raise FormatError(
            "Invalid subscriptions file",
            hint="Expected channel outlines nested inside a top-level outline.",
        )

    refs: list[ChannelRef] = []
    for child in children:
        xml_url = _attr(child, "xmlUrl")
        if not xml_url:
            logger.warning("Skipping outline without xmlUrl: %r", child.attrib)
            continue
        name = _attr(child, "title") or _attr(child, "text") or ""
        refs.append(
            ChannelRef(channel_id=xml_url.removeprefix(FEED_URL_PREFIX), name=name),
        )
    return refs


# ---------------------------------------------------------------------------
# Encode
# ---------------------------------------------------------------------------

def _escape_attr(value: str) -> str:
    return escape(value, {'"': "&quot;"})


def encode_opml(subscriptions: Iterable[Subscription]) -> bytes:
    """Render *subscriptions* as a YouTube-style OPML document."""
    parts = [_HEADER]
    for sub in subscriptions:
        name = _escape_attr(sub.name or "")
        feed_url = _escape_attr(f"{FEED_URL_PREFIX}{sub.id}")
        parts.append(
            f'<outline text="{name}" title="{name}" type="rss" xmlUrl="{feed_url}"/>'
        )
    parts.append(_FOOTER)
    return "".join(parts).encode("utf-8")

"""Default export file names and dialog filters.

Every export is offered under a date-stamped default name so repeated
exports do not overwrite each other.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from enum import Enum

from tubeport.core.models import SubscriptionFormat


@dataclass(frozen=True, slots=True)
class FileFilter:
    """A named set of extensions offered by an open/save dialog."""

    name: str
    extensions: tuple[str, ...]


class ExportKind(str, Enum):
    FREETUBE_SUBSCRIPTIONS = "freetube-subscriptions"
    YOUTUBE_SUBSCRIPTIONS = "youtube-subscriptions"
    NEWPIPE_SUBSCRIPTIONS = "newpipe-subscriptions"
    FREETUBE_HISTORY = "freetube-history"


_EXTENSIONS: dict[ExportKind, str] = {
    ExportKind.FREETUBE_SUBSCRIPTIONS: "db",
    ExportKind.YOUTUBE_SUBSCRIPTIONS: "opml",
    ExportKind.NEWPIPE_SUBSCRIPTIONS: "json",
    ExportKind.FREETUBE_HISTORY: "db",
}

_SUBSCRIPTION_EXPORTS: dict[SubscriptionFormat, ExportKind] = {
    SubscriptionFormat.FREETUBE: ExportKind.FREETUBE_SUBSCRIPTIONS,
    SubscriptionFormat.YOUTUBE: ExportKind.YOUTUBE_SUBSCRIPTIONS,
    SubscriptionFormat.NEWPIPE: ExportKind.NEWPIPE_SUBSCRIPTIONS,
}

DATABASE_FILTER = FileFilter(name="Database File", extensions=("db",))
OPML_FILTER = FileFilter(name="OPML File", extensions=("opml", "xml"))
JSON_FILTER = FileFilter(name="JSON File", extensions=("json",))

_FORMAT_FILTERS: dict[SubscriptionFormat, FileFilter] = {
    SubscriptionFormat.FREETUBE: DATABASE_FILTER,
    SubscriptionFormat.YOUTUBE: OPML_FILTER,
    SubscriptionFormat.NEWPIPE: JSON_FILTER,
}


def export_kind_for(fmt: SubscriptionFormat) -> ExportKind:
    return _SUBSCRIPTION_EXPORTS[fmt]


def filters_for(fmt: SubscriptionFormat) -> tuple[FileFilter, ...]:
    return (_FORMAT_FILTERS[fmt],)


def default_export_filename(kind: ExportKind, today: dt.date | None = None) -> str:
    """Return e.g. ``youtube-subscriptions-2024-03-07.opml``."""
    day = today if today is not None else dt.date.today()
    return f"{kind.value}-{day.isoformat()}.{_EXTENSIONS[kind]}"

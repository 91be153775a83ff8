"""Line-delimited JSON stores for profiles and watch history.

The desktop application keeps each collection in an append-only
database file: one JSON document per line, later lines superseding
earlier ones with the same ``_id`` and ``{"$$deleted": true}`` lines
removing a document.  These stores read that layout and write by
appending one line per upsert, leaving compaction to the desktop
application; the file stays a valid native export at all times.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from tubeport.core.formats.native import decode_lines, encode_lines
from tubeport.core.models import HistoryEntry, Profile
from tubeport.exceptions import FormatError, RecordValidationError
from tubeport.infra.file_gateway import LocalFileGateway

logger = logging.getLogger(__name__)


class _JsonLinesStore:
    """Shared load/append logic keyed on ``_id``."""

    def __init__(self, path: Path, files: LocalFileGateway | None = None) -> None:
        self._path: Path = path
        self._files: LocalFileGateway = files or LocalFileGateway()

    @property
    def source_path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, dict[str, Any]]:
        """Return live documents by ``_id``, in first-seen order."""
        if not self._path.exists():
            return {}

        try:
            lines = decode_lines(self._files.read_bytes(self._path))
        except FormatError as exc:
            raise FormatError(
                f"{self._path} is corrupt: {exc}",
                hint="Restore the file from a backup or move it aside.",
            ) from exc

        documents: dict[str, dict[str, Any]] = {}
        for doc in lines:
            if not isinstance(doc, dict) or not isinstance(doc.get("_id"), str):
                # Index definitions and other bookkeeping lines.
                continue
            if doc.get("$$deleted"):
                documents.pop(doc["_id"], None)
            else:
                documents[doc["_id"]] = doc
        return documents

    def _upsert(self, document: dict[str, Any]) -> None:
        """Append *document*; it supersedes earlier lines with the same ``_id``."""
        self._files.append_line(self._path, encode_lines([document]))


class JsonLinesProfileStore(_JsonLinesStore):
    """Concrete :class:`~tubeport.core.protocols.ProfileStore`."""

    def list_profiles(self) -> list[Profile]:
        profiles: list[Profile] = []
        for doc in self._load().values():
            try:
                profiles.append(Profile.from_record(doc))
            except (KeyError, RecordValidationError) as exc:
                logger.warning("Ignoring unreadable stored profile %r: %s", doc.get("_id"), exc)
        return profiles

    def update_profile(self, profile: Profile) -> None:
        self._upsert(profile.to_record())


class JsonLinesHistoryStore(_JsonLinesStore):
    """Concrete :class:`~tubeport.core.protocols.HistoryStore`."""

    def list_history(self) -> list[HistoryEntry]:
        entries: list[HistoryEntry] = []
        for doc in self._load().values():
            try:
                entries.append(HistoryEntry.from_record(doc))
            except (KeyError, RecordValidationError) as exc:
                logger.warning("Ignoring incomplete stored history entry %r: %s", doc.get("_id"), exc)
        return entries

    def update_history(self, entry: HistoryEntry) -> None:
        self._upsert(entry.to_record())

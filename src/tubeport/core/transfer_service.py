"""Bulk import/export orchestrator.

This is the central service consumed by the CLI layer.  Every
collaborator — dialogs, file I/O, stores, resolver, notifier, progress
display — is injected at construction time, keeping the core free of
any external-system imports.

Batch lifecycle
---------------
``IDLE → READING → DECODING → PROCESSING → MERGING → DONE``

* A cancelled dialog ends the batch as ``CANCELLED`` before any read.
* File-level errors (unreadable file, undecodable container) end the
  batch as ``FAILED`` from ``READING``/``DECODING``; nothing is merged.
* Store errors (corrupt or unwritable store file) end the batch as
  ``FAILED`` as well; a write failure during ``MERGING`` leaves the
  records stored before it in place.
* Per-item problems (unknown keys, missing keys, unresolved channels)
  are reported and the batch carries on.
* Valid items are committed to the store once, after every item has
  been processed.

Guarantees
----------
* File-level and store errors are reported through the notifier, never
  raised.
* Subscription merges happen exactly once per batch, after all
  resolutions have been joined.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

from tubeport.core.filenames import (
    DATABASE_FILTER,
    ExportKind,
    FileFilter,
    default_export_filename,
    export_kind_for,
    filters_for,
)
from tubeport.core.formats import decode_lines, decode_newpipe, decode_opml, encode_newpipe, encode_opml
from tubeport.core.models import (
    ChannelRef,
    HistoryEntry,
    Profile,
    Subscription,
    SubscriptionFormat,
)
from tubeport.core.protocols import (
    FileDialog,
    FileGateway,
    HistoryStore,
    Notifier,
    ProfileStore,
    ProgressDisplay,
)
from tubeport.core.resolver import ChannelResolver
from tubeport.core.sanitizer import HISTORY_KEYS, PROFILE_KEYS, sanitize
from tubeport.exceptions import FileAccessError, FormatError, RecordValidationError, TubeportError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# User-facing messages.
MSG_WAIT = "This might take a while, please wait"
MSG_PROFILES_IMPORTED = "All subscriptions and profiles have been successfully imported"
MSG_SUBSCRIPTIONS_IMPORTED = "All subscriptions have been successfully imported"
MSG_HISTORY_IMPORTED = "All watched history has been successfully imported"
MSG_SUBSCRIPTIONS_EXPORTED = "All subscriptions have been successfully exported"
MSG_HISTORY_EXPORTED = "All watched history has been successfully exported"


class TransferStatus(str, Enum):
    IDLE = "idle"
    READING = "reading"
    DECODING = "decoding"
    PROCESSING = "processing"
    MERGING = "merging"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(slots=True)
class TransferReport:
    """Outcome of one batch."""

    status: TransferStatus = TransferStatus.IDLE
    path: Path | None = None
    count: int = 0
    """Records stored (imports) or written (exports)."""
    skipped: int = 0
    """Records dropped by validation."""
    unresolved: int = 0
    """Subscriptions whose channel metadata could not be resolved."""
    error: str | None = None


class _ProgressTracker:
    """Drive a :class:`ProgressDisplay` over *total* items."""

    def __init__(self, display: ProgressDisplay, total: int) -> None:
        self._display = display
        self._total = total
        self._done = 0

    def start(self) -> None:
        self._display.set_visible(True)
        self._display.set_percentage(0)

    def advance(self) -> None:
        self._done += 1
        if self._total:
            self._display.set_percentage(min(self._done / self._total * 100, 100.0))

    def finish(self) -> None:
        self._display.set_visible(False)


class TransferService:
    """Orchestrates every import and export batch.

    Parameters
    ----------
    dialogs:
        Chooses the source or destination file.
    files:
        Reads and writes raw bytes.
    profiles, history:
        Destination stores.
    resolver:
        Resolves channel ids for formats that lack display metadata.
    notifier, progress:
        User feedback.
    """

    def __init__(
        self,
        *,
        dialogs: FileDialog,
        files: FileGateway,
        profiles: ProfileStore,
        history: HistoryStore,
        resolver: ChannelResolver,
        notifier: Notifier,
        progress: ProgressDisplay,
    ) -> None:
        self._dialogs = dialogs
        self._files = files
        self._profiles = profiles
        self._history = history
        self._resolver = resolver
        self._notifier = notifier
        self._progress = progress

    # ------------------------------------------------------------------
    # Subscription imports
    # ------------------------------------------------------------------

    async def import_subscriptions(self, fmt: SubscriptionFormat) -> TransferReport:
        """Import a subscription file in *fmt*."""
        if fmt is SubscriptionFormat.FREETUBE:
            return await self.import_profiles_native()
        if fmt is SubscriptionFormat.YOUTUBE:
            return await self.import_subscriptions_opml()
        return await self.import_subscriptions_newpipe()

    async def import_profiles_native(self) -> TransferReport:
        """Import whole profiles from a native database export."""
        report = TransferReport()
        data = await self._open_and_read(filters_for(SubscriptionFormat.FREETUBE), report)
        if data is None:
            return report

        records = self._decode(decode_lines, data, report)
        if records is None:
            return report

        profiles = self._sanitize_all(records, PROFILE_KEYS, Profile.from_record, "Profile", report)

        if not self._store_all(profiles, self._profiles.update_profile, report):
            return report

        self._notifier.notify(MSG_PROFILES_IMPORTED)
        report.status = TransferStatus.DONE
        return report

    async def import_subscriptions_opml(self) -> TransferReport:
        """Import a YouTube OPML feed list into the first profile."""
        return await self._import_channel_refs(
            decode_opml, filters_for(SubscriptionFormat.YOUTUBE),
        )

    async def import_subscriptions_newpipe(self) -> TransferReport:
        """Import a NewPipe subscription export into the first profile."""
        return await self._import_channel_refs(
            decode_newpipe, filters_for(SubscriptionFormat.NEWPIPE),
        )

    # ------------------------------------------------------------------
    # History import
    # ------------------------------------------------------------------

    async def import_history(self) -> TransferReport:
        """Import watch history from a native database export."""
        report = TransferReport()
        data = await self._open_and_read((DATABASE_FILTER,), report)
        if data is None:
            return report

        records = self._decode(decode_lines, data, report)
        if records is None:
            return report

        entries = self._sanitize_all(
            records, HISTORY_KEYS, HistoryEntry.from_record, "History", report,
        )

        if not self._store_all(entries, self._history.update_history, report):
            return report

        self._notifier.notify(MSG_HISTORY_IMPORTED)
        report.status = TransferStatus.DONE
        return report

    # ------------------------------------------------------------------
    # Exports
    # ------------------------------------------------------------------

    async def export_subscriptions(self, fmt: SubscriptionFormat) -> TransferReport:
        """Export the first profile's subscriptions (or every profile, natively)."""
        kind = export_kind_for(fmt)
        filters = filters_for(fmt)

        if fmt is SubscriptionFormat.FREETUBE:
            return await self._export_store_file(
                self._profiles.source_path, kind, filters, MSG_SUBSCRIPTIONS_EXPORTED,
            )

        report = TransferReport()
        primary = self._primary_profile(report)
        if primary is None:
            return report
        subscriptions = primary.subscriptions
        encode = encode_opml if fmt is SubscriptionFormat.YOUTUBE else encode_newpipe
        payload = encode(subscriptions)

        path = await self._dialogs.save(default_export_filename(kind), filters)
        if path is None:
            report.status = TransferStatus.CANCELLED
            return report
        report.path = path

        if not await self._write(path, payload, report):
            return report

        report.count = len(subscriptions)
        self._notifier.notify(MSG_SUBSCRIPTIONS_EXPORTED)
        report.status = TransferStatus.DONE
        return report

    async def export_history(self) -> TransferReport:
        """Export watch history as a byte copy of the history store file."""
        return await self._export_store_file(
            self._history.source_path,
            ExportKind.FREETUBE_HISTORY,
            (DATABASE_FILTER,),
            MSG_HISTORY_EXPORTED,
        )

    # ------------------------------------------------------------------
    # Batch steps
    # ------------------------------------------------------------------

    async def _import_channel_refs(
        self,
        decode: Callable[[bytes], list[ChannelRef]],
        filters: Sequence[FileFilter],
    ) -> TransferReport:
        """Resolve every channel in a subscription list and merge once."""
        report = TransferReport()
        data = await self._open_and_read(filters, report)
        if data is None:
            return report

        primary = self._primary_profile(report)
        if primary is None:
            return report

        refs = self._decode(decode, data, report)
        if refs is None:
            return report

        self._notifier.notify(MSG_WAIT)
        report.status = TransferStatus.PROCESSING
        tracker = _ProgressTracker(self._progress, len(refs))

        async def build(ref: ChannelRef) -> Subscription:
            info = await self._resolver.resolve(ref.channel_id)
            tracker.advance()
            if info.author_name is None:
                report.unresolved += 1
            return Subscription(
                id=ref.channel_id,
                name=info.author_name or ref.name,
                thumbnail=info.thumbnail_url or "",
            )

        tracker.start()
        try:
            subscriptions = await asyncio.gather(*(build(ref) for ref in refs))
        finally:
            tracker.finish()

        merged = primary.with_subscriptions_appended(tuple(subscriptions))
        if not self._store_all([merged], self._profiles.update_profile, report):
            return report
        report.count = len(subscriptions)
        logger.info(
            "Imported %d subscriptions (%d unresolved)", report.count, report.unresolved,
        )

        self._notifier.notify(MSG_SUBSCRIPTIONS_IMPORTED)
        report.status = TransferStatus.DONE
        return report

    async def _export_store_file(
        self,
        source: Path,
        kind: ExportKind,
        filters: Sequence[FileFilter],
        success_message: str,
    ) -> TransferReport:
        """Copy a store file byte for byte to a user-chosen destination."""
        report = TransferReport()
        path = await self._dialogs.save(default_export_filename(kind), filters)
        if path is None:
            report.status = TransferStatus.CANCELLED
            return report
        report.path = path

        data = await self._read(source, report)
        if data is None:
            return report
        if not await self._write(path, data, report):
            return report

        report.count = data.count(b"\n")
        self._notifier.notify(success_message)
        report.status = TransferStatus.DONE
        return report

    def _sanitize_all(
        self,
        records: Sequence[Any],
        required_keys: Sequence[str],
        build: Callable[[Mapping[str, Any]], T],
        noun: str,
        report: TransferReport,
    ) -> list[T]:
        """Sanitize each record independently; invalid ones are reported and skipped."""
        report.status = TransferStatus.PROCESSING
        tracker = _ProgressTracker(self._progress, len(records))
        valid: list[T] = []

        tracker.start()
        try:
            for record in records:
                try:
                    valid.append(self._sanitize_one(record, required_keys, build, noun))
                except RecordValidationError as exc:
                    logger.warning("Skipping %s record: %s", noun.lower(), exc)
                    self._notifier.notify(str(exc))
                    report.skipped += 1
                tracker.advance()
        finally:
            tracker.finish()
        return valid

    def _sanitize_one(
        self,
        record: Any,
        required_keys: Sequence[str],
        build: Callable[[Mapping[str, Any]], T],
        noun: str,
    ) -> T:
        if not isinstance(record, Mapping):
            raise RecordValidationError(f"{noun} object is not a JSON object, skipping item")

        result = sanitize(record, required_keys)
        for key in sorted(result.rejected_keys):
            self._notifier.notify(f"Unknown data key: {key}")

        if not result.is_valid:
            raise RecordValidationError(f"{noun} object has insufficient data, skipping item")

        try:
            return build(result.sanitized)
        except RecordValidationError as exc:
            raise RecordValidationError(f"{noun} object is malformed, skipping item: {exc}") from exc

    # ------------------------------------------------------------------
    # Collaborator delegation (safe boundary)
    # ------------------------------------------------------------------

    def _primary_profile(self, report: TransferReport) -> Profile | None:
        """First stored profile, or the default one; ``None`` ends the batch."""
        try:
            profiles = self._profiles.list_profiles()
        except TubeportError as exc:
            self._fail(report, f"Unable to read profiles: {exc}")
            return None
        return profiles[0] if profiles else Profile.default()

    def _store_all(
        self,
        items: Sequence[T],
        store: Callable[[T], None],
        report: TransferReport,
    ) -> bool:
        """Store every item, counting them; a store error fails the batch."""
        report.status = TransferStatus.MERGING
        try:
            for item in items:
                store(item)
                report.count += 1
        except TubeportError as exc:
            self._fail(report, f"Unable to save imported data: {exc}")
            return False
        return True

    async def _open_and_read(
        self,
        filters: Sequence[FileFilter],
        report: TransferReport,
    ) -> bytes | None:
        """Ask for a source file and read it; ``None`` ends the batch."""
        path = await self._dialogs.open(filters)
        if path is None:
            report.status = TransferStatus.CANCELLED
            return None
        report.path = path
        return await self._read(path, report)

    async def _read(self, path: Path, report: TransferReport) -> bytes | None:
        report.status = TransferStatus.READING
        try:
            return await asyncio.to_thread(self._files.read_bytes, path)
        except FileAccessError as exc:
            self._fail(report, f"Unable to read file: {exc}")
            return None

    async def _write(self, path: Path, data: bytes, report: TransferReport) -> bool:
        try:
            await asyncio.to_thread(self._files.write_bytes, path, data)
        except FileAccessError as exc:
            self._fail(report, f"Unable to write file: {exc}")
            return False
        return True

    def _decode(
        self,
        decode: Callable[[bytes], T],
        data: bytes,
        report: TransferReport,
    ) -> T | None:
        report.status = TransferStatus.DECODING
        try:
            return decode(data)
        except FormatError as exc:
            self._fail(report, str(exc))
            return None

    def _fail(self, report: TransferReport, message: str) -> None:
        logger.warning(message)
        report.status = TransferStatus.FAILED
        report.error = message
        self._notifier.notify(message)

"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure and CLI adapters must
satisfy.  Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any, Protocol

from tubeport.core.filenames import FileFilter
from tubeport.core.models import HistoryEntry, Profile


class FileDialog(Protocol):
    """Contract for choosing the file an import reads or an export writes."""

    async def open(self, filters: Sequence[FileFilter]) -> Path | None:
        """Return the chosen file, or ``None`` when the user cancelled."""
        ...  # pragma: no cover

    async def save(
        self,
        default_name: str,
        filters: Sequence[FileFilter],
    ) -> Path | None:
        """Return the destination file, or ``None`` when the user cancelled."""
        ...  # pragma: no cover


class FileGateway(Protocol):
    """Contract for raw byte I/O.

    Implementations must map all OS errors to
    :class:`~tubeport.exceptions.FileAccessError`.
    """

    def read_bytes(self, path: Path) -> bytes:
        ...  # pragma: no cover

    def write_bytes(self, path: Path, data: bytes) -> None:
        ...  # pragma: no cover


class ChannelInfoProvider(Protocol):
    """Contract for channel-metadata backends.

    Any object that implements :meth:`fetch_channel_info` with the
    correct signature satisfies this protocol structurally.
    """

    def fetch_channel_info(self, channel_id: str) -> dict[str, Any]:
        """Fetch display metadata for *channel_id*.

        The returned dict must contain at least:

        * ``"author"`` — channel display name (``str``)
        * ``"thumbnails"`` — list of ``{"url": str}`` dicts, smallest first

        Raises
        ------
        ResolutionError
            When the backend cannot resolve the channel.
        """
        ...  # pragma: no cover


class Notifier(Protocol):
    """Contract for user-facing messages."""

    def notify(
        self,
        message: str,
        *,
        duration_ms: int | None = None,
        copy_text: str | None = None,
    ) -> None:
        """Show *message*.

        *copy_text*, when given, is detail the user may want to copy
        (typically the raw text of an error).
        """
        ...  # pragma: no cover


class ProgressDisplay(Protocol):
    """Contract for a single percentage progress indicator."""

    def set_visible(self, visible: bool) -> None:
        ...  # pragma: no cover

    def set_percentage(self, percentage: float) -> None:
        ...  # pragma: no cover


class ProfileStore(Protocol):
    """Contract for the persistent profile collection.

    ``update_profile`` is an upsert keyed on :attr:`Profile.id`.
    """

    @property
    def source_path(self) -> Path:
        """On-disk file backing the store, in the native format."""
        ...  # pragma: no cover

    def list_profiles(self) -> list[Profile]:
        ...  # pragma: no cover

    def update_profile(self, profile: Profile) -> None:
        ...  # pragma: no cover


class HistoryStore(Protocol):
    """Contract for the persistent watch-history collection.

    ``update_history`` is an upsert keyed on :attr:`HistoryEntry.id`.
    """

    @property
    def source_path(self) -> Path:
        ...  # pragma: no cover

    def update_history(self, entry: HistoryEntry) -> None:
        ...  # pragma: no cover

"""Local filesystem implementation of :class:`~tubeport.core.protocols.FileGateway`."""

from __future__ import annotations

import contextlib
import os
from pathlib import Path

from tubeport.exceptions import FileAccessError


class LocalFileGateway:
    """Read and write whole files; every ``OSError`` becomes :class:`FileAccessError`."""

    def read_bytes(self, path: Path) -> bytes:
        try:
            return path.read_bytes()
        except OSError as exc:
            raise FileAccessError(
                f"{path}: {exc.strerror or exc}",
            ) from exc

    def write_bytes(self, path: Path, data: bytes) -> None:
        """Write atomically: a temporary sibling is renamed over *path*."""
        tmp = path.with_name(f".{path.name}.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(data)
            os.replace(tmp, path)
        except OSError as exc:
            with contextlib.suppress(OSError):
                tmp.unlink(missing_ok=True)
            raise FileAccessError(
                f"{path}: {exc.strerror or exc}",
            ) from exc

    def append_line(self, path: Path, data: bytes) -> None:
        """Append *data* to *path*, starting a new line if the file lacks a trailing one."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("a+b") as handle:
                if handle.tell() > 0:
                    handle.seek(-1, os.SEEK_END)
                    if handle.read(1) != b"\n":
                        data = b"\n" + data
                handle.write(data)
        except OSError as exc:
            raise FileAccessError(
                f"{path}: {exc.strerror or exc}",
            ) from exc

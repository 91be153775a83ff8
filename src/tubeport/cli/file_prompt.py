"""File selection for the CLI layer.

Two implementations of :class:`~tubeport.core.protocols.FileDialog`:

* :class:`FixedPathDialog` — the path was given on the command line.
* :class:`QuestionaryFileDialog` — prompt interactively with
  questionary's path completer, filtered to the format's extensions.

An empty answer, Esc or Ctrl+C at the prompt means "cancelled".
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

from tubeport.core.filenames import FileFilter
from tubeport.exceptions import EnvironmentError


def _import_questionary() -> Any:
    """Import questionary lazily for interactive selection."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


# ---------------------------------------------------------------------------
# Helpers (pure)
# ---------------------------------------------------------------------------

def allowed_extensions(filters: Sequence[FileFilter]) -> frozenset[str] | None:
    """Return lower-case extensions, or ``None`` when any file is allowed."""
    extensions = {ext.lower() for f in filters for ext in f.extensions}
    if not extensions or "*" in extensions:
        return None
    return frozenset(extensions)


def make_file_filter(filters: Sequence[FileFilter]) -> Callable[[str], bool]:
    """Build a completer filter: directories always, files by extension."""
    extensions = allowed_extensions(filters)

    def _accept(candidate: str) -> bool:
        path = Path(candidate)
        if extensions is None or path.is_dir():
            return True
        return path.suffix.lstrip(".").lower() in extensions

    return _accept


def describe_filters(filters: Sequence[FileFilter]) -> str:
    """Render filters as ``Database File (*.db)``."""
    return ", ".join(
        f"{f.name} ({' '.join(f'*.{ext}' for ext in f.extensions)})" for f in filters
    )


def _to_path(answer: str | None) -> Path | None:
    if answer is None or not answer.strip():
        return None
    return Path(answer.strip()).expanduser()


# ---------------------------------------------------------------------------
# Dialogs
# ---------------------------------------------------------------------------

class FixedPathDialog:
    """Answer every dialog with the path supplied on the command line."""

    def __init__(self, path: Path) -> None:
        self._path: Path = path

    async def open(self, filters: Sequence[FileFilter]) -> Path | None:
        return self._path

    async def save(
        self,
        default_name: str,
        filters: Sequence[FileFilter],
    ) -> Path | None:
        if self._path.is_dir():
            return self._path / default_name
        return self._path


class QuestionaryFileDialog:
    """Prompt for a path with tab completion."""

    def __init__(self, start_dir: Path | None = None) -> None:
        self._start_dir: Path = start_dir or Path.cwd()

    async def open(self, filters: Sequence[FileFilter]) -> Path | None:
        questionary = _import_questionary()
        answer: str | None = await questionary.path(
            f"File to import [{describe_filters(filters)}]:",
            default=f"{self._start_dir}/",
            file_filter=make_file_filter(filters),
            validate=lambda text: (
                not text.strip()
                or Path(text.strip()).expanduser().is_file()
                or "Not a file"
            ),
        ).ask_async()
        return _to_path(answer)

    async def save(
        self,
        default_name: str,
        filters: Sequence[FileFilter],
    ) -> Path | None:
        questionary = _import_questionary()
        answer: str | None = await questionary.path(
            f"Save as [{describe_filters(filters)}]:",
            default=str(self._start_dir / default_name),
            file_filter=make_file_filter(filters),
        ).ask_async()
        return _to_path(answer)

"""``tubeport doctor`` — environment diagnostics command.

Gathers system information and renders a Rich table summarising
whether the runtime environment and the configured data directory are
usable.

This module lives in the CLI layer — it may import from ``infra``
and ``config``, and it renders via Rich.  No business logic resides
here; it purely collects and displays diagnostic data.
"""

from __future__ import annotations

import platform
import sys

from tubeport.cli import exit_codes
from tubeport.cli.console import console
from tubeport.config import Settings
from tubeport.exceptions import TubeportError
from tubeport.infra.jsonl_store import JsonLinesHistoryStore, JsonLinesProfileStore
from tubeport.version import __version__

Check = tuple[str, str, str]


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> Check:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 10)
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _ytdlp_version_check() -> Check:
    """yt-dlp powers the local backend; missing it only disables that backend."""
    try:
        from yt_dlp.version import __version__ as ydl_ver

        return "yt-dlp", ydl_ver, "[green]OK[/green]"
    except ImportError:
        return "yt-dlp", "NOT INSTALLED", "[yellow]WARN[/yellow]"


def _requests_version_check() -> Check:
    """requests powers the Invidious backend."""
    try:
        import requests

        return "requests", requests.__version__, "[green]OK[/green]"
    except ImportError:
        return "requests", "NOT INSTALLED", "[yellow]WARN[/yellow]"


def _data_dir_check(settings: Settings) -> Check:
    if settings.data_dir.is_dir():
        return "Data dir", str(settings.data_dir), "[green]OK[/green]"
    return "Data dir", f"{settings.data_dir} (missing)", "[yellow]WARN[/yellow]"


def _profiles_check(settings: Settings) -> Check:
    store = JsonLinesProfileStore(settings.profiles_path)
    try:
        profiles = store.list_profiles()
    except TubeportError as exc:
        return "Profiles", str(exc), "[red]FAIL[/red]"
    subscriptions = sum(len(p.subscriptions) for p in profiles)
    return "Profiles", f"{len(profiles)} ({subscriptions} subscriptions)", "[green]OK[/green]"


def _history_check(settings: Settings) -> Check:
    store = JsonLinesHistoryStore(settings.history_path)
    try:
        entries = store.list_history()
    except TubeportError as exc:
        return "History", str(exc), "[red]FAIL[/red]"
    return "History", f"{len(entries)} entries", "[green]OK[/green]"


def _tubeport_version_check() -> Check:
    return "tubeport", __version__, "[green]OK[/green]"


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    for word in ("FAIL", "WARN", "OK"):
        if word in status:
            return word
    return status


def _print_plain_doctor_table(checks: list[Check]) -> None:
    """Render doctor output without Rich."""
    print("\ntubeport doctor", file=sys.stderr)
    print("=" * 64, file=sys.stderr)
    print(f"{'Component':<12} {'Value':<40} {'Status':<8}", file=sys.stderr)
    print("-" * 64, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<12} {value:<40} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(settings: Settings) -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when no check fails,
        :data:`exit_codes.GENERAL_ERROR` otherwise.
    """
    checks = [
        _tubeport_version_check(),
        _python_version_check(),
        _ytdlp_version_check(),
        _requests_version_check(),
        _data_dir_check(settings),
        _profiles_check(settings),
        _history_check(settings),
    ]
    has_failure = any("FAIL" in status for _, _, status in checks)

    try:
        from rich.table import Table
        from rich.text import Text
    except ModuleNotFoundError:
        _print_plain_doctor_table(checks)
        print("Some checks failed." if has_failure else "All checks passed.", file=sys.stderr)
        return exit_codes.GENERAL_ERROR if has_failure else exit_codes.SUCCESS

    table = Table(
        title="tubeport doctor",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Component", style="bold", min_width=12)
    table.add_column("Value", min_width=20)
    table.add_column("Status", justify="center", min_width=8)
    for label, value, status in checks:
        # Values carry paths and store errors; keep them out of markup parsing.
        table.add_row(label, Text(value), status)

    console.print()
    console.print(table)
    console.print()

    if has_failure:
        console.print("[bold red]Some checks failed.[/bold red]")
        return exit_codes.GENERAL_ERROR

    console.print("[bold green]All checks passed.[/bold green]")
    return exit_codes.SUCCESS

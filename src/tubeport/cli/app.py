"""CLI application entry point and command routing for tubeport.

This module is the **sole error boundary** for the entire application.
It catches :class:`~tubeport.exceptions.TubeportError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-friendly messages via Rich
and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the core
  :class:`~tubeport.core.transfer_service.TransferService` wired with
  infrastructure adapters.
* ``print()`` is forbidden outside the CLI layer; Rich console is used
  exclusively.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from tubeport.cli import exit_codes
from tubeport.cli.console import configure_logging, console
from tubeport.config import Settings, load_settings, normalize_instance, parse_backend
from tubeport.core.models import Backend, SubscriptionFormat
from tubeport.core.transfer_service import TransferReport, TransferService, TransferStatus
from tubeport.exceptions import ConfigurationError, TubeportError
from tubeport.version import __version__

FORMAT_CHOICES: list[str] = [fmt.value for fmt in SubscriptionFormat]


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _backend_arg(value: str) -> Backend:
    try:
        return parse_backend(value)
    except ConfigurationError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _instance_arg(value: str) -> str:
    try:
        return normalize_instance(value)
    except ConfigurationError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    * ``tubeport import-subscriptions {freetube,youtube,newpipe} [PATH]``
    * ``tubeport export-subscriptions {freetube,youtube,newpipe} [PATH]``
    * ``tubeport import-history [PATH]`` / ``tubeport export-history [PATH]``
    * ``tubeport doctor``
    """
    parser = argparse.ArgumentParser(
        prog="tubeport",
        description="Import and export subscriptions, profiles and watch history.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Show log output (repeat for debug detail).",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory holding profiles.db and history.db.",
    )
    parser.add_argument(
        "--backend",
        type=_backend_arg,
        default=None,
        help="Channel lookup backend to try first: invidious or local.",
    )
    parser.add_argument(
        "--no-fallback",
        dest="backend_fallback",
        action="store_false",
        default=None,
        help="Do not retry failed channel lookups with the other backend.",
    )
    parser.add_argument(
        "--invidious-instance",
        type=_instance_arg,
        default=None,
        help="Base URL of the Invidious instance to query.",
    )

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    for name, verb in (("import-subscriptions", "Import"), ("export-subscriptions", "Export")):
        cmd = sub.add_parser(name, help=f"{verb} subscriptions.")
        cmd.add_argument("format", choices=FORMAT_CHOICES, help="Interchange format.")
        cmd.add_argument("path", nargs="?", type=Path, default=None, help="File to use; prompts when omitted.")

    for name, verb in (("import-history", "Import"), ("export-history", "Export")):
        cmd = sub.add_parser(name, help=f"{verb} watch history.")
        cmd.add_argument("path", nargs="?", type=Path, default=None, help="File to use; prompts when omitted.")

    sub.add_parser("doctor", help="Check the environment and data directory.")
    return parser


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------

def _build_service(settings: Settings, path: Path | None) -> TransferService:
    """Instantiate infra adapters and the core orchestrator."""
    from tubeport.cli.file_prompt import FixedPathDialog, QuestionaryFileDialog
    from tubeport.cli.notifier import ConsoleNotifier
    from tubeport.cli.progress import RichProgressDisplay
    from tubeport.core.resolver import ChannelResolver
    from tubeport.infra.file_gateway import LocalFileGateway
    from tubeport.infra.invidious_provider import InvidiousChannelProvider
    from tubeport.infra.jsonl_store import JsonLinesHistoryStore, JsonLinesProfileStore
    from tubeport.infra.ytdlp_channel_provider import YtDlpChannelProvider

    files = LocalFileGateway()
    notifier = ConsoleNotifier()
    resolver = ChannelResolver(
        {
            Backend.INVIDIOUS: InvidiousChannelProvider(
                settings.invidious_instance, timeout=settings.request_timeout,
            ),
            Backend.LOCAL: YtDlpChannelProvider(),
        },
        preferred=settings.backend_preference,
        fallback=settings.backend_fallback,
        notifier=notifier,
    )
    dialogs = FixedPathDialog(path) if path is not None else QuestionaryFileDialog()

    return TransferService(
        dialogs=dialogs,
        files=files,
        profiles=JsonLinesProfileStore(settings.profiles_path, files),
        history=JsonLinesHistoryStore(settings.history_path, files),
        resolver=resolver,
        notifier=notifier,
        progress=RichProgressDisplay(),
    )


def _report_exit_code(report: TransferReport) -> int:
    """Summarise *report* and map its status to an exit code."""
    if report.status is TransferStatus.CANCELLED:
        console.print("[yellow]Cancelled.[/yellow]")
        return exit_codes.SUCCESS
    if report.status is not TransferStatus.DONE:
        return exit_codes.GENERAL_ERROR

    details = [f"{report.count} processed"]
    if report.skipped:
        details.append(f"{report.skipped} skipped")
    if report.unresolved:
        details.append(f"{report.unresolved} unresolved")
    console.print(f"[bold green]Done[/bold green]  {', '.join(details)}")
    if report.path is not None:
        console.print(f"  {report.path}", style="dim", markup=False, highlight=False)
    return exit_codes.SUCCESS


def _handle_transfer(args: argparse.Namespace, settings: Settings) -> int:
    service = _build_service(settings, args.path)

    if args.command == "import-subscriptions":
        batch = service.import_subscriptions(SubscriptionFormat(args.format))
    elif args.command == "export-subscriptions":
        batch = service.export_subscriptions(SubscriptionFormat(args.format))
    elif args.command == "import-history":
        batch = service.import_history()
    else:
        batch = service.export_history()

    return _report_exit_code(asyncio.run(batch))


def _handle_doctor(settings: Settings) -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from tubeport.cli.doctor import run_doctor

    return run_doctor(settings)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the tubeport CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return exit_codes.SUCCESS

    configure_logging(args.verbose)
    settings = load_settings().with_overrides(
        data_dir=args.data_dir,
        backend_preference=args.backend,
        backend_fallback=args.backend_fallback,
        invidious_instance=args.invidious_instance,
    )

    if args.command == "doctor":
        return _handle_doctor(settings)

    return _handle_transfer(args, settings)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except TubeportError as exc:
        console.print(f"Error: {exc}", style="bold red", markup=False)
        if exc.hint:
            console.print(f"Hint: {exc.hint}", style="yellow", markup=False)
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print("[bold red]Unexpected error.[/bold red] Please report this issue.")
        console.print(f"  {type(exc).__name__}: {exc}", markup=False)
        sys.exit(exit_codes.UNEXPECTED_ERROR)

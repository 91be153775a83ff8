"""Terminal implementation of :class:`~tubeport.core.protocols.Notifier`.

Notifications are printed as they arrive.  A terminal has no toast
timeout, so ``duration_ms`` is ignored; ``copy_text`` is printed on its
own line so it can be selected and copied.

Message text can carry key names from import files and backend error
bodies, so it is always printed with Rich markup disabled.
"""

from __future__ import annotations

from tubeport.cli.console import console


class ConsoleNotifier:
    """Print notifications through the shared console proxy."""

    def notify(
        self,
        message: str,
        *,
        duration_ms: int | None = None,
        copy_text: str | None = None,
    ) -> None:
        console.print("•", message, markup=False, highlight=False)
        if copy_text and copy_text not in message:
            console.print(f"  {copy_text}", style="dim", markup=False, highlight=False)

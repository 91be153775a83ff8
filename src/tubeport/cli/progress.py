"""Rich-based implementation of :class:`~tubeport.core.protocols.ProgressDisplay`.

The orchestrator only knows about visibility and a percentage; this
module maps that onto a single Rich :class:`~rich.progress.Progress`
task.

Design
------
* ``set_visible(True)`` starts the display, ``set_visible(False)``
  stops it; both are idempotent.
* Percentage updates while hidden are silently ignored.
* No ``print()`` — Rich handles all rendering.
"""

from __future__ import annotations

from typing import Any

from tubeport.cli.console import get_rich_console
from tubeport.exceptions import EnvironmentError


class RichProgressDisplay:
    """Percentage progress bar for import batches.

    Usage::

        display = RichProgressDisplay("Importing")
        display.set_visible(True)
        display.set_percentage(50)
        display.set_visible(False)
    """

    def __init__(self, description: str = "Importing") -> None:
        try:
            from rich.progress import (
                BarColumn,
                Progress,
                SpinnerColumn,
                TaskProgressColumn,
                TextColumn,
                TimeElapsedColumn,
            )
        except ModuleNotFoundError as exc:
            raise EnvironmentError(
                "rich is not installed. Install with: pip install rich",
            ) from exc

        self._description: str = description
        self._progress: Any = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=get_rich_console(),
            transient=True,
        )
        self._task_id: Any | None = None
        self._started: bool = False

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def set_visible(self, visible: bool) -> None:
        if visible and not self._started:
            self._progress.start()
            self._task_id = self._progress.add_task(self._description, total=100)
            self._started = True
        elif not visible and self._started:
            self._progress.stop()
            self._task_id = None
            self._started = False

    def set_percentage(self, percentage: float) -> None:
        if not self._started or self._task_id is None:
            return
        clamped = max(0.0, min(float(percentage), 100.0))
        self._progress.update(self._task_id, completed=clamped)

"""Console reporter adapter built on rich.

Renders the configuration table, a live progress line while the pipeline
runs, and the result panel once the run completes.
"""

from __future__ import annotations

from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskID, TextColumn
from rich.table import Table
from rich.text import Text

from bigtextsearcher.adapters.formatting import (
    progress_description,
    report_markup,
    settings_rows,
)
from bigtextsearcher.core.config import SearchSettings
from bigtextsearcher.core.models import ProgressSnapshot, RunReport


class ConsoleReporter:
    """ProgressReporter adapter that draws to a rich Console."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console or Console()
        self._progress: Optional[Progress] = None
        self._task: Optional[TaskID] = None

    async def start(self, settings: SearchSettings) -> None:
        table = Table(box=box.ROUNDED)
        table.add_column("Setting")
        table.add_column("Value")
        input_size = settings.input_path.stat().st_size
        for label, value in settings_rows(settings, input_size):
            table.add_row(label, Text(value))
        self._console.print(table)
        self._console.print()

        self._progress = Progress(
            TextColumn("{task.description}"),
            BarColumn(),
            SpinnerColumn(),
            console=self._console,
        )
        self._progress.start()
        # No total: the line count is unknown until the end of the stream.
        self._task = self._progress.add_task("[green]Scanning lines[/]", total=None)

    async def progress(self, snapshot: ProgressSnapshot) -> None:
        if self._progress is None or self._task is None:
            return
        self._progress.update(self._task, description=progress_description(snapshot))
        if snapshot.final:
            self._progress.stop_task(self._task)

    async def finish(self, report: RunReport) -> None:
        self.close()
        self._console.print()
        self._console.print(
            Panel(report_markup(report), box=box.ROUNDED, border_style="green", expand=False)
        )

    def close(self) -> None:
        """Stop live rendering; safe to call more than once."""

        if self._progress is not None:
            self._progress.stop()
            self._progress = None
            self._task = None

    def error(self, message: str) -> None:
        self._console.print(f"[red]Error:[/] {escape(message)}")

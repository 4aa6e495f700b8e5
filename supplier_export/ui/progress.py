"""Terminal progress helpers with Rich-based rendering."""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console
from rich.errors import LiveError
from rich.progress import (
    BarColumn,
    Progress,
    ProgressColumn,
    SpinnerColumn,
    Task,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.text import Text

from ..engine.worker_pool import PageResult


@dataclass
class ProgressState:
    total: int
    success: int = 0
    failed: int = 0
    rows: int = 0


class RateColumn(ProgressColumn):
    """Pages completed per second, rendered as ``X.X page/s``."""

    def render(self, task: Task) -> Text:
        speed = task.finished_speed or task.speed
        if speed is None:
            return Text("", style="progress.percentage")
        return Text(f"{speed:.1f} page/s", style="progress.percentage")


class ProgressReporter:
    """Print one line per finished page and, on a terminal, a live bar."""

    def __init__(self, enabled: bool = True, console: Console | None = None) -> None:
        self.enabled = enabled
        self.console = console or Console()
        self._progress: Progress | None = None
        self._task_id: TaskID | None = None
        self.state: ProgressState | None = None

    def start(self, total: int) -> None:
        self.state = ProgressState(total=total)
        if not self.enabled or not self.console.is_terminal:
            return
        self._progress = Progress(
            SpinnerColumn(style="cyan"),
            TextColumn("[bold blue]pages", justify="left"),
            BarColumn(bar_width=None, complete_style="green", finished_style="green"),
            TaskProgressColumn(show_speed=False),
            TimeElapsedColumn(),
            RateColumn(),
            TextColumn("[green]✓{task.fields[success]:>4}", justify="right"),
            TextColumn("[red]✗{task.fields[failed]:>4}", justify="right"),
            TextColumn("[dim]{task.fields[rows]} rows", justify="left"),
            console=self.console,
            transient=True,
            refresh_per_second=8,
            expand=True,
        )
        try:
            self._progress.__enter__()
        except LiveError:
            # Another live display owns the console; fall back to plain lines.
            self._progress = None
            return
        self._task_id = self._progress.add_task("export", total=total, success=0, failed=0, rows=0)

    def page_done(self, result: PageResult) -> None:
        if not self.state:
            raise RuntimeError("ProgressReporter.start must be called before page_done")
        if result.error is None:
            self.state.success += 1
            self.state.rows += len(result.rows)
            self.console.print(
                f"[green]✓[/green] page {result.page_number} (offset={result.offset}) "
                f"fetched {len(result.rows)} rows",
                highlight=False,
            )
        else:
            self.state.failed += 1
            self.console.print(
                f"[red]✗[/red] page {result.page_number} (offset={result.offset}) failed: ",
                Text(str(result.error)),
                sep="",
                highlight=False,
            )
        if self._progress is not None and self._task_id is not None:
            self._progress.update(
                self._task_id,
                advance=1,
                success=self.state.success,
                failed=self.state.failed,
                rows=self.state.rows,
            )

    def close(self) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress.__exit__(None, None, None)
            self._progress = None
        self._task_id = None


__all__ = ["ProgressReporter", "ProgressState", "RateColumn"]

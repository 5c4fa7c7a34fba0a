"""
Wraps a Rich Progress display for sequential file downloads.
"""

from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)


class ProgressManager:
    """
    Shows one progress bar per downloaded file.

    A file with an unknown length gets an indeterminate bar; the byte count
    still advances as data arrives.
    """

    def __init__(self, console: Console):
        self.console = console
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}", justify="left"),
            BarColumn(bar_width=30),
            "[progress.percentage]{task.percentage:>3.0f}%",
            "•",
            DownloadColumn(),
            "•",
            TransferSpeedColumn(),
            "•",
            TimeRemainingColumn(),
            console=console,
            transient=False,
        )
        self._started = False

    def __enter__(self) -> "ProgressManager":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False

    def start(self) -> None:
        if not self._started:
            self.progress.start()
            self._started = True

    def stop(self) -> None:
        if self._started:
            self.progress.stop()
            self._started = False

    def add_file(self, name: str, total: int | None) -> TaskID:
        return self.progress.add_task(f"[cyan]{name}[/cyan]", total=total)

    def update_task_progress(self, task_id: TaskID, completed: int) -> None:
        self.progress.update(task_id, completed=completed)

    def finish_file(self, task_id: TaskID, completed: int) -> None:
        self.progress.update(task_id, total=completed, completed=completed)

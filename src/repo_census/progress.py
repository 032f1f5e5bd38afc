"""Progress reporting for the per-repository fetch loop."""

from __future__ import annotations

from typing import Protocol

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    ProgressColumn,
    Task,
    TaskID,
    TaskProgressColumn,
    TextColumn,
)
from rich.text import Text


class ProgressReporter(Protocol):
    """Reports one unit of progress at a time out of a known or unknown total."""

    def start(self, total: int | None = None) -> None: ...

    def set_total(self, total: int) -> None: ...

    def advance(self, step: int = 1) -> None: ...

    def log(self, message: str) -> None: ...

    def stop(self) -> None: ...


class NullProgressReporter:
    """Reporter that discards everything."""

    def start(self, total: int | None = None) -> None:
        pass

    def set_total(self, total: int) -> None:
        pass

    def advance(self, step: int = 1) -> None:
        pass

    def log(self, message: str) -> None:
        pass

    def stop(self) -> None:
        pass


class RepositoryCountColumn(ProgressColumn):
    """Renders "done/total Repositories", with "?" until the total is known."""

    def render(self, task: Task) -> Text:
        total = "?" if task.total is None else f"{task.total:.0f}"
        return Text(f"{task.completed:.0f}/{total} Repositories")


class RichProgressReporter:
    """Terminal progress bar backed by rich."""

    def __init__(self, console: Console | None = None) -> None:
        self._progress = Progress(
            TextColumn("Progress"),
            BarColumn(
                complete_style="green",
                finished_style="green",
            ),
            TaskProgressColumn(),
            RepositoryCountColumn(),
            console=console,
        )
        self._task: TaskID | None = None

    @property
    def console(self) -> Console:
        return self._progress.console

    def start(self, total: int | None = None) -> None:
        self._progress.start()
        self._task = self._progress.add_task("repositories", total=total)

    def set_total(self, total: int) -> None:
        if self._task is not None:
            self._progress.update(self._task, total=total)

    def advance(self, step: int = 1) -> None:
        if self._task is not None:
            self._progress.advance(self._task, step)

    def log(self, message: str) -> None:
        self._progress.console.print(message, markup=False, highlight=False)

    def stop(self) -> None:
        self._progress.stop()

from __future__ import annotations

from typing import Any, Dict, Optional

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from .base import Outcome, Reporter, describe_summary, get_verbosity, ratio

_OUTCOME_STYLE = {Outcome.OK: "green", Outcome.FAILED: "bold red"}


class RichReporter(Reporter):
    """Terminal reporter drawing a progress bar for counted tasks."""

    def __init__(self, console: Optional[Console] = None) -> None:
        super().__init__()
        self.console = console or Console(stderr=True, highlight=False)
        self._progress: Optional[Progress] = None
        self._bars: Dict[str, TaskID] = {}

    def _bar_host(self) -> Progress:
        if self._progress is None:
            self._progress = Progress(
                TextColumn("{task.description}"),
                BarColumn(),
                MofNCompleteColumn(),
                TimeElapsedColumn(),
                console=self.console,
            )
            self._progress.start()
        return self._progress

    def begin(self, task_id: str, label: str, total: Optional[int] = None) -> None:
        self._open(task_id, label, total)
        if total is not None:
            self._bars[task_id] = self._bar_host().add_task(label, total=total)

    def progress(self, task_id: str, **detail: Any) -> None:
        state = self._tick(task_id)
        if state is None:
            return
        bar = self._bars.get(task_id)
        if bar is not None and self._progress is not None:
            self._progress.update(bar, completed=state.done)
        if get_verbosity() >= 1 and "level" in detail:
            raw = detail.get("raw_bytes", 0)
            packed = detail.get("packed_bytes", 0)
            self.console.print(
                f"  [dim]level {detail['level']}[/]: {raw} -> {packed} bytes"
                f" (ratio {ratio(raw, packed)})"
            )

    def finish(self, task_id: str, outcome: Outcome, **summary: Any) -> None:
        state = self._close(task_id)
        bar = self._bars.pop(task_id, None)
        if bar is not None and self._progress is not None:
            self._progress.remove_task(bar)
        if not self._bars:
            self.close()
        if state is None:
            return
        style = _OUTCOME_STYLE[outcome]
        fields = describe_summary(summary)
        self.console.print(
            f"[{style}]{outcome.value}[/] {escape(state.label)}"
            + (f" {state.counter()}" if state.total is not None else "")
            + f" in {state.elapsed():.2f}s"
            + (f" ({escape(fields)})" if fields else "")
        )

    def info(self, message: str) -> None:
        self.console.print(f"[green]INFO[/]: {escape(message)}")

    def detail(self, message: str, level: int = 1) -> None:
        if get_verbosity() >= level:
            self.console.print(f"[cyan]DEBUG[/]: {escape(message)}")

    def warn(self, message: str) -> None:
        self.console.print(f"[yellow]WARN[/]: {escape(message)}")

    def error(self, message: str, **fields: Any) -> None:
        self.console.print(f"[bold red]ERROR[/]: {escape(message)}")

    def heading(self, title: str) -> None:
        self.console.rule(escape(title))

    def close(self) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress = None

from __future__ import annotations

import sys
from typing import Any, Optional, TextIO

from .base import (
    Outcome,
    Reporter,
    TaskState,
    describe_summary,
    get_verbosity,
    ratio,
)


class PlainReporter(Reporter):
    """Line-oriented text output, one line per event.

    Per-level lines are printed from verbosity 1; task completion lines and
    status messages are always printed.
    """

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        super().__init__()
        self.stream = stream if stream is not None else sys.stderr

    def _line(self, text: str) -> None:
        self.stream.write(text + "\n")

    def progress(self, task_id: str, **detail: Any) -> None:
        state = self._tick(task_id)
        if state is None or get_verbosity() < 1 or "level" not in detail:
            return
        raw = detail.get("raw_bytes", 0)
        packed = detail.get("packed_bytes", 0)
        self._line(
            f"    level {detail['level']}: {raw} -> {packed} bytes"
            f" (ratio {ratio(raw, packed)}) [{state.counter()}]"
        )

    def finish(self, task_id: str, outcome: Outcome, **summary: Any) -> None:
        state = self._close(task_id)
        if state is not None:
            self._line(_finish_line(state, outcome, summary))

    def info(self, message: str) -> None:
        self._line(f"INFO: {message}")

    def detail(self, message: str, level: int = 1) -> None:
        if get_verbosity() >= level:
            self._line(f"DEBUG: {message}")

    def warn(self, message: str) -> None:
        self._line(f"WARN: {message}")

    def error(self, message: str, **fields: Any) -> None:
        self._line(f"ERROR: {message}")

    def heading(self, title: str) -> None:
        self._line(f"== {title} ==")


def _finish_line(state: TaskState, outcome: Outcome, summary: dict) -> str:
    counter = f" {state.counter()}" if state.total is not None else ""
    fields = describe_summary(summary)
    tail = f" ({fields})" if fields else ""
    return (
        f"{outcome.value:<6} {state.label}{counter} in {state.elapsed():.2f}s{tail}"
    )

from __future__ import annotations

import json
import sys
from typing import Any, Optional, TextIO

from .base import Outcome, Reporter, get_verbosity, ratio


class JsonLinesReporter(Reporter):
    """One JSON object per event, for tooling that drives the CLI."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        super().__init__()
        self.stream = stream if stream is not None else sys.stdout

    def _emit(self, event: str, **payload: Any) -> None:
        record = {"event": event, **payload}
        self.stream.write(json.dumps(record, sort_keys=True, default=str) + "\n")

    def begin(self, task_id: str, label: str, total: Optional[int] = None) -> None:
        self._open(task_id, label, total)
        self._emit("task_begin", id=task_id, label=label, total=total)

    def progress(self, task_id: str, **detail: Any) -> None:
        state = self._tick(task_id)
        if state is None:
            return
        if "raw_bytes" in detail and "packed_bytes" in detail:
            detail["ratio"] = ratio(detail["raw_bytes"], detail["packed_bytes"])
        self._emit("task_progress", id=task_id, done=state.done, **detail)

    def finish(self, task_id: str, outcome: Outcome, **summary: Any) -> None:
        state = self._close(task_id)
        if state is None:
            return
        self._emit(
            "task_end",
            id=task_id,
            outcome=outcome.value,
            done=state.done,
            seconds=round(state.elapsed(), 6),
            **summary,
        )

    def info(self, message: str) -> None:
        self._emit("info", message=message)

    def detail(self, message: str, level: int = 1) -> None:
        if get_verbosity() >= level:
            self._emit("detail", level=level, message=message)

    def warn(self, message: str) -> None:
        self._emit("warning", message=message)

    def error(self, message: str, **fields: Any) -> None:
        self._emit("error", message=message, **fields)

    def heading(self, title: str) -> None:
        self._emit("heading", title=title)

    def close(self) -> None:
        self.stream.flush()

"""Reporter interface and the process-wide active reporter.

Two tasks exist in a build: ``compress.levels`` reports one progress event
per mip level (raw and packed sizes) and ``write.output`` reports the final
container size. Backends decide how much of that to show.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, Optional

__all__ = [
    "Outcome",
    "TaskState",
    "Reporter",
    "ratio",
    "describe_summary",
    "set_reporter",
    "get_reporter",
    "set_verbosity",
    "get_verbosity",
    "task",
]

# Summary fields shown on task completion, in display order.
SUMMARY_FIELDS = ("levels", "raw_bytes", "packed_bytes", "ratio", "bytes")


class Outcome(Enum):
    OK = "ok"
    FAILED = "failed"


@dataclass(slots=True)
class TaskState:
    label: str
    total: Optional[int] = None
    done: int = 0
    started: float = field(default_factory=time.perf_counter)

    def elapsed(self) -> float:
        return time.perf_counter() - self.started

    def counter(self) -> str:
        return f"{self.done}/{self.total}" if self.total is not None else ""


def ratio(raw_bytes: int, packed_bytes: int) -> str:
    """Packed size over raw size, three decimals; ``n/a`` for empty input."""
    return f"{packed_bytes / raw_bytes:.3f}" if raw_bytes else "n/a"


def describe_summary(summary: Dict[str, Any]) -> str:
    return ", ".join(
        f"{key}={summary[key]}" for key in SUMMARY_FIELDS if key in summary
    )


_VERBOSITY = 0


def set_verbosity(level: int) -> None:
    global _VERBOSITY
    _VERBOSITY = max(0, level)


def get_verbosity() -> int:
    return _VERBOSITY


class Reporter:
    """Base reporter; every hook is a no-op.

    Backends override the hooks they render. Task bookkeeping (counters and
    timing) lives here so backends only deal with presentation.
    """

    def __init__(self) -> None:
        self._tasks: Dict[str, TaskState] = {}

    def _open(self, task_id: str, label: str, total: Optional[int]) -> TaskState:
        state = TaskState(label, total)
        self._tasks[task_id] = state
        return state

    def _tick(self, task_id: str) -> Optional[TaskState]:
        state = self._tasks.get(task_id)
        if state is not None:
            state.done += 1
        return state

    def _close(self, task_id: str) -> Optional[TaskState]:
        return self._tasks.pop(task_id, None)

    def begin(self, task_id: str, label: str, total: Optional[int] = None) -> None:
        self._open(task_id, label, total)

    def progress(self, task_id: str, **detail: Any) -> None:
        self._tick(task_id)

    def finish(self, task_id: str, outcome: Outcome, **summary: Any) -> None:
        self._close(task_id)

    def info(self, message: str) -> None:
        pass

    def detail(self, message: str, level: int = 1) -> None:
        pass

    def warn(self, message: str) -> None:
        self.info(message)

    def error(self, message: str, **fields: Any) -> None:
        pass

    def heading(self, title: str) -> None:
        pass

    def close(self) -> None:
        pass


_ACTIVE: Optional[Reporter] = None


def set_reporter(reporter: Reporter) -> None:
    global _ACTIVE
    _ACTIVE = reporter


def get_reporter() -> Reporter:
    """Return the active reporter, installing a plain stderr one on first use."""
    global _ACTIVE
    if _ACTIVE is None:
        from .plain import PlainReporter

        _ACTIVE = PlainReporter()
    return _ACTIVE


@contextmanager
def task(
    task_id: str, label: str, total: Optional[int] = None
) -> Iterator[Dict[str, Any]]:
    """Bracket a unit of work; fields put in the yielded dict form its summary."""
    reporter = get_reporter()
    reporter.begin(task_id, label, total)
    summary: Dict[str, Any] = {}
    try:
        yield summary
    except Exception:
        reporter.finish(task_id, Outcome.FAILED, **summary)
        raise
    reporter.finish(task_id, Outcome.OK, **summary)

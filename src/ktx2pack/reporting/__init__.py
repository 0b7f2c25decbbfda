"""Progress and status reporting backends.

The active reporter is process-global; the CLI picks one per run and library
code reaches it through :func:`get_reporter`.
"""

from .base import (
    Outcome,
    Reporter,
    describe_summary,
    get_reporter,
    get_verbosity,
    ratio,
    set_reporter,
    set_verbosity,
    task,
)
from .jsonl import JsonLinesReporter
from .plain import PlainReporter
from .rich_reporter import RichReporter
from .silent import SilentReporter

__all__ = [
    "Outcome",
    "Reporter",
    "describe_summary",
    "ratio",
    "get_reporter",
    "set_reporter",
    "get_verbosity",
    "set_verbosity",
    "task",
    "PlainReporter",
    "JsonLinesReporter",
    "RichReporter",
    "SilentReporter",
]

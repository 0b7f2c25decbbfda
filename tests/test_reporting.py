import io
import json

import pytest

from ktx2pack import encode_ktx2
from ktx2pack.reporting import (
    JsonLinesReporter,
    PlainReporter,
    describe_summary,
    ratio,
    set_reporter,
    set_verbosity,
    task,
)


def test_summary_fields_keep_display_order():
    summary = {"ratio": "0.500", "levels": 2, "unrelated": 1, "raw_bytes": 80}
    assert describe_summary(summary) == "levels=2, raw_bytes=80, ratio=0.500"
    assert describe_summary({}) == ""


def test_ratio_of_empty_input():
    assert ratio(0, 9) == "n/a"
    assert ratio(64, 16) == "0.250"


def test_plain_reporter_prints_compression_summary():
    buf = io.StringIO()
    set_reporter(PlainReporter(stream=buf))
    encode_ktx2([bytes(64), bytes(16)], 4, 4, 0, 0, False, 37)
    text = buf.getvalue()
    assert "Compress levels 2/2" in text
    assert "levels=2, raw_bytes=80, packed_bytes=" in text
    assert "level 0:" not in text


def test_plain_reporter_lists_level_ratios_when_verbose():
    buf = io.StringIO()
    set_reporter(PlainReporter(stream=buf))
    set_verbosity(1)
    level0 = bytes(64)
    encode_ktx2([level0, bytes(16)], 4, 4, 0, 0, False, 37)
    text = buf.getvalue()
    assert "level 0: 64 -> " in text
    assert "level 1: 16 -> " in text
    assert "[2/2]" in text


def test_json_reporter_emits_level_events():
    buf = io.StringIO()
    set_reporter(JsonLinesReporter(stream=buf))
    encode_ktx2([bytes(64), bytes(16)], 4, 4, 0, 0, False, 37)
    events = [json.loads(line) for line in buf.getvalue().splitlines()]
    levels = [e for e in events if e["event"] == "task_progress"]
    assert [e["level"] for e in levels] == [0, 1]
    assert [e["raw_bytes"] for e in levels] == [64, 16]
    assert all(e["ratio"] == ratio(e["raw_bytes"], e["packed_bytes"]) for e in levels)
    end = [e for e in events if e["event"] == "task_end"][0]
    assert end["outcome"] == "ok"
    assert end["levels"] == 2


def test_json_reporter_marks_failed_task():
    buf = io.StringIO()
    set_reporter(JsonLinesReporter(stream=buf))
    with pytest.raises(RuntimeError):
        with task("write.output", "Write container") as summary:
            summary["bytes"] = 3
            raise RuntimeError("stop")
    events = [json.loads(line) for line in buf.getvalue().splitlines()]
    assert [e["event"] for e in events] == ["task_begin", "task_end"]
    assert events[1]["outcome"] == "failed"
    assert events[1]["bytes"] == 3


def test_rich_reporter_renders_task_completion():
    from rich.console import Console

    from ktx2pack.reporting import RichReporter

    buf = io.StringIO()
    set_reporter(RichReporter(console=Console(file=buf, width=120)))
    set_verbosity(1)
    encode_ktx2([bytes(64), bytes(16)], 4, 4, 0, 0, False, 37)
    text = buf.getvalue()
    assert "Compress levels 2/2" in text
    assert "(levels=2, raw_bytes=80" in text
    assert "level 1: 16 -> " in text

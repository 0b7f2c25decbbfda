from dataclasses import replace

import pytest

from ktx2pack.container.errors import E_LAYOUT, E_NO_LEVELS, LayoutError
from ktx2pack.container.planner import compute_container_plan, to_plan_dict
from ktx2pack.container.writer import write_container


def _plan(descriptor_length=92, level_sizes=((10, 64),), **overrides):
    kwargs = dict(
        format_code=37,
        texel_block_size=4,
        descriptor_length=descriptor_length,
        level_sizes=list(level_sizes),
        width=4,
        height=4,
        depth=0,
        layer_count=0,
        is_cubemap=False,
    )
    kwargs.update(overrides)
    return compute_container_plan(**kwargs)


def test_single_level_plan_offsets():
    plan = _plan()
    assert plan.level_index.offset == 80
    assert plan.level_index.size == 24
    assert plan.descriptor.offset == 104
    assert plan.descriptor.padding_after == 0
    assert plan.levels[0].byte_offset == 196
    assert plan.file_size == 206
    assert plan.face_count == 1
    assert plan.supercompression_scheme == 2


def test_odd_descriptor_is_padded_before_payload():
    plan = _plan(descriptor_length=5, level_sizes=[(3, 16), (2, 4)])
    assert plan.descriptor.offset == 80 + 48
    assert plan.descriptor.size == 5
    assert plan.padded_descriptor_length == 8
    assert plan.levels[0].byte_offset == 128 + 8
    assert plan.levels[1].byte_offset == 136 + 3
    assert plan.file_size == 141


def test_cubemap_has_six_faces():
    assert _plan(is_cubemap=True).face_count == 6


def test_no_levels_raises():
    with pytest.raises(LayoutError) as exc:
        _plan(level_sizes=[])
    assert exc.value.code == E_NO_LEVELS


def test_plan_dict_shape():
    d = to_plan_dict(_plan(descriptor_length=6, level_sizes=[(7, 64), (5, 16)]))
    assert d["file_size"] == 80 + 48 + 8 + 12
    assert [s["name"] for s in d["sections"]] == [
        "header",
        "level_index",
        "descriptor",
        "payload",
    ]
    assert d["header"]["level_count"] == 2
    assert d["levels"][1]["level"] == 1
    assert d["levels"][1]["byte_offset"] == 80 + 48 + 8 + 7
    assert d["statistics"] == {
        "compressed_total": 12,
        "uncompressed_total": 80,
        "padding_total": 2,
    }


def test_writer_follows_plan():
    plan = _plan(descriptor_length=5, level_sizes=[(3, 16)])
    out = write_container(plan, b"\x01" * 5, [b"abc"])
    assert plan.descriptor.offset == 104
    assert plan.levels[0].byte_offset == 112
    assert len(out) == plan.file_size == 115
    assert out[104:109] == b"\x01" * 5
    assert out[109:112] == b"\x00\x00\x00"
    assert out[112:] == b"abc"


def test_writer_rejects_payload_size_mismatch():
    plan = _plan(descriptor_length=4, level_sizes=[(3, 16)])
    with pytest.raises(LayoutError) as exc:
        write_container(plan, b"\x00" * 4, [b"abcd"])
    assert exc.value.code == E_LAYOUT


def test_writer_rejects_payload_count_mismatch():
    plan = _plan(descriptor_length=4, level_sizes=[(3, 16)])
    with pytest.raises(LayoutError):
        write_container(plan, b"\x00" * 4, [b"abc", b"def"])


def test_writer_rejects_descriptor_size_mismatch():
    plan = _plan(descriptor_length=4, level_sizes=[(3, 16)])
    with pytest.raises(LayoutError):
        write_container(plan, b"\x00" * 8, [b"abc"])


def test_writer_rejects_tampered_offsets():
    plan = _plan(descriptor_length=4, level_sizes=[(3, 16)])
    shifted = replace(plan.levels[0], byte_offset=plan.levels[0].byte_offset + 4)
    bad = replace(plan, levels=(shifted,))
    with pytest.raises(LayoutError):
        write_container(bad, b"\x00" * 4, [b"abc"])

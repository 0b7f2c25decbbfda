import struct
from array import array

import pytest
import zstandard

from ktx2pack import encode_ktx2
from ktx2pack.container.compression import ZstdCompressor
from ktx2pack.container.constants import KTX2_MAGIC
from ktx2pack.container.errors import (
    E_COMPRESSION,
    E_NO_LEVELS,
    E_UNSUPPORTED_FORMAT,
    E_VALUE_RANGE,
    CompressionError,
    KtxError,
    LayoutError,
    UnsupportedFormatError,
)
from ktx2pack.formats import FormatEntry, FormatRegistry, VkFormat, lookup

from header_helper import read_header, read_level_index

RGBA8 = int(VkFormat.R8G8B8A8_UNORM)


class _SpyCompressor:
    scheme = 2

    def __init__(self):
        self.calls = 0

    def compress(self, data, level):
        self.calls += 1
        return data[::-1]


class _FailOnSecond:
    scheme = 2

    def compress(self, data, level):
        if len(data) == 16:
            raise RuntimeError("boom")
        return bytes(data)


def _mip_chain(width=16, height=16, texel=4):
    out = []
    while True:
        out.append(bytes((i * 7) & 0xFF for i in range(width * height * texel)))
        if width == 1 and height == 1:
            break
        width, height = max(width // 2, 1), max(height // 2, 1)
    return out


def test_single_level_rgba8_container():
    level0 = bytes(range(64))
    out = encode_ktx2([level0], 4, 4, 0, 0, False, RGBA8, 3)
    compressed = zstandard.ZstdCompressor(level=3).compress(level0)
    assert out[:12] == KTX2_MAGIC
    assert len(out) == 80 + 24 + 92 + len(compressed)
    header = read_header(out)
    assert header["format"] == RGBA8
    assert header["type_size"] == 4
    assert (header["width"], header["height"], header["depth"]) == (4, 4, 0)
    assert header["layer_count"] == 0
    assert header["face_count"] == 1
    assert header["level_count"] == 1
    assert header["supercompression_scheme"] == 2
    assert (header["dfd_offset"], header["dfd_length"]) == (104, 92)
    assert header["kvd_offset"] == header["kvd_length"] == 0
    assert header["sgd_offset"] == header["sgd_length"] == 0
    assert read_level_index(out, 1) == [(196, len(compressed), 64)]
    assert out[104:196] == lookup(RGBA8).descriptor
    assert out[196:] == compressed


def test_multi_level_payloads_are_contiguous_and_lossless():
    levels = _mip_chain()
    out = encode_ktx2(levels, 16, 16, 0, 0, False, RGBA8)
    header = read_header(out)
    assert header["level_count"] == len(levels) == 5
    index = read_level_index(out, len(levels))
    expected = 80 + 24 * len(levels) + 92
    dctx = ZstdCompressor()
    for (offset, length, raw_length), raw in zip(index, levels):
        assert offset == expected
        assert raw_length == len(raw)
        assert dctx.decompress(out[offset : offset + length]) == raw
        expected += length
    assert expected == len(out)


def test_cubemap_only_changes_face_count():
    face_data = bytes(6 * 4 * 4 * 4)
    cube = encode_ktx2([face_data], 4, 4, 0, 0, True, RGBA8)
    flat = encode_ktx2([face_data], 4, 4, 0, 0, False, RGBA8)
    cube_header = read_header(cube)
    flat_header = read_header(flat)
    assert cube_header.pop("face_count") == 6
    assert flat_header.pop("face_count") == 1
    assert cube_header == flat_header
    assert read_level_index(cube, 1) == read_level_index(flat, 1)
    assert cube[:36] == flat[:36]
    assert cube[40:] == flat[40:]


def test_array_and_volume_dimensions_are_recorded():
    out = encode_ktx2([bytes(512)], 4, 4, 8, 0, False, RGBA8)
    assert read_header(out)["depth"] == 8
    out = encode_ktx2([bytes(512)], 4, 4, 0, 3, False, RGBA8)
    assert read_header(out)["layer_count"] == 3


def test_unsupported_format_fails_before_compression():
    spy = _SpyCompressor()
    with pytest.raises(UnsupportedFormatError) as exc:
        encode_ktx2([b"\x00" * 64], 4, 4, 0, 0, False, 999, compressor=spy)
    assert exc.value.code == E_UNSUPPORTED_FORMAT
    assert spy.calls == 0


def test_compressor_failure_reports_level():
    levels = [bytes(64), bytes(16)]
    with pytest.raises(CompressionError) as exc:
        encode_ktx2(levels, 4, 4, 0, 0, False, RGBA8, compressor=_FailOnSecond())
    assert exc.value.code == E_COMPRESSION
    assert exc.value.context["level_index"] == 1


def test_custom_compressor_output_is_embedded():
    spy = _SpyCompressor()
    out = encode_ktx2([b"abcd", b"xy"], 2, 1, 0, 0, False, RGBA8, compressor=spy)
    assert spy.calls == 2
    assert out.endswith(b"dcba" + b"yx")


def test_odd_descriptor_is_zero_padded():
    registry = FormatRegistry([FormatEntry(7, b"\x05\x00\x00\x00\xaa", 1, "ODD")])
    spy = _SpyCompressor()
    out = encode_ktx2(
        [b"\x01\x02"], 2, 1, 0, 0, False, 7, registry=registry, compressor=spy
    )
    header = read_header(out)
    assert header["dfd_offset"] == 104
    assert header["dfd_length"] == 5
    assert out[104:112] == b"\x05\x00\x00\x00\xaa\x00\x00\x00"
    assert read_level_index(out, 1) == [(112, 2, 2)]
    assert out[112:] == b"\x02\x01"


def test_workers_produce_identical_output():
    levels = _mip_chain(32, 32)
    serial = encode_ktx2(levels, 32, 32, 0, 0, False, RGBA8, 5)
    parallel = encode_ktx2(levels, 32, 32, 0, 0, False, RGBA8, 5, workers=4)
    assert serial == parallel


def test_parallel_failure_still_reports_level():
    levels = [bytes(64), bytes(16), bytes(4)]
    with pytest.raises(CompressionError) as exc:
        encode_ktx2(
            levels, 4, 4, 0, 0, False, RGBA8, compressor=_FailOnSecond(), workers=3
        )
    assert exc.value.context["level_index"] == 1


def test_no_levels_is_rejected():
    with pytest.raises(LayoutError) as exc:
        encode_ktx2([], 4, 4, 0, 0, False, RGBA8)
    assert exc.value.code == E_NO_LEVELS


def test_dimension_outside_u32_is_rejected():
    with pytest.raises(KtxError) as exc:
        encode_ktx2([bytes(4)], 2**32, 1, 0, 0, False, RGBA8)
    assert exc.value.code == E_VALUE_RANGE


def test_same_input_gives_same_bytes():
    levels = _mip_chain(8, 8)
    a = encode_ktx2(levels, 8, 8, 0, 0, False, RGBA8)
    b = encode_ktx2(levels, 8, 8, 0, 0, False, RGBA8)
    assert a == b


def test_block_format_header_fields():
    # one 4x4 BC7 block
    block = bytes(range(16))
    fmt = int(VkFormat.BC7_UNORM_BLOCK)
    out = encode_ktx2([block], 4, 4, 0, 0, False, fmt)
    header = read_header(out)
    assert header["type_size"] == 16
    dfd_offset, dfd_length = header["dfd_offset"], header["dfd_length"]
    assert struct.unpack_from("<I", out, dfd_offset)[0] == dfd_length


def test_wide_item_buffers_record_byte_lengths():
    fmt = int(VkFormat.R16G16B16A16_UNORM)
    texels = array("H", range(32))
    raw = texels.tobytes()
    out = encode_ktx2([texels, memoryview(raw).cast("H")], 4, 2, 0, 0, False, fmt)
    index = read_level_index(out, 2)
    assert [entry[2] for entry in index] == [64, 64]
    dctx = ZstdCompressor()
    for offset, length, _ in index:
        assert dctx.decompress(out[offset : offset + length]) == raw
    assert out == encode_ktx2([raw, raw], 4, 2, 0, 0, False, fmt)

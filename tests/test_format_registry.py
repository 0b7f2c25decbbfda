import struct

import pytest

from ktx2pack.container.errors import E_UNSUPPORTED_FORMAT, UnsupportedFormatError
from ktx2pack.formats import (
    FormatEntry,
    FormatRegistry,
    VkFormat,
    default_registry,
    lookup,
    parse_format,
)


def test_every_supported_code_has_descriptor_and_block_size():
    registry = default_registry()
    codes = registry.supported_codes()
    assert len(codes) > 100
    for code in codes:
        entry = registry.lookup(code)
        assert entry.descriptor
        assert entry.texel_block_size > 0
        # dfdTotalSize is the first word of the blob
        assert struct.unpack_from("<I", entry.descriptor, 0)[0] == len(
            entry.descriptor
        )


@pytest.mark.parametrize("code", [0, 1, 8, 51, 143, 185, 1000, 10**9, -1])
def test_unknown_codes_are_unsupported(code):
    registry = default_registry()
    assert not registry.is_supported(code)
    with pytest.raises(UnsupportedFormatError) as exc:
        registry.lookup(code)
    assert exc.value.code == E_UNSUPPORTED_FORMAT


def test_empty_descriptor_and_zero_block_size_are_unsupported():
    registry = FormatRegistry(
        [
            FormatEntry(1, b"", 4, "EMPTY_DFD"),
            FormatEntry(2, b"\x01\x02\x03\x04", 0, "ZERO_BLOCK"),
            FormatEntry(3, b"\x01\x02\x03\x04", 4, "OK"),
        ]
    )
    with pytest.raises(UnsupportedFormatError):
        registry.lookup(1)
    with pytest.raises(UnsupportedFormatError):
        registry.lookup(2)
    assert registry.lookup(3).name == "OK"
    assert registry.supported_codes() == [3]
    assert len(registry) == 1
    assert 3 in registry and 1 not in registry


def test_block_sizes_for_common_formats():
    assert lookup(VkFormat.R8_UNORM).texel_block_size == 1
    assert lookup(VkFormat.R8G8B8A8_SRGB).texel_block_size == 4
    assert lookup(VkFormat.R16G16B16A16_SFLOAT).texel_block_size == 8
    assert lookup(VkFormat.R32G32B32A32_SFLOAT).texel_block_size == 16
    assert lookup(VkFormat.BC1_RGB_UNORM_BLOCK).texel_block_size == 8
    assert lookup(VkFormat.BC7_SRGB_BLOCK).texel_block_size == 16
    assert lookup(VkFormat.ASTC_12x12_SRGB_BLOCK).texel_block_size == 16


def test_rgba8_descriptor_layout():
    dfd = lookup(VkFormat.R8G8B8A8_UNORM).descriptor
    # 4 byte total + 24 byte block header + 4 samples * 16
    assert len(dfd) == 92
    vendor_type, version, block_size = struct.unpack_from("<IHH", dfd, 4)
    assert vendor_type == 0
    assert version == 2
    assert block_size == 88
    model, primaries, transfer, flags = struct.unpack_from("<4B", dfd, 12)
    assert (model, primaries, transfer, flags) == (1, 1, 1, 0)
    assert struct.unpack_from("<4B", dfd, 16) == (0, 0, 0, 0)
    assert dfd[20] == 4
    channels = []
    for i in range(4):
        bit_offset, bit_length, channel = struct.unpack_from(
            "<HBB", dfd, 28 + 16 * i
        )
        lower, upper = struct.unpack_from("<II", dfd, 28 + 16 * i + 8)
        assert bit_offset == 8 * i
        assert bit_length == 7
        assert (lower, upper) == (0, 255)
        channels.append(channel)
    assert channels == [0, 1, 2, 15]


def test_srgb_alpha_sample_is_linear():
    dfd = lookup(VkFormat.B8G8R8A8_SRGB).descriptor
    assert dfd[14] == 2  # sRGB transfer
    channels = [dfd[28 + 16 * i + 3] for i in range(4)]
    assert channels == [2, 1, 0, 15 | 0x10]


def test_block_compressed_descriptor_dimensions():
    dfd = lookup(VkFormat.ASTC_10x8_UNORM_BLOCK).descriptor
    assert dfd[12] == 162
    assert struct.unpack_from("<4B", dfd, 16) == (9, 7, 0, 0)
    assert dfd[20] == 16
    bc3 = lookup(VkFormat.BC3_UNORM_BLOCK).descriptor
    assert len(bc3) == 4 + 24 + 2 * 16


def test_parse_format_names_and_codes():
    assert parse_format(37) == 37
    assert parse_format("37") == 37
    assert parse_format("R8G8B8A8_UNORM") == 37
    assert parse_format("vk_format_bc7_srgb_block") == 146
    assert parse_format("astc_4x4_unorm_block") == 157
    with pytest.raises(UnsupportedFormatError):
        parse_format("NOT_A_FORMAT")
    with pytest.raises(UnsupportedFormatError):
        parse_format(True)

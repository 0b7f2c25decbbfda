"""Khronos Data Format Descriptor (DFD) packing.

A KTX2 descriptor blob is a ``u32`` total size followed by one basic
descriptor block: a 24 byte block header and one 16 byte record per sample.
Everything is little-endian. Only the pieces needed by the format table are
modelled here; the blob is treated as opaque bytes once built.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Sequence, Tuple

__all__ = [
    "Sample",
    "pack_basic_descriptor",
    "uncompressed_descriptor",
    "block_descriptor",
    "bytes_per_block",
]

KHR_DF_VENDORID_KHRONOS = 0
KHR_DF_DESCRIPTORTYPE_BASICFORMAT = 0
KHR_DF_VERSIONNUMBER_1_3 = 2

BASIC_BLOCK_HEADER_SIZE = 24
SAMPLE_SIZE = 16

# Color models
MODEL_RGBSDA = 1
MODEL_BC1A = 128
MODEL_BC2 = 129
MODEL_BC3 = 130
MODEL_BC4 = 131
MODEL_BC5 = 132
MODEL_BC7 = 134
MODEL_ETC2 = 161
MODEL_ASTC = 162

PRIMARIES_BT709 = 1

TRANSFER_LINEAR = 1
TRANSFER_SRGB = 2

FLAGS_ALPHA_STRAIGHT = 0

# RGBSDA channel ids
CHANNEL_RED = 0
CHANNEL_GREEN = 1
CHANNEL_BLUE = 2
CHANNEL_DEPTH = 14
CHANNEL_ALPHA = 15

# Block-compressed channel ids
CHANNEL_COLOR = 0
CHANNEL_BC1A_ALPHAPRESENT = 1
CHANNEL_ETC2_COLOR = 2

# Sample qualifiers (upper nibble of the channel byte)
QUALIFIER_LINEAR = 0x10
QUALIFIER_EXPONENT = 0x20
QUALIFIER_SIGNED = 0x40
QUALIFIER_FLOAT = 0x80

_FLOAT_MINUS_ONE = 0xBF800000
_FLOAT_ONE = 0x3F800000

_RGBSDA_CHANNELS = {
    "R": CHANNEL_RED,
    "G": CHANNEL_GREEN,
    "B": CHANNEL_BLUE,
    "A": CHANNEL_ALPHA,
    "D": CHANNEL_DEPTH,
}


@dataclass(frozen=True, slots=True)
class Sample:
    bit_offset: int
    bit_length: int
    channel: int
    qualifiers: int = 0
    lower: int = 0
    upper: int = 0xFFFFFFFF
    position: Tuple[int, int, int, int] = (0, 0, 0, 0)

    def pack(self) -> bytes:
        out = (
            struct.pack(
                "<HBB",
                self.bit_offset,
                self.bit_length - 1,
                self.channel | self.qualifiers,
            )
            + struct.pack("<4B", *self.position)
            + struct.pack(
                "<II", self.lower & 0xFFFFFFFF, self.upper & 0xFFFFFFFF
            )
        )
        if len(out) != SAMPLE_SIZE:  # pragma: no cover
            raise RuntimeError(f"DFD sample size mismatch: {len(out)}")
        return out


def pack_basic_descriptor(
    *,
    color_model: int,
    transfer: int,
    bytes_plane0: int,
    samples: Sequence[Sample],
    block_dimensions: Tuple[int, int, int, int] = (1, 1, 1, 1),
    primaries: int = PRIMARIES_BT709,
    flags: int = FLAGS_ALPHA_STRAIGHT,
) -> bytes:
    """Pack a complete descriptor blob holding a single basic block."""
    block_size = BASIC_BLOCK_HEADER_SIZE + SAMPLE_SIZE * len(samples)
    total_size = 4 + block_size
    out = bytearray()
    out += struct.pack("<I", total_size)
    out += struct.pack(
        "<I",
        (KHR_DF_DESCRIPTORTYPE_BASICFORMAT << 17) | KHR_DF_VENDORID_KHRONOS,
    )
    out += struct.pack("<HH", KHR_DF_VERSIONNUMBER_1_3, block_size)
    out += struct.pack("<4B", color_model, primaries, transfer, flags)
    out += struct.pack("<4B", *(max(d, 1) - 1 for d in block_dimensions))
    out += struct.pack("<8B", bytes_plane0, 0, 0, 0, 0, 0, 0, 0)
    for sample in samples:
        out += sample.pack()
    if len(out) != total_size:  # pragma: no cover
        raise RuntimeError(
            f"DFD size mismatch: expected {total_size} got {len(out)}"
        )
    return bytes(out)


def _channel_range(numeric: str, bits: int) -> Tuple[int, int, int]:
    """Return (qualifiers, lower, upper) for an uncompressed channel."""
    if numeric in ("UNORM", "SRGB"):
        return 0, 0, (1 << bits) - 1
    if numeric == "SNORM":
        half = (1 << (bits - 1)) - 1
        return QUALIFIER_SIGNED, -half, half
    if numeric == "UINT":
        return 0, 0, 1
    if numeric == "SINT":
        return QUALIFIER_SIGNED, -1, 1
    if numeric == "SFLOAT":
        return QUALIFIER_SIGNED | QUALIFIER_FLOAT, _FLOAT_MINUS_ONE, _FLOAT_ONE
    raise ValueError(f"Unknown numeric format: {numeric}")


def uncompressed_descriptor(channels: str, bits: int, numeric: str) -> bytes:
    """Descriptor for an array format of equally sized channels.

    ``channels`` lists channels in memory order, e.g. ``"BGRA"``.
    """
    qualifiers, lower, upper = _channel_range(numeric, bits)
    samples = []
    for i, name in enumerate(channels):
        extra = 0
        if numeric == "SRGB" and name == "A":
            extra = QUALIFIER_LINEAR
        samples.append(
            Sample(
                bit_offset=i * bits,
                bit_length=bits,
                channel=_RGBSDA_CHANNELS[name],
                qualifiers=qualifiers | extra,
                lower=lower,
                upper=upper,
            )
        )
    return pack_basic_descriptor(
        color_model=MODEL_RGBSDA,
        transfer=TRANSFER_SRGB if numeric == "SRGB" else TRANSFER_LINEAR,
        bytes_plane0=len(channels) * bits // 8,
        samples=samples,
    )


def block_descriptor(
    color_model: int,
    block_bytes: int,
    channels: Sequence[Tuple[int, int, int]],
    *,
    block_width: int = 4,
    block_height: int = 4,
    srgb: bool = False,
    signed: bool = False,
) -> bytes:
    """Descriptor for a block-compressed format.

    ``channels`` holds (channel id, bit offset, bit length) per sample.
    """
    if signed:
        qualifiers, lower, upper = QUALIFIER_SIGNED, 0x80000000, 0x7FFFFFFF
    else:
        qualifiers, lower, upper = 0, 0, 0xFFFFFFFF
    samples = [
        Sample(
            bit_offset=offset,
            bit_length=length,
            channel=channel,
            qualifiers=qualifiers,
            lower=lower,
            upper=upper,
        )
        for channel, offset, length in channels
    ]
    return pack_basic_descriptor(
        color_model=color_model,
        transfer=TRANSFER_SRGB if srgb else TRANSFER_LINEAR,
        bytes_plane0=block_bytes,
        samples=samples,
        block_dimensions=(block_width, block_height, 1, 1),
    )


def bytes_per_block(descriptor: bytes) -> int:
    """Read bytesPlane0 back out of a packed descriptor."""
    if len(descriptor) < 4 + BASIC_BLOCK_HEADER_SIZE:
        return 0
    return descriptor[4 + 16]

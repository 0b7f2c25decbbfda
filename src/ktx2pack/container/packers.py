"""Pure binary packing functions for KTX2 sections.

All functions are side-effect free, emit little-endian fields and validate
sizes.
"""

from __future__ import annotations

import struct
from typing import Sequence

from .constants import (
    DESCRIPTOR_ALIGNMENT,
    HEADER_SIZE,
    KTX2_MAGIC,
    LEVEL_INDEX_ENTRY_SIZE,
    MAX_U32,
    MAX_U64,
)
from .errors import E_VALUE_RANGE, KtxError, layout_error
from .layout import pad_to_alignment
from .planner import ContainerPlan, LevelIndexRecord

__all__ = [
    "pack_header",
    "pack_level_index_entry",
    "pack_level_index",
    "pack_descriptor",
]


def _u32(name: str, value: int) -> bytes:
    if not 0 <= value <= MAX_U32:
        raise KtxError(
            code=E_VALUE_RANGE,
            message=f"{name} out of u32 range: {value}",
            context={"field": name, "value": value},
        )
    return struct.pack("<I", value)


def _u64(name: str, value: int) -> bytes:
    if not 0 <= value <= MAX_U64:
        raise KtxError(
            code=E_VALUE_RANGE,
            message=f"{name} out of u64 range: {value}",
            context={"field": name, "value": value},
        )
    return struct.pack("<Q", value)


def pack_header(plan: ContainerPlan) -> bytes:
    """Pack signature, header fields and section index (80 bytes)."""
    out = (
        KTX2_MAGIC
        + _u32("vkFormat", plan.format_code)
        + _u32("typeSize", plan.texel_block_size)
        + _u32("pixelWidth", plan.width)
        + _u32("pixelHeight", plan.height)
        + _u32("pixelDepth", plan.depth)
        + _u32("layerCount", plan.layer_count)
        + _u32("faceCount", plan.face_count)
        + _u32("levelCount", plan.level_count)
        + _u32("supercompressionScheme", plan.supercompression_scheme)
        + _u32("dfdByteOffset", plan.descriptor.offset)
        + _u32("dfdByteLength", plan.descriptor.size)
        + _u32("kvdByteOffset", 0)
        + _u32("kvdByteLength", 0)
        + _u64("sgdByteOffset", 0)
        + _u64("sgdByteLength", 0)
    )
    if len(out) != HEADER_SIZE:  # pragma: no cover
        raise layout_error(f"Header size mismatch: {len(out)}")
    return out


def pack_level_index_entry(record: LevelIndexRecord) -> bytes:
    out = (
        _u64("byteOffset", record.byte_offset)
        + _u64("byteLength", record.compressed_byte_length)
        + _u64("uncompressedByteLength", record.uncompressed_byte_length)
    )
    if len(out) != LEVEL_INDEX_ENTRY_SIZE:  # pragma: no cover
        raise layout_error(f"Level index entry size mismatch: {len(out)}")
    return out


def pack_level_index(records: Sequence[LevelIndexRecord]) -> bytes:
    return b"".join(pack_level_index_entry(r) for r in records)


def pack_descriptor(descriptor: bytes) -> bytes:
    """Descriptor blob zero-padded to the next 4-byte boundary."""
    return pad_to_alignment(descriptor, DESCRIPTOR_ALIGNMENT)

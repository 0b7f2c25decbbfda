"""KTX2 container layout constants."""

from __future__ import annotations

KTX2_MAGIC = bytes(
    [0xAB, 0x4B, 0x54, 0x58, 0x20, 0x32, 0x30, 0xBB, 0x0D, 0x0A, 0x1A, 0x0A]
)

# Signature + nine u32 header fields + index (dfd/kvd u32 pairs, sgd u64 pair)
HEADER_SIZE = 80
LEVEL_INDEX_ENTRY_SIZE = 24
DESCRIPTOR_ALIGNMENT = 4

SUPERCOMPRESSION_ZSTD = 2

DEFAULT_COMPRESSION_LEVEL = 12

FACE_COUNT_CUBEMAP = 6
FACE_COUNT_DEFAULT = 1

MAX_U32 = 0xFFFFFFFF
MAX_U64 = 0xFFFFFFFFFFFFFFFF

__all__ = [
    "KTX2_MAGIC",
    "HEADER_SIZE",
    "LEVEL_INDEX_ENTRY_SIZE",
    "DESCRIPTOR_ALIGNMENT",
    "SUPERCOMPRESSION_ZSTD",
    "DEFAULT_COMPRESSION_LEVEL",
    "FACE_COUNT_CUBEMAP",
    "FACE_COUNT_DEFAULT",
    "MAX_U32",
    "MAX_U64",
]

"""Supercompression adapters.

The container writer only needs ``compress(data, level) -> bytes``; the
concrete codec is pluggable so tests and callers can substitute their own.
"""

from __future__ import annotations

from typing import Protocol

import zstandard

from .constants import SUPERCOMPRESSION_ZSTD
from .errors import compression_failure

__all__ = ["Compressor", "ZstdCompressor", "default_compressor"]


class Compressor(Protocol):
    scheme: int

    def compress(self, data: bytes, level: int) -> bytes: ...


class ZstdCompressor:
    """Zstandard adapter.

    Each call builds its own compression context, so one instance can be used
    from several threads at once. Frames embed the content size, which keeps
    ``decompress`` independent of the caller knowing the original length.
    """

    scheme = SUPERCOMPRESSION_ZSTD

    def compress(self, data: bytes, level: int) -> bytes:
        try:
            cctx = zstandard.ZstdCompressor(level=level)
            return cctx.compress(data)
        except (zstandard.ZstdError, ValueError, MemoryError) as exc:
            raise compression_failure(
                f"zstd compression failed: {exc}",
                {"level": level, "input_size": len(data)},
            ) from exc

    def decompress(self, data: bytes) -> bytes:
        try:
            return zstandard.ZstdDecompressor().decompress(data)
        except zstandard.ZstdError as exc:
            raise compression_failure(
                f"zstd decompression failed: {exc}",
                {"input_size": len(data)},
            ) from exc


_DEFAULT_COMPRESSOR = ZstdCompressor()


def default_compressor() -> ZstdCompressor:
    return _DEFAULT_COMPRESSOR

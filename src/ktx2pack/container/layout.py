"""Low-level layout helpers (alignment, padding)."""

from __future__ import annotations

__all__ = ["padding_for", "pad_to_alignment"]


def padding_for(value: int, alignment: int) -> int:
    return (alignment - (value % alignment)) % alignment


def pad_to_alignment(data: bytes, alignment: int) -> bytes:
    return bytes(data) + b"\x00" * padding_for(len(data), alignment)

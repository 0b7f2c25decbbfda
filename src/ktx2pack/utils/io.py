"""IO helpers for reading level data out of job entries."""

from __future__ import annotations
from pathlib import Path
from typing import Any

from ..container.errors import data_error
from .paths import safe_file_path

__all__ = ["safe_read_file", "read_level_data", "MAX_LEVEL_BYTES"]

MAX_LEVEL_BYTES = 1024 * 1024 * 1024
MAX_HEX_STRING_LENGTH = 2 * 64 * 1024 * 1024

_SOURCE_KEYS = ("data_hex", "file", "data")


def safe_read_file(path: Path, max_size: int = MAX_LEVEL_BYTES) -> bytes:
    if not path.is_file():
        raise data_error(f"File not found: {path}", {"path": str(path)})
    size = path.stat().st_size
    if size > max_size:
        raise data_error(
            f"File too large: {size}>{max_size}", {"path": str(path)}
        )
    return path.read_bytes()


def read_level_data(
    entry: dict[str, Any], base_dir: Path, max_size: int = MAX_LEVEL_BYTES
) -> bytes:
    """Return the raw bytes of one level entry.

    Exactly one source is accepted: ``file`` (relative to ``base_dir``,
    ``path`` is an alias), ``data_hex`` or ``data`` (UTF-8 text).
    """
    if "path" in entry and "file" not in entry:
        entry = {**entry, "file": entry["path"]}
    sources = [k for k in _SOURCE_KEYS if entry.get(k) is not None]
    if not sources:
        raise data_error("No data source (file|data_hex|data) provided")
    if len(sources) > 1:
        raise data_error(f"Multiple data sources: {sources}")
    src = sources[0]
    if src == "data_hex":
        raw = entry["data_hex"]
        if not isinstance(raw, str):
            raise data_error("data_hex must be string")
        h = "".join(raw.split())
        if len(h) > MAX_HEX_STRING_LENGTH:
            raise data_error("hex string too long")
        if len(h) % 2:
            raise data_error("hex string must have even length")
        try:
            return bytes.fromhex(h)
        except ValueError as e:
            raise data_error(f"invalid hex: {e}") from e
    if src == "file":
        p = entry["file"]
        if not isinstance(p, str):
            raise data_error("file path must be string")
        return safe_read_file(safe_file_path(base_dir, p), max_size)
    d = entry["data"]
    if isinstance(d, str):
        return d.encode("utf-8")
    if isinstance(d, (bytes, bytearray)):
        return bytes(d)
    raise data_error("data must be str or bytes")

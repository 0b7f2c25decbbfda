"""Path utilities (safe resolution)."""

from __future__ import annotations
from pathlib import Path

from ..container.errors import data_error

__all__ = ["safe_file_path"]


def safe_file_path(base_dir: Path, file_path: str) -> Path:
    """Resolve ``file_path`` under ``base_dir``; refuse paths escaping it."""
    base_dir = base_dir.resolve()
    resolved = (base_dir / file_path).resolve()
    try:
        resolved.relative_to(base_dir)
    except ValueError as exc:
        raise data_error(
            f"Path escapes job directory: {file_path}",
            {"path": file_path, "base_dir": str(base_dir)},
        ) from exc
    return resolved

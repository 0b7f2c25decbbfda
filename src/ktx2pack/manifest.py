"""Manifest generation for produced containers.

The manifest is an optional JSON artifact summarising a container: file
size and hash, header fields, section layout and per-level sizes. It is
only written when the caller asks for it.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

from .container.planner import ContainerPlan, to_plan_dict
from .formats.vkformat import format_name

__all__ = ["build_manifest", "manifest_dict"]


def manifest_dict(
    plan: ContainerPlan,
    container: bytes,
    *,
    job_path: Path | None = None,
) -> dict[str, Any]:
    plan_dict = to_plan_dict(plan)
    header = dict(plan_dict["header"])
    header["format_name"] = format_name(plan.format_code)
    d: dict[str, Any] = {
        "version": 1,
        "file_size": len(container),
        "sha256": hashlib.sha256(container).hexdigest(),
        "header": header,
        "sections": plan_dict["sections"],
        "levels": plan_dict["levels"],
        "statistics": plan_dict["statistics"],
    }
    if job_path is not None:
        d["job"] = job_path.name
    return d


def build_manifest(
    plan: ContainerPlan,
    container: bytes,
    output_path: Path,
    *,
    job_path: Path | None = None,
) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    data = manifest_dict(plan, container, job_path=job_path)
    with output_path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, sort_keys=True)
        f.write("\n")
    return output_path

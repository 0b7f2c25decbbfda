"""High-level API for ktx2pack.

``encode_ktx2`` is the in-memory entry point. ``build_ktx2`` and
``plan_dry_run`` drive it from a job file for the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Sequence

from .container.assembler import (
    assemble_container,
    assemble_container_with_plan,
)
from .container.compression import Compressor
from .container.constants import DEFAULT_COMPRESSION_LEVEL
from .container.planner import ContainerPlan, to_plan_dict
from .formats.registry import FormatRegistry, default_registry
from .logging import get_logger, section, step
from .manifest import build_manifest
from .reporting import get_reporter, task
from .spec.loader import load_job
from .spec.models import TextureJob

__all__ = [
    "BuildOptions",
    "BuildResult",
    "encode_ktx2",
    "build_ktx2",
    "plan_dry_run",
    "list_formats",
    "load_job",
    "TextureJob",
    "ContainerPlan",
]


@dataclass(slots=True)
class BuildOptions:
    input_job: Path
    output_path: Path
    # Overrides the job file's compression level when set
    compression_level: Optional[int] = None
    workers: int = 1
    # Optional path; when provided a manifest JSON is written next to the output
    manifest_path: Path | None = None


@dataclass(slots=True)
class BuildResult:
    output_file: Path
    bytes_written: int
    plan: ContainerPlan


def encode_ktx2(
    slices: Sequence[bytes],
    width: int,
    height: int,
    depth: int,
    layer_count: int,
    is_cubemap: bool,
    format_code: int,
    compression_level: int = DEFAULT_COMPRESSION_LEVEL,
    *,
    registry: Optional[FormatRegistry] = None,
    compressor: Optional[Compressor] = None,
    workers: int = 1,
) -> bytes:
    """Encode raw mip levels (level 0 first) into KTX2 container bytes.

    Raises ``UnsupportedFormatError`` before any compression when the format
    has no usable registry entry, and ``CompressionError`` when a level
    cannot be compressed.
    """
    return assemble_container(
        slices,
        width,
        height,
        depth,
        layer_count,
        is_cubemap,
        format_code,
        compression_level,
        registry=registry,
        compressor=compressor,
        workers=workers,
    )


def _encode_job(
    job: TextureJob, compression_level: Optional[int], workers: int
) -> tuple[bytes, ContainerPlan]:
    logger = get_logger()
    for i, lvl in enumerate(job.levels):
        logger.debug("level %d: %d bytes from %s", i, len(lvl.data), lvl.origin)
    level = (
        compression_level
        if compression_level is not None
        else job.compression_level
    )
    return assemble_container_with_plan(
        job.slices,
        job.width,
        job.height,
        job.depth,
        job.layer_count,
        job.cubemap,
        job.format_code,
        level,
        workers=workers,
    )


def build_ktx2(options: BuildOptions) -> BuildResult:
    logger = get_logger()
    rep = get_reporter()
    with section(f"Build {options.output_path.name}"):
        job = load_job(options.input_job)
        rep.info(
            "Job summary: "
            + f"{job.width}x{job.height}x{job.depth} layers={job.layer_count} "
            + f"cubemap={job.cubemap} format={job.format_code} "
            + f"levels={len(job.levels)} raw_bytes={job.raw_size}"
        )
        container, plan = _encode_job(
            job, options.compression_level, options.workers
        )
        step(f"Writing {options.output_path}")
        with task("write.output", "Write container") as summary:
            options.output_path.parent.mkdir(parents=True, exist_ok=True)
            options.output_path.write_bytes(container)
            summary.update(levels=plan.level_count, bytes=len(container))
        if options.manifest_path is not None:
            build_manifest(
                plan,
                container,
                options.manifest_path,
                job_path=job.source_path,
            )
            logger.info("Emitted manifest: %s", options.manifest_path.name)
    rep.info(
        "Build summary: file="
        + f"{options.output_path.name} bytes={len(container)} "
        + f"levels={plan.level_count} payload={plan.payload.size}"
    )
    return BuildResult(
        output_file=options.output_path,
        bytes_written=len(container),
        plan=plan,
    )


def plan_dry_run(
    job_path: str | Path,
    compression_level: Optional[int] = None,
    workers: int = 1,
) -> tuple[ContainerPlan, dict]:
    """Compute the container plan for a job file without writing output.

    Levels are still compressed, since offsets depend on compressed sizes.
    Returns (ContainerPlan, plan_dict) where plan_dict is JSON-serialisable.
    """
    job = load_job(job_path)
    _container, plan = _encode_job(job, compression_level, workers)
    return plan, to_plan_dict(plan)


def list_formats(
    registry: Optional[FormatRegistry] = None,
) -> list[dict[str, Any]]:
    registry = default_registry() if registry is None else registry
    return [
        {
            "code": entry.format_code,
            "name": entry.name,
            "texel_block_size": entry.texel_block_size,
            "descriptor_length": len(entry.descriptor),
        }
        for entry in registry
    ]

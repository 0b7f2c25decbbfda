"""Container assembly: validate, compress, plan, write.

``assemble_container`` is the single entry point of the core. It either
returns a complete, self-consistent container or raises the first fatal
error; nothing partial escapes.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Optional, Sequence

from ..logging import get_logger
from ..reporting import get_reporter, ratio, task
from ..formats.registry import FormatRegistry, default_registry
from .compression import Compressor, default_compressor
from .constants import DEFAULT_COMPRESSION_LEVEL
from .errors import E_NO_LEVELS, KtxError, LayoutError, compression_failure
from .planner import ContainerPlan, compute_container_plan
from .writer import write_container

__all__ = [
    "assemble_container",
    "assemble_container_with_plan",
    "compress_levels",
]


def _compress_one(
    compressor: Compressor, index: int, data: bytes, level: int
) -> bytes:
    try:
        return compressor.compress(data, level)
    except KtxError as exc:
        context = dict(exc.context or {})
        context["level_index"] = index
        raise compression_failure(
            f"Level {index}: {exc.message}", context
        ) from exc
    except Exception as exc:
        raise compression_failure(
            f"Level {index}: compressor raised {type(exc).__name__}: {exc}",
            {"level_index": index, "compression_level": level},
        ) from exc


def compress_levels(
    slices: Sequence[bytes],
    compression_level: int,
    compressor: Compressor,
    *,
    workers: int = 1,
) -> List[bytes]:
    """Compress every slice, preserving order.

    With ``workers > 1`` slices are compressed on a thread pool; results are
    still collected in input order and pending work is cancelled as soon as
    one level fails. Each finished level is reported with its raw and packed
    byte counts.
    """
    raw = [bytes(s) for s in slices]
    results: List[bytes] = []
    with task("compress.levels", "Compress levels", total=len(raw)) as summary:
        if workers <= 1 or len(raw) <= 1:
            for i, data in enumerate(raw):
                results.append(
                    _compress_one(compressor, i, data, compression_level)
                )
                _report_level(i, data, results[-1])
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures: List[Future[bytes]] = [
                    executor.submit(
                        _compress_one, compressor, i, data, compression_level
                    )
                    for i, data in enumerate(raw)
                ]
                try:
                    for i, fut in enumerate(futures):
                        results.append(fut.result())
                        _report_level(i, raw[i], results[-1])
                except BaseException:
                    for fut in futures:
                        fut.cancel()
                    raise
        raw_total = sum(len(d) for d in raw)
        packed_total = sum(len(r) for r in results)
        summary.update(
            levels=len(results),
            raw_bytes=raw_total,
            packed_bytes=packed_total,
            ratio=ratio(raw_total, packed_total),
        )
    return results


def _report_level(index: int, data: bytes, packed: bytes) -> None:
    get_reporter().progress(
        "compress.levels",
        level=index,
        raw_bytes=len(data),
        packed_bytes=len(packed),
    )


def assemble_container(
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
    """Encode mip level slices (level 0 first) into a KTX2 container."""
    container, _plan = assemble_container_with_plan(
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
    return container


def assemble_container_with_plan(
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
) -> tuple[bytes, ContainerPlan]:
    """Like :func:`assemble_container`, also returning the layout plan."""
    logger = get_logger()
    if registry is None:
        registry = default_registry()
    if compressor is None:
        compressor = default_compressor()
    # Byte lengths, not item counts, for buffers such as array("H").
    raw = [bytes(s) for s in slices]
    if not raw:
        raise LayoutError(
            code=E_NO_LEVELS, message="At least one level slice is required"
        )
    # Fails before any compression work on unsupported formats.
    entry = registry.lookup(format_code)

    payloads = compress_levels(
        raw, compression_level, compressor, workers=workers
    )
    plan = compute_container_plan(
        format_code=int(format_code),
        texel_block_size=entry.texel_block_size,
        descriptor_length=len(entry.descriptor),
        level_sizes=[(len(p), len(r)) for p, r in zip(payloads, raw)],
        width=width,
        height=height,
        depth=depth,
        layer_count=layer_count,
        is_cubemap=is_cubemap,
        supercompression_scheme=compressor.scheme,
    )
    container = write_container(plan, entry.descriptor, payloads)
    logger.info(
        "Encoded %s %dx%dx%d levels=%d faces=%d: %d bytes",
        entry.name or f"format {format_code}",
        width,
        height,
        depth,
        plan.level_count,
        plan.face_count,
        len(container),
    )
    return container, plan

"""Binary writer emitting a KTX2 container from a :class:`ContainerPlan`.

The writer performs no layout math of its own. Each section is appended to an
in-memory buffer and its position is checked against the plan; any
divergence raises :class:`LayoutError` and no buffer is returned.
"""

from __future__ import annotations

from typing import Sequence

from ..logging import get_logger
from .constants import HEADER_SIZE
from .errors import layout_error
from .packers import pack_descriptor, pack_header, pack_level_index
from .planner import ContainerPlan

__all__ = ["write_container"]


def _expect_position(buf: bytearray, target_offset: int, section: str) -> None:
    if len(buf) != target_offset:
        raise layout_error(
            f"{section} starts at {len(buf)}, plan expects {target_offset}",
            {"section": section, "actual": len(buf), "planned": target_offset},
        )


def write_container(
    plan: ContainerPlan, descriptor: bytes, payloads: Sequence[bytes]
) -> bytes:
    """Assemble the container bytes strictly following ``plan``."""
    logger = get_logger()
    if len(payloads) != plan.level_count:
        raise layout_error(
            f"Payload count mismatch: plan={plan.level_count} actual={len(payloads)}"
        )
    if len(descriptor) != plan.descriptor.size:
        raise layout_error(
            f"Descriptor size mismatch: plan={plan.descriptor.size} actual={len(descriptor)}"
        )

    buf = bytearray()
    buf += pack_header(plan)
    _expect_position(buf, HEADER_SIZE, "header end")

    _expect_position(buf, plan.level_index.offset, "level index")
    buf += pack_level_index(plan.levels)

    _expect_position(buf, plan.descriptor.offset, "descriptor")
    buf += pack_descriptor(descriptor)

    for i, (record, payload) in enumerate(zip(plan.levels, payloads)):
        _expect_position(buf, record.byte_offset, f"level {i}")
        if len(payload) != record.compressed_byte_length:
            raise layout_error(
                f"Level {i} size mismatch: plan={record.compressed_byte_length} actual={len(payload)}",
                {"level": i},
            )
        buf += payload

    if len(buf) != plan.file_size:
        raise layout_error(
            f"File size mismatch vs plan: plan={plan.file_size} actual={len(buf)}"
        )
    logger.debug(
        "Wrote container: %d bytes, %d level(s), descriptor %d+%d bytes",
        len(buf),
        plan.level_count,
        plan.descriptor.size,
        plan.descriptor.padding_after,
    )
    return bytes(buf)

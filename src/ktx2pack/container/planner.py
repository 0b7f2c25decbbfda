"""Layout planning: offsets and sizes of every container section.

The plan is computed from the format entry and the compressed size of every
level, before any byte is written. The writer consumes it as the single
source of truth for offsets and checks its own output against it.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

from .constants import (
    DESCRIPTOR_ALIGNMENT,
    FACE_COUNT_CUBEMAP,
    FACE_COUNT_DEFAULT,
    HEADER_SIZE,
    LEVEL_INDEX_ENTRY_SIZE,
    SUPERCOMPRESSION_ZSTD,
)
from .errors import E_NO_LEVELS, LayoutError
from .layout import padding_for

__all__ = [
    "LevelIndexRecord",
    "SectionPlan",
    "ContainerPlan",
    "build_level_index",
    "compute_container_plan",
    "to_plan_dict",
]


@dataclass(frozen=True, slots=True)
class LevelIndexRecord:
    byte_offset: int
    compressed_byte_length: int
    uncompressed_byte_length: int


@dataclass(frozen=True, slots=True)
class SectionPlan:
    name: str
    offset: int
    size: int
    padding_after: int = 0


@dataclass(frozen=True, slots=True)
class ContainerPlan:
    format_code: int
    texel_block_size: int
    width: int
    height: int
    depth: int
    layer_count: int
    face_count: int
    level_count: int
    supercompression_scheme: int
    level_index: SectionPlan
    descriptor: SectionPlan
    payload: SectionPlan
    levels: Tuple[LevelIndexRecord, ...]
    file_size: int

    @property
    def padded_descriptor_length(self) -> int:
        return self.descriptor.size + self.descriptor.padding_after


def build_level_index(
    levels: Sequence[Tuple[int, int]],
    header_plus_index_length: int,
    padded_descriptor_length: int,
) -> List[LevelIndexRecord]:
    """Compute level index records from (compressed, uncompressed) sizes.

    Payloads are laid out back to back in input order, starting right after
    the padded descriptor.
    """
    records: List[LevelIndexRecord] = []
    offset = header_plus_index_length + padded_descriptor_length
    for compressed_length, uncompressed_length in levels:
        records.append(
            LevelIndexRecord(
                byte_offset=offset,
                compressed_byte_length=compressed_length,
                uncompressed_byte_length=uncompressed_length,
            )
        )
        offset += compressed_length
    return records


def compute_container_plan(
    *,
    format_code: int,
    texel_block_size: int,
    descriptor_length: int,
    level_sizes: Sequence[Tuple[int, int]],
    width: int,
    height: int,
    depth: int,
    layer_count: int,
    is_cubemap: bool,
    supercompression_scheme: int = SUPERCOMPRESSION_ZSTD,
) -> ContainerPlan:
    level_count = len(level_sizes)
    if level_count == 0:
        raise LayoutError(
            code=E_NO_LEVELS, message="At least one level is required"
        )
    index_offset = HEADER_SIZE
    index_size = LEVEL_INDEX_ENTRY_SIZE * level_count
    descriptor_offset = index_offset + index_size
    descriptor_padding = padding_for(descriptor_length, DESCRIPTOR_ALIGNMENT)
    levels = build_level_index(
        level_sizes,
        descriptor_offset,
        descriptor_length + descriptor_padding,
    )
    payload_offset = levels[0].byte_offset
    payload_size = sum(r.compressed_byte_length for r in levels)
    return ContainerPlan(
        format_code=format_code,
        texel_block_size=texel_block_size,
        width=width,
        height=height,
        depth=depth,
        layer_count=layer_count,
        face_count=FACE_COUNT_CUBEMAP if is_cubemap else FACE_COUNT_DEFAULT,
        level_count=level_count,
        supercompression_scheme=supercompression_scheme,
        level_index=SectionPlan("level_index", index_offset, index_size),
        descriptor=SectionPlan(
            "descriptor",
            descriptor_offset,
            descriptor_length,
            padding_after=descriptor_padding,
        ),
        payload=SectionPlan("payload", payload_offset, payload_size),
        levels=tuple(levels),
        file_size=payload_offset + payload_size,
    )


def to_plan_dict(plan: ContainerPlan) -> Dict[str, Any]:  # lightweight serializer
    def section(s: SectionPlan):
        return {
            "name": s.name,
            "offset": s.offset,
            "size": s.size,
            "padding_after": s.padding_after,
        }

    return {
        "header": {
            "format": plan.format_code,
            "texel_block_size": plan.texel_block_size,
            "width": plan.width,
            "height": plan.height,
            "depth": plan.depth,
            "layer_count": plan.layer_count,
            "face_count": plan.face_count,
            "level_count": plan.level_count,
            "supercompression_scheme": plan.supercompression_scheme,
        },
        "file_size": plan.file_size,
        "sections": [
            {"name": "header", "offset": 0, "size": HEADER_SIZE, "padding_after": 0},
            section(plan.level_index),
            section(plan.descriptor),
            section(plan.payload),
        ],
        "levels": [
            {
                "level": i,
                "byte_offset": r.byte_offset,
                "compressed_byte_length": r.compressed_byte_length,
                "uncompressed_byte_length": r.uncompressed_byte_length,
            }
            for i, r in enumerate(plan.levels)
        ],
        "statistics": {
            "compressed_total": plan.payload.size,
            "uncompressed_total": sum(
                r.uncompressed_byte_length for r in plan.levels
            ),
            "padding_total": plan.descriptor.padding_after,
        },
    }

"""Format registry: VkFormat code -> (descriptor blob, texel block size).

The default table is built once at import time and exposed through a
read-only mapping, so it can be shared between concurrent encoders without
locking.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Tuple

from ..container.errors import unsupported_format
from . import dfd
from .vkformat import VkFormat

__all__ = [
    "FormatEntry",
    "FormatRegistry",
    "NO_ENTRY",
    "default_registry",
    "lookup",
    "parse_format",
]


@dataclass(frozen=True, slots=True)
class FormatEntry:
    format_code: int
    descriptor: bytes
    texel_block_size: int
    name: str = ""

    @property
    def supported(self) -> bool:
        return bool(self.descriptor) and self.texel_block_size > 0


# Sentinel for codes without a table entry.
NO_ENTRY = FormatEntry(format_code=-1, descriptor=b"", texel_block_size=0)


class FormatRegistry:
    """Immutable lookup table of supported formats."""

    def __init__(self, entries: Iterable[FormatEntry]):
        table: Dict[int, FormatEntry] = {}
        for entry in entries:
            table[int(entry.format_code)] = entry
        self._table: Mapping[int, FormatEntry] = MappingProxyType(table)

    def get(self, format_code: int) -> FormatEntry:
        return self._table.get(int(format_code), NO_ENTRY)

    def lookup(self, format_code: int) -> FormatEntry:
        """Return the entry for ``format_code`` or raise UnsupportedFormatError."""
        entry = self.get(format_code)
        if entry is NO_ENTRY:
            raise unsupported_format(format_code, "no registry entry")
        if not entry.descriptor:
            raise unsupported_format(format_code, "empty descriptor")
        if entry.texel_block_size <= 0:
            raise unsupported_format(format_code, "zero texel block size")
        return entry

    def is_supported(self, format_code: int) -> bool:
        return self.get(format_code).supported

    def supported_codes(self) -> List[int]:
        return sorted(c for c, e in self._table.items() if e.supported)

    def __contains__(self, format_code: object) -> bool:
        return isinstance(format_code, int) and self.is_supported(format_code)

    def __iter__(self) -> Iterator[FormatEntry]:
        for code in self.supported_codes():
            yield self._table[code]

    def __len__(self) -> int:
        return len(self.supported_codes())


# ---------------------------------------------------------------------------
# Default table
# ---------------------------------------------------------------------------

_NUMERIC_SUFFIXES = ("UNORM", "SNORM", "UINT", "SINT", "SRGB", "SFLOAT")
_CHANNEL_RE = re.compile(r"([RGBAD])(\d+)")

_ASTC_BLOCKS: Tuple[Tuple[int, int], ...] = (
    (4, 4),
    (5, 4),
    (5, 5),
    (6, 5),
    (6, 6),
    (8, 5),
    (8, 6),
    (8, 8),
    (10, 5),
    (10, 6),
    (10, 8),
    (10, 10),
    (12, 10),
    (12, 12),
)


def _uncompressed_entries() -> Iterator[FormatEntry]:
    for fmt in VkFormat:
        name = fmt.name
        if name.endswith("_BLOCK") or fmt == VkFormat.UNDEFINED:
            continue
        layout, _, numeric = name.rpartition("_")
        if numeric not in _NUMERIC_SUFFIXES:
            continue
        # "R8G8B8A8" -> channels "RGBA", 8 bits each
        parts = _CHANNEL_RE.findall(layout)
        channels = "".join(ch for ch, _ in parts)
        bits = int(parts[0][1])
        descriptor = dfd.uncompressed_descriptor(channels, bits, numeric)
        yield FormatEntry(
            format_code=int(fmt),
            descriptor=descriptor,
            texel_block_size=dfd.bytes_per_block(descriptor),
            name=name,
        )


def _block_entries() -> Iterator[FormatEntry]:
    color = dfd.CHANNEL_COLOR
    alpha = dfd.CHANNEL_ALPHA
    red, green = dfd.CHANNEL_RED, dfd.CHANNEL_GREEN
    etc_color = dfd.CHANNEL_ETC2_COLOR
    specs = [
        (VkFormat.BC1_RGB_UNORM_BLOCK, dfd.MODEL_BC1A, 8, [(color, 0, 64)], {}),
        (VkFormat.BC1_RGB_SRGB_BLOCK, dfd.MODEL_BC1A, 8, [(color, 0, 64)], {"srgb": True}),
        (VkFormat.BC1_RGBA_UNORM_BLOCK, dfd.MODEL_BC1A, 8, [(dfd.CHANNEL_BC1A_ALPHAPRESENT, 0, 64)], {}),
        (VkFormat.BC1_RGBA_SRGB_BLOCK, dfd.MODEL_BC1A, 8, [(dfd.CHANNEL_BC1A_ALPHAPRESENT, 0, 64)], {"srgb": True}),
        (VkFormat.BC2_UNORM_BLOCK, dfd.MODEL_BC2, 16, [(alpha, 0, 64), (color, 64, 64)], {}),
        (VkFormat.BC2_SRGB_BLOCK, dfd.MODEL_BC2, 16, [(alpha, 0, 64), (color, 64, 64)], {"srgb": True}),
        (VkFormat.BC3_UNORM_BLOCK, dfd.MODEL_BC3, 16, [(alpha, 0, 64), (color, 64, 64)], {}),
        (VkFormat.BC3_SRGB_BLOCK, dfd.MODEL_BC3, 16, [(alpha, 0, 64), (color, 64, 64)], {"srgb": True}),
        (VkFormat.BC4_UNORM_BLOCK, dfd.MODEL_BC4, 8, [(color, 0, 64)], {}),
        (VkFormat.BC4_SNORM_BLOCK, dfd.MODEL_BC4, 8, [(color, 0, 64)], {"signed": True}),
        (VkFormat.BC5_UNORM_BLOCK, dfd.MODEL_BC5, 16, [(red, 0, 64), (green, 64, 64)], {}),
        (VkFormat.BC5_SNORM_BLOCK, dfd.MODEL_BC5, 16, [(red, 0, 64), (green, 64, 64)], {"signed": True}),
        (VkFormat.BC7_UNORM_BLOCK, dfd.MODEL_BC7, 16, [(color, 0, 128)], {}),
        (VkFormat.BC7_SRGB_BLOCK, dfd.MODEL_BC7, 16, [(color, 0, 128)], {"srgb": True}),
        (VkFormat.ETC2_R8G8B8_UNORM_BLOCK, dfd.MODEL_ETC2, 8, [(etc_color, 0, 64)], {}),
        (VkFormat.ETC2_R8G8B8_SRGB_BLOCK, dfd.MODEL_ETC2, 8, [(etc_color, 0, 64)], {"srgb": True}),
        (VkFormat.ETC2_R8G8B8A1_UNORM_BLOCK, dfd.MODEL_ETC2, 8, [(etc_color, 0, 64), (alpha, 0, 64)], {}),
        (VkFormat.ETC2_R8G8B8A1_SRGB_BLOCK, dfd.MODEL_ETC2, 8, [(etc_color, 0, 64), (alpha, 0, 64)], {"srgb": True}),
        (VkFormat.ETC2_R8G8B8A8_UNORM_BLOCK, dfd.MODEL_ETC2, 16, [(alpha, 0, 64), (etc_color, 64, 64)], {}),
        (VkFormat.ETC2_R8G8B8A8_SRGB_BLOCK, dfd.MODEL_ETC2, 16, [(alpha, 0, 64), (etc_color, 64, 64)], {"srgb": True}),
        (VkFormat.EAC_R11_UNORM_BLOCK, dfd.MODEL_ETC2, 8, [(red, 0, 64)], {}),
        (VkFormat.EAC_R11_SNORM_BLOCK, dfd.MODEL_ETC2, 8, [(red, 0, 64)], {"signed": True}),
        (VkFormat.EAC_R11G11_UNORM_BLOCK, dfd.MODEL_ETC2, 16, [(red, 0, 64), (green, 64, 64)], {}),
        (VkFormat.EAC_R11G11_SNORM_BLOCK, dfd.MODEL_ETC2, 16, [(red, 0, 64), (green, 64, 64)], {"signed": True}),
    ]
    for fmt, model, block_bytes, channels, options in specs:
        yield FormatEntry(
            format_code=int(fmt),
            descriptor=dfd.block_descriptor(model, block_bytes, channels, **options),
            texel_block_size=block_bytes,
            name=fmt.name,
        )
    for width, height in _ASTC_BLOCKS:
        for srgb in (False, True):
            suffix = "SRGB" if srgb else "UNORM"
            fmt = VkFormat[f"ASTC_{width}x{height}_{suffix}_BLOCK"]
            yield FormatEntry(
                format_code=int(fmt),
                descriptor=dfd.block_descriptor(
                    dfd.MODEL_ASTC,
                    16,
                    [(color, 0, 128)],
                    block_width=width,
                    block_height=height,
                    srgb=srgb,
                ),
                texel_block_size=16,
                name=fmt.name,
            )


def _build_default_registry() -> FormatRegistry:
    return FormatRegistry([*_uncompressed_entries(), *_block_entries()])


_DEFAULT_REGISTRY = _build_default_registry()


def default_registry() -> FormatRegistry:
    return _DEFAULT_REGISTRY


def lookup(format_code: int) -> FormatEntry:
    return _DEFAULT_REGISTRY.lookup(format_code)


def parse_format(value: object) -> int:
    """Resolve an integer code or a VkFormat name to an integer code.

    Names are matched case-insensitively, with or without the ``VK_FORMAT_``
    prefix. The result is not checked against any registry.
    """
    if isinstance(value, bool):
        raise unsupported_format(value, "format must be a code or a name")
    if isinstance(value, int):
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return int(text)
        name = text.upper()
        if name.startswith("VK_FORMAT_"):
            name = name[len("VK_FORMAT_") :]
        for fmt in VkFormat:
            if fmt.name.upper() == name:
                return int(fmt)
        raise unsupported_format(value, "unknown format name")
    raise unsupported_format(value, "format must be a code or a name")

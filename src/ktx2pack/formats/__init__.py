"""Pixel format table (VkFormat codes and data format descriptors)."""

from .registry import (
    FormatEntry,
    FormatRegistry,
    default_registry,
    lookup,
    parse_format,
)
from .vkformat import VkFormat, format_name

__all__ = [
    "FormatEntry",
    "FormatRegistry",
    "VkFormat",
    "default_registry",
    "format_name",
    "lookup",
    "parse_format",
]

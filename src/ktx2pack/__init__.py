"""ktx2pack: KTX2 texture containers with Zstandard supercompression."""

from .api import (
    BuildOptions,
    BuildResult,
    build_ktx2,
    encode_ktx2,
    list_formats,
    plan_dry_run,
)
from .container.errors import (
    CompressionError,
    KtxError,
    LayoutError,
    UnsupportedFormatError,
)
from .formats import FormatEntry, FormatRegistry, VkFormat

__version__ = "0.1.0"

__all__ = [
    "BuildOptions",
    "BuildResult",
    "CompressionError",
    "FormatEntry",
    "FormatRegistry",
    "KtxError",
    "LayoutError",
    "UnsupportedFormatError",
    "VkFormat",
    "build_ktx2",
    "encode_ktx2",
    "list_formats",
    "plan_dry_run",
    "__version__",
]

"""Error definitions for ktx2pack."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

E_UNSUPPORTED_FORMAT = "E_UNSUPPORTED_FORMAT"
E_COMPRESSION = "E_COMPRESSION"
E_NO_LEVELS = "E_NO_LEVELS"
E_VALUE_RANGE = "E_VALUE_RANGE"
E_LAYOUT = "E_LAYOUT"
E_SPEC = "E_SPEC"
E_DATA = "E_DATA"


@dataclass
class KtxError(Exception):
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.code}: {self.message}" + (
            f" | ctx={self.context}" if self.context else ""
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context or {},
        }


class UnsupportedFormatError(KtxError):
    pass


class CompressionError(KtxError):
    pass


class LayoutError(KtxError):
    pass


class SpecificationError(KtxError):
    pass


class DataError(KtxError):
    pass


def unsupported_format(format_code: Any, reason: str) -> UnsupportedFormatError:
    return UnsupportedFormatError(
        code=E_UNSUPPORTED_FORMAT,
        message=f"Unsupported format {format_code!r}: {reason}",
        context={"format": format_code},
    )


def compression_failure(
    message: str, context: Optional[Dict[str, Any]] = None
) -> CompressionError:
    return CompressionError(code=E_COMPRESSION, message=message, context=context)


def layout_error(
    message: str, context: Optional[Dict[str, Any]] = None
) -> LayoutError:
    return LayoutError(code=E_LAYOUT, message=message, context=context)


def spec_error(
    message: str, context: Optional[Dict[str, Any]] = None
) -> SpecificationError:
    return SpecificationError(code=E_SPEC, message=message, context=context)


def data_error(
    message: str, context: Optional[Dict[str, Any]] = None
) -> DataError:
    return DataError(code=E_DATA, message=message, context=context)


__all__ = [
    "KtxError",
    "UnsupportedFormatError",
    "CompressionError",
    "LayoutError",
    "SpecificationError",
    "DataError",
    "unsupported_format",
    "compression_failure",
    "layout_error",
    "spec_error",
    "data_error",
    "E_UNSUPPORTED_FORMAT",
    "E_COMPRESSION",
    "E_NO_LEVELS",
    "E_VALUE_RANGE",
    "E_LAYOUT",
    "E_SPEC",
    "E_DATA",
]

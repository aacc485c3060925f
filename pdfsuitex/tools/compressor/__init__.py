"""Compression utilities exposed through the pdfsuitex tools namespace."""

from __future__ import annotations

from .compressor import (
    COMPRESSION_LEVELS,
    CompressionLevel,
    CompressionResult,
    compress_document,
    get_compression_level,
)
from .info import CompressionInfo, get_compression_info

__all__ = [
    "COMPRESSION_LEVELS",
    "CompressionLevel",
    "CompressionResult",
    "CompressionInfo",
    "compress_document",
    "get_compression_info",
    "get_compression_level",
]

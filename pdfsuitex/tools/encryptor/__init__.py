"""Password protection helpers exposed through the pdfsuitex tools namespace."""

from __future__ import annotations

from .api import SUPPORTED_ALGORITHMS, build_encryption_spec, is_encrypted, protect, unlock

__all__ = [
    "SUPPORTED_ALGORITHMS",
    "build_encryption_spec",
    "is_encrypted",
    "protect",
    "unlock",
]

"""Namespace for pluggable pdfsuitex tools."""

from __future__ import annotations

from .common.pipeline import registry


def load_builtin_plugins() -> None:
    from .pages import arrange, merge, split  # noqa: F401  # register page tools
    from .overlay import convert, edit, sign  # noqa: F401
    from .compressor import compress  # noqa: F401
    from .encryptor import encrypt  # noqa: F401


__all__ = ["registry", "load_builtin_plugins"]

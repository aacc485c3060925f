"""Document model, codec and shared helpers for pdfsuitex."""

from __future__ import annotations

from .codec import create, load, save
from .config import DEFAULT_CONFIG, EngineConfig
from .exceptions import (
    CorruptDocument,
    InsufficientInput,
    InvalidOption,
    MissingRequiredOption,
    PageIndexOutOfRange,
    PasswordRequired,
    PdfEngineError,
    UnknownOperation,
    UnsupportedImageFormat,
    WrongPassword,
    describe_error,
)
from .model import (
    Document,
    EncryptionSpec,
    FontResource,
    ImageInstruction,
    ImageResource,
    OperationResult,
    Page,
    PermissionSet,
    SaveOptions,
    ShapeInstruction,
    TextInstruction,
)

__all__ = [
    "create",
    "load",
    "save",
    "DEFAULT_CONFIG",
    "EngineConfig",
    "CorruptDocument",
    "InsufficientInput",
    "InvalidOption",
    "MissingRequiredOption",
    "PageIndexOutOfRange",
    "PasswordRequired",
    "PdfEngineError",
    "UnknownOperation",
    "UnsupportedImageFormat",
    "WrongPassword",
    "describe_error",
    "Document",
    "EncryptionSpec",
    "FontResource",
    "ImageInstruction",
    "ImageResource",
    "OperationResult",
    "Page",
    "PermissionSet",
    "SaveOptions",
    "ShapeInstruction",
    "TextInstruction",
]

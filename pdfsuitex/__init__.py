"""In-memory PDF transformation engine built on pypdf, Pillow and reportlab."""

from __future__ import annotations

from .core import codec
from .core.codec import create, load, save
from .core.config import DEFAULT_CONFIG, EngineConfig
from .core.exceptions import (
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
from .core.model import (
    Document,
    EncryptionSpec,
    ImageInstruction,
    OperationResult,
    Page,
    PermissionSet,
    RecognizedText,
    SaveOptions,
    ShapeInstruction,
    TextInstruction,
)
from .tools import compressor as compress
from .tools import encryptor as security
from .tools import overlay
from .tools import pages
from .tools import load_builtin_plugins
from .tools.common.interfaces import InputFile, OperationContext
from .tools.common.pipeline import ToolRegistry, register_tool, registry
from .tools.compressor import (
    COMPRESSION_LEVELS,
    CompressionInfo,
    CompressionLevel,
    CompressionResult,
    compress_document,
    get_compression_info,
)
from .tools.encryptor import is_encrypted, protect, unlock
from .tools.overlay import (
    add_image,
    add_ocr_layer,
    add_shape,
    add_signature,
    add_text,
    embed_font,
    images_to_pdf,
)
from .tools.pages import (
    PageRange,
    copy_pages,
    extract_pages,
    merge_documents,
    remove_pages,
    reorder_pages,
    rotate_pages,
    split_document,
)
from .orchestrator import OPERATIONS, apply

load_builtin_plugins()

__all__ = [
    "codec",
    "compress",
    "security",
    "overlay",
    "pages",
    "apply",
    "OPERATIONS",
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
    "ImageInstruction",
    "OperationResult",
    "Page",
    "PermissionSet",
    "RecognizedText",
    "SaveOptions",
    "ShapeInstruction",
    "TextInstruction",
    "InputFile",
    "OperationContext",
    "ToolRegistry",
    "register_tool",
    "registry",
    "load_builtin_plugins",
    "COMPRESSION_LEVELS",
    "CompressionInfo",
    "CompressionLevel",
    "CompressionResult",
    "compress_document",
    "get_compression_info",
    "is_encrypted",
    "protect",
    "unlock",
    "add_image",
    "add_ocr_layer",
    "add_shape",
    "add_signature",
    "add_text",
    "embed_font",
    "images_to_pdf",
    "PageRange",
    "copy_pages",
    "extract_pages",
    "merge_documents",
    "remove_pages",
    "reorder_pages",
    "rotate_pages",
    "split_document",
]

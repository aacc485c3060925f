"""Error taxonomy shared by every pdfsuitex operation.

Each error carries a ``category`` slug and a ``user_message`` so callers can
render precise feedback ("incorrect password" vs. "file is corrupted") instead
of a generic failure.
"""

from __future__ import annotations

from typing import Iterable


class PdfEngineError(Exception):
    """Base exception for all errors raised by :mod:`pdfsuitex`."""

    category = "processing-failed"
    user_message = "The document could not be processed."


class CorruptDocument(PdfEngineError):
    """Raised when input bytes cannot be parsed as a PDF document."""

    category = "corrupt-document"
    user_message = "The file is corrupted or is not a valid PDF."


class PasswordRequired(PdfEngineError):
    """Raised when an encrypted document is opened without a password."""

    category = "password-required"
    user_message = "This PDF is password protected. Please enter its password."


class WrongPassword(PdfEngineError):
    """Raised when the supplied password does not open the document."""

    category = "wrong-password"
    user_message = "The password is incorrect."


class PageIndexOutOfRange(PdfEngineError, IndexError):
    """Raised when a page-index operation references a nonexistent page."""

    category = "page-out-of-range"
    user_message = "One or more selected pages do not exist in this document."

    def __init__(self, indices: Iterable[int], page_count: int) -> None:
        self.indices = list(indices)
        self.page_count = page_count
        message = f"Page index out of range {self.indices!r} for a document with {page_count} page(s)"
        super().__init__(message)


class UnsupportedImageFormat(PdfEngineError):
    """Raised when an image is not a decodable JPEG or PNG."""

    category = "unsupported-image"
    user_message = "Only JPEG and PNG images are supported."


class MissingRequiredOption(PdfEngineError):
    """Raised when an operation is invoked without a required option."""

    category = "missing-option"
    user_message = "Some required settings for this tool are missing."

    def __init__(self, operation: str, option: str) -> None:
        self.operation = operation
        self.option = option
        super().__init__(f"Operation '{operation}' requires option '{option}'")


class InvalidOption(PdfEngineError):
    """Raised when an option is present but malformed."""

    category = "invalid-option"
    user_message = "Some settings for this tool are invalid."

    def __init__(self, operation: str, option: str, reason: str) -> None:
        self.operation = operation
        self.option = option
        self.reason = reason
        super().__init__(f"Invalid option '{option}' for '{operation}': {reason}")


class UnknownOperation(PdfEngineError):
    """Raised when the orchestrator receives an unknown operation name."""

    category = "unknown-operation"
    user_message = "This tool is not available."

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Unknown operation: {operation!r}")


class InsufficientInput(PdfEngineError):
    """Raised when an operation does not receive enough usable input."""

    category = "insufficient-input"
    user_message = "Please provide enough files with at least one page."


def describe_error(error: BaseException) -> str:
    """Return the human readable message category for ``error``."""

    if isinstance(error, PdfEngineError):
        return error.user_message
    return PdfEngineError.user_message


__all__ = [
    "PdfEngineError",
    "CorruptDocument",
    "PasswordRequired",
    "WrongPassword",
    "PageIndexOutOfRange",
    "UnsupportedImageFormat",
    "MissingRequiredOption",
    "InvalidOption",
    "UnknownOperation",
    "InsufficientInput",
    "describe_error",
]

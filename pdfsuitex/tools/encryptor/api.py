"""Password protection helpers for the :mod:`pdfsuitex` engine."""

from __future__ import annotations

import io
import logging
from typing import Any, Mapping

from pypdf import PdfReader

from ...core import codec
from ...core.exceptions import CorruptDocument
from ...core.model import Document, EncryptionSpec, PermissionSet, SaveOptions

LOGGER = logging.getLogger("pdfsuitex.security")

SUPPORTED_ALGORITHMS = ("RC4-40", "RC4-128", "AES-128", "AES-256-R5", "AES-256")


def build_encryption_spec(
    password: str,
    *,
    owner_password: str | None = None,
    permissions: PermissionSet | Mapping[str, Any] | None = None,
    algorithm: str | None = None,
) -> EncryptionSpec:
    """Return an :class:`EncryptionSpec` applying the restrictive defaults."""

    if algorithm is not None and algorithm not in SUPPORTED_ALGORITHMS:
        raise ValueError(f"Unsupported encryption algorithm: {algorithm}")
    if permissions is None:
        permission_set = PermissionSet()
    elif isinstance(permissions, PermissionSet):
        permission_set = permissions
    else:
        permission_set = PermissionSet.from_mapping(dict(permissions))
    return EncryptionSpec(
        user_password=password,
        owner_password=owner_password,
        permissions=permission_set,
        algorithm=algorithm,
    )


def is_encrypted(data: bytes) -> bool:
    """Return ``True`` when ``data`` holds an encrypted PDF document."""

    if not data:
        raise CorruptDocument("Input is empty")
    try:
        reader = PdfReader(io.BytesIO(data))
    except Exception as exc:  # pypdf exceptions vary
        raise CorruptDocument("Unable to read PDF") from exc
    return bool(reader.is_encrypted)


def protect(document: Document, spec: EncryptionSpec, *, compact: bool = False) -> bytes:
    """Serialise ``document`` with password-based access control."""

    LOGGER.debug(
        "Encrypting %d page(s) with owner password %s",
        document.page_count,
        "<provided>" if spec.owner_password else "<default>",
    )
    return codec.save(document, SaveOptions(encryption=spec, compact=compact))


def unlock(data: bytes, password: str | None) -> Document:
    """Open ``data`` with ``password`` so it can be re-saved without encryption.

    A document that is not encrypted is returned as loaded: unlocking it is a
    successful no-op rather than an error.

    Raises:
        PasswordRequired: the document is encrypted and no password was given.
        WrongPassword: the password does not open the document.
    """

    if not is_encrypted(data):
        LOGGER.info("Input PDF is not encrypted; passing it through unchanged")
        return codec.load(data)
    document = codec.load(data, password=password)
    LOGGER.debug("Decrypted PDF with %d page(s)", document.page_count)
    return document


__all__ = [
    "SUPPORTED_ALGORITHMS",
    "build_encryption_spec",
    "is_encrypted",
    "protect",
    "unlock",
]

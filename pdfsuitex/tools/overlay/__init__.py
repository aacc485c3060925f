"""Content overlay helpers exposed through the pdfsuitex tools namespace."""

from __future__ import annotations

from .content import (
    SIGNATURE_MARGIN,
    SIGNATURE_SCALE,
    add_image,
    add_ocr_layer,
    add_shape,
    add_signature,
    add_text,
    embed_font,
    images_to_pdf,
)

__all__ = [
    "SIGNATURE_MARGIN",
    "SIGNATURE_SCALE",
    "add_image",
    "add_ocr_layer",
    "add_shape",
    "add_signature",
    "add_text",
    "embed_font",
    "images_to_pdf",
]

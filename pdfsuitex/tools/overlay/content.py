"""Draw new content (text, images, shapes, signatures) onto document pages.

Coordinates are PDF points in the page's own space with the origin at the
bottom-left corner of the visible page box. Instructions are appended to the
page and rendered when the document is saved.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from ...core import codec
from ...core.exceptions import InsufficientInput, PageIndexOutOfRange
from ...core.model import (
    BLACK,
    STANDARD_FONTS,
    Document,
    FontResource,
    ImageInstruction,
    RecognizedText,
    ShapeInstruction,
    TextInstruction,
)
from ...core.render import register_font
from ...core.utils import content_id
from ...core.validator import (
    coerce_color,
    decode_data_url,
    ensure_page_indices,
    inspect_image,
    normalize_image_mime,
)

LOGGER = logging.getLogger("pdfsuitex.overlay")

SIGNATURE_SCALE = 0.5
SIGNATURE_MARGIN = 50.0

# Share of an OCR box height used as font size; the rest is descender room.
_OCR_SIZE_RATIO = 0.8

ColorLike = str | Sequence[float]


def _check_opacity(opacity: float) -> float:
    if not 0.0 <= opacity <= 1.0:
        raise ValueError("opacity must be between 0 and 1")
    return float(opacity)


def embed_font(document: Document, data: bytes, name: str | None = None) -> str:
    """Embed a TrueType font and return the id to use as ``font``."""

    if not data:
        raise ValueError("Font data must not be empty")
    try:
        register_font(content_id("font", data), data)
    except Exception as exc:  # reportlab font parse errors vary
        raise ValueError("Font data is not a usable TrueType font") from exc
    return document.resources.embed_font(data, name).id


def add_text(
    document: Document,
    page_index: int,
    content: str,
    x: float,
    y: float,
    font: str = "Helvetica",
    size: float = 12.0,
    color: ColorLike = BLACK,
    opacity: float = 1.0,
) -> TextInstruction:
    page = document.page(page_index)
    embedded = font in document.resources and isinstance(document.resources.get(font), FontResource)
    if font not in STANDARD_FONTS and not embedded:
        raise ValueError(f"Font {font!r} is neither a standard font nor an embedded font")
    if size <= 0:
        raise ValueError("Font size must be positive")
    instruction = TextInstruction(
        content=str(content),
        x=float(x),
        y=float(y),
        font=font,
        size=float(size),
        color=coerce_color(color),
        opacity=_check_opacity(opacity),
    )
    LOGGER.debug("Adding text at (%s, %s) on page %d", x, y, page_index)
    return page.append(instruction)


def add_image(
    document: Document,
    page_index: int,
    image_bytes: bytes,
    mime_type: str,
    x: float,
    y: float,
    width: float | None = None,
    height: float | None = None,
    opacity: float = 1.0,
) -> ImageInstruction:
    """Place a JPEG or PNG image; missing dimensions follow its natural size."""

    page = document.page(page_index)
    normalize_image_mime(mime_type)
    resource = document.resources.embed_image(image_bytes, mime_type)

    if width is None and height is None:
        width, height = float(resource.width), float(resource.height)
    elif width is None:
        width = float(height) * resource.width / resource.height
    elif height is None:
        height = float(width) * resource.height / resource.width
    if width <= 0 or height <= 0:
        raise ValueError("Image dimensions must be positive")

    instruction = ImageInstruction(
        resource=resource.id,
        x=float(x),
        y=float(y),
        width=float(width),
        height=float(height),
        opacity=_check_opacity(opacity),
    )
    LOGGER.debug("Adding %s image %s on page %d", resource.mime_type, resource.id, page_index)
    return page.append(instruction)


def add_shape(
    document: Document,
    page_index: int,
    kind: str,
    x: float,
    y: float,
    width: float,
    height: float,
    color: ColorLike = BLACK,
    opacity: float = 1.0,
    stroke_width: float = 1.0,
) -> ShapeInstruction:
    page = document.page(page_index)
    instruction = ShapeInstruction(
        shape=kind,
        x=float(x),
        y=float(y),
        width=float(width),
        height=float(height),
        color=coerce_color(color),
        opacity=_check_opacity(opacity),
        stroke_width=float(stroke_width),
    )
    return page.append(instruction)


def add_signature(
    document: Document,
    signature: bytes | str,
    page_index: int | None = None,
    *,
    scale: float = SIGNATURE_SCALE,
    margin: float = SIGNATURE_MARGIN,
) -> ImageInstruction:
    """Stamp a signature image at the bottom-right corner of a page.

    The default page is the last one; the image is scaled to ``scale`` of its
    natural size and kept ``margin`` points away from the right and bottom
    edges. ``signature`` may be raw PNG/JPEG bytes or a base64 data URL.
    """

    data = decode_data_url(signature)
    if page_index is None:
        if document.page_count == 0:
            raise PageIndexOutOfRange([-1], 0)
        page_index = document.page_count - 1
    page = document.page(page_index)
    info = inspect_image(data)

    width = info.width * scale
    height = info.height * scale
    x = page.width - width - margin
    y = margin
    LOGGER.debug("Placing signature on page %d at (%.1f, %.1f)", page_index, x, y)
    return add_image(document, page_index, data, info.mime_type, x, y, width, height)


def add_ocr_layer(
    document: Document,
    recognized: Iterable[RecognizedText],
    *,
    font: str = "Helvetica",
) -> list[TextInstruction]:
    """Overlay invisible, searchable text for runs found by an OCR service."""

    items = list(recognized)
    ensure_page_indices([item.page_index for item in items], document.page_count)

    added: list[TextInstruction] = []
    for item in items:
        if not item.text.strip() or item.height <= 0:
            continue
        size = item.height * _OCR_SIZE_RATIO
        instruction = TextInstruction(
            content=item.text,
            x=float(item.x),
            y=float(item.y + item.height - size),
            font=font,
            size=float(size),
            invisible=True,
        )
        added.append(document.page(item.page_index).append(instruction))
    LOGGER.debug("Added %d OCR text run(s)", len(added))
    return added


def images_to_pdf(images: Iterable[bytes]) -> Document:
    """Build a document with one page per image, sized to the image."""

    document = codec.create()
    for data in images:
        info = inspect_image(data)
        document.add_page(width=info.width, height=info.height)
        add_image(document, document.page_count - 1, data, info.mime_type, 0, 0, info.width, info.height)
    if document.page_count == 0:
        raise InsufficientInput("At least one image is required")
    return document


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

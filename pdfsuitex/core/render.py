"""Render content instructions into a PDF overlay page with reportlab.

The rendered operators are wrapped in a ``/PdfSuiteXOverlay`` marked-content
section so :mod:`pdfsuitex.core.codec` can strip them again when the document
is loaded and the instructions are restored from their private data.
"""

from __future__ import annotations

import io
from typing import Callable

from pypdf import PageObject, PdfReader
from reportlab.lib.colors import Color as RLColor
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen.canvas import Canvas

from .model import (
    STANDARD_FONTS,
    FontResource,
    ImageInstruction,
    ImageResource,
    Page,
    ResourcePool,
    ShapeInstruction,
    TextInstruction,
)
from .utils import get_logger

OVERLAY_TAG = "PdfSuiteXOverlay"

LOGGER = get_logger("pdfsuitex.render")

_HIGHLIGHT_OPACITY = 0.35


def register_font(font_id: str, data: bytes) -> str:
    """Register TrueType ``data`` with reportlab under ``font_id`` (idempotent)."""

    if font_id not in pdfmetrics.getRegisteredFontNames():
        LOGGER.debug("Registering embedded font %s", font_id)
        pdfmetrics.registerFont(TTFont(font_id, io.BytesIO(data)))
    return font_id


def resolve_font(font: str, resources: ResourcePool) -> str:
    """Return the reportlab font name for ``font``, registering embedded fonts."""

    if font in STANDARD_FONTS:
        return font
    resource = resources.get(font)
    if not isinstance(resource, FontResource):
        raise KeyError(f"Resource {font} is not a font")
    return register_font(resource.id, resource.data)


def _draw_text(canvas: Canvas, instruction: TextInstruction, resources: ResourcePool) -> None:
    canvas.setFillAlpha(instruction.opacity)
    text = canvas.beginText(instruction.x, instruction.y)
    text.setFont(resolve_font(instruction.font, resources), instruction.size)
    text.setFillColorRGB(*instruction.color)
    if instruction.invisible:
        text.setTextRenderMode(3)
    for number, line in enumerate(instruction.content.splitlines() or [""]):
        if number:
            text.moveCursor(0, instruction.size * 1.2)
        text.textOut(line)
    canvas.drawText(text)


def _draw_image(canvas: Canvas, instruction: ImageInstruction, resources: ResourcePool) -> None:
    resource = resources.get(instruction.resource)
    if not isinstance(resource, ImageResource):
        raise KeyError(f"Resource {instruction.resource} is not an image")
    canvas.setFillAlpha(instruction.opacity)
    canvas.drawImage(
        ImageReader(io.BytesIO(resource.data)),
        instruction.x,
        instruction.y,
        width=instruction.width,
        height=instruction.height,
        mask="auto",
    )


def _draw_shape(canvas: Canvas, instruction: ShapeInstruction, resources: ResourcePool) -> None:
    color = RLColor(*instruction.color)
    opacity = instruction.opacity
    if instruction.shape == "highlight" and opacity == 1.0:
        opacity = _HIGHLIGHT_OPACITY
    canvas.setStrokeColor(color)
    canvas.setFillColor(color)
    canvas.setStrokeAlpha(opacity)
    canvas.setFillAlpha(opacity)
    canvas.setLineWidth(instruction.stroke_width)

    x, y, width, height = instruction.x, instruction.y, instruction.width, instruction.height
    if instruction.shape == "line":
        canvas.line(x, y, x + width, y + height)
    elif instruction.shape == "ellipse":
        canvas.ellipse(x, y, x + width, y + height, stroke=1, fill=0)
    elif instruction.shape == "rectangle":
        canvas.rect(x, y, width, height, stroke=1, fill=0)
    else:
        canvas.rect(x, y, width, height, stroke=0, fill=1)


_DRAWERS: dict[type, Callable[[Canvas, object, ResourcePool], None]] = {
    TextInstruction: _draw_text,
    ImageInstruction: _draw_image,
    ShapeInstruction: _draw_shape,
}


def render_overlay(page: Page, resources: ResourcePool) -> PageObject:
    """Draw every instruction of ``page`` onto a transparent overlay page."""

    left, bottom = page.origin
    buffer = io.BytesIO()
    canvas = Canvas(
        buffer,
        pagesize=(left + page.width, bottom + page.height),
        invariant=1,
        pageCompression=0,
    )
    canvas.addLiteral(f"/{OVERLAY_TAG} BMC")
    canvas.translate(left, bottom)
    for instruction in page.instructions:
        canvas.saveState()
        _DRAWERS[type(instruction)](canvas, instruction, resources)
        canvas.restoreState()
    canvas.addLiteral("EMC")
    canvas.showPage()
    canvas.save()
    buffer.seek(0)
    return PdfReader(buffer).pages[0]


__all__ = ["OVERLAY_TAG", "register_font", "render_overlay", "resolve_font"]

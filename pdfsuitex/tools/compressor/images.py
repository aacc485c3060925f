"""Helpers used to measure, downsample and re-encode raster images."""

from __future__ import annotations

import io
import logging
import math
from typing import Any

from PIL import Image
from pypdf import PageObject
from pypdf.generic import ContentStream

_LOGGER = logging.getLogger("pdfsuitex.compress")


def effective_dpi(pixel_width: int, pixel_height: int, width_pt: float, height_pt: float) -> float:
    """Return the resolution of an image drawn at ``width_pt`` x ``height_pt``."""

    dpi_x = pixel_width / max(width_pt / 72.0, 1e-6)
    dpi_y = pixel_height / max(height_pt / 72.0, 1e-6)
    return max(dpi_x, dpi_y)


def target_size(size: tuple[int, int], dpi: float, max_dpi: float) -> tuple[int, int]:
    """Scale ``size`` so that an image at ``dpi`` ends up at ``max_dpi``."""

    if dpi <= max_dpi:
        return size
    ratio = max_dpi / dpi
    width, height = size
    return max(1, math.ceil(width * ratio)), max(1, math.ceil(height * ratio))


def has_alpha(image: Image.Image) -> bool:
    return image.mode in {"RGBA", "LA", "PA"} or (image.mode == "P" and "transparency" in image.info)


def downsample(image: Image.Image, size: tuple[int, int]) -> Image.Image:
    if size == image.size:
        return image.copy()
    return image.resize(size, Image.LANCZOS)


def encode(image: Image.Image, quality: float) -> tuple[bytes, str]:
    """Encode ``image`` as JPEG, or as optimised PNG when it has transparency.

    Returns the encoded bytes and their MIME type.
    """

    output = io.BytesIO()
    if has_alpha(image):
        image.convert("RGBA").save(output, format="PNG", optimize=True)
        return output.getvalue(), "image/png"
    if image.mode not in {"RGB", "L"}:
        image = image.convert("RGB")
    image.save(output, format="JPEG", quality=int(round(quality * 100)), optimize=True)
    return output.getvalue(), "image/jpeg"


def prepare_for_pdf(image: Image.Image) -> Image.Image:
    """Return ``image`` in a mode pypdf embeds directly (RGB, L or CMYK)."""

    if image.mode in {"RGB", "L", "CMYK"}:
        return image
    return image.convert("RGB")


Matrix = tuple[float, float, float, float, float, float]

_IDENTITY: Matrix = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)


def _multiply(m: Matrix, n: Matrix) -> Matrix:
    a, b, c, d, e, f = m
    A, B, C, D, E, F = n
    return (
        a * A + b * C,
        a * B + b * D,
        c * A + d * C,
        c * B + d * D,
        e * A + f * C + E,
        e * B + f * D + F,
    )


def _image_references(native: PageObject) -> dict[str, int]:
    resources = native.get("/Resources")
    if resources is None:
        return {}
    xobjects = resources.get_object().get("/XObject")
    if xobjects is None:
        return {}
    references: dict[str, int] = {}
    for name, reference in xobjects.get_object().items():
        idnum = getattr(reference, "idnum", None)
        if idnum is not None and reference.get_object().get("/Subtype") == "/Image":
            references[str(name)] = idnum
    return references


def native_image_placements(native: PageObject) -> dict[int, tuple[float, float]]:
    """Largest drawn size (points) of each image XObject painted by ``native``.

    Keys are object numbers of the image streams. Images drawn only from
    inside form XObjects are not measured.
    """

    references = _image_references(native)
    content: Any = native.get_contents()
    if not references or content is None:
        return {}
    if not isinstance(content, ContentStream):
        content = ContentStream(content, native.pdf)

    placements: dict[int, tuple[float, float]] = {}
    ctm = _IDENTITY
    stack: list[Matrix] = []
    for operands, operator in content.operations:
        if operator == b"q":
            stack.append(ctm)
        elif operator == b"Q":
            ctm = stack.pop() if stack else _IDENTITY
        elif operator == b"cm" and len(operands) == 6:
            ctm = _multiply(tuple(float(value) for value in operands), ctm)  # type: ignore[arg-type]
        elif operator == b"Do" and operands:
            idnum = references.get(str(operands[0]))
            if idnum is None:
                continue
            a, b, c, d, _, _ = ctm
            width, height = math.hypot(a, b), math.hypot(c, d)
            previous = placements.get(idnum, (0.0, 0.0))
            placements[idnum] = (max(previous[0], width), max(previous[1], height))
    return placements


__all__ = [
    "downsample",
    "effective_dpi",
    "encode",
    "has_alpha",
    "native_image_placements",
    "prepare_for_pdf",
    "target_size",
]

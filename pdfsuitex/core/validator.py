"""Validation helpers shared by pdfsuitex tools."""

from __future__ import annotations

import base64
import binascii
import io
from dataclasses import dataclass
from typing import Iterable

from PIL import Image, UnidentifiedImageError

from .exceptions import PageIndexOutOfRange, UnsupportedImageFormat

_MIME_ALIASES = {
    "image/jpeg": "image/jpeg",
    "image/jpg": "image/jpeg",
    "image/pjpeg": "image/jpeg",
    "jpeg": "image/jpeg",
    "jpg": "image/jpeg",
    "image/png": "image/png",
    "png": "image/png",
}

_PIL_FORMATS = {"JPEG": "image/jpeg", "MPO": "image/jpeg", "PNG": "image/png"}


@dataclass(frozen=True, slots=True)
class ImageInfo:
    mime_type: str
    width: int
    height: int
    mode: str


def normalize_image_mime(mime_type: str) -> str:
    """Return the canonical MIME type for a supported raster format."""

    key = (mime_type or "").strip().lower()
    try:
        return _MIME_ALIASES[key]
    except KeyError as exc:
        raise UnsupportedImageFormat(f"Unsupported image format: {mime_type!r}") from exc


def inspect_image(data: bytes) -> ImageInfo:
    """Decode the header of ``data`` and describe the image it contains."""

    if not data:
        raise UnsupportedImageFormat("Image data is empty")
    try:
        with Image.open(io.BytesIO(data)) as image:
            image_format = image.format
            width, height = image.size
            mode = image.mode
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError, EOFError) as exc:
        raise UnsupportedImageFormat("Image data could not be decoded") from exc

    try:
        mime_type = _PIL_FORMATS[image_format or ""]
    except KeyError as exc:
        raise UnsupportedImageFormat(f"Unsupported image format: {image_format}") from exc
    return ImageInfo(mime_type=mime_type, width=width, height=height, mode=mode)


def decode_data_url(value: str | bytes) -> bytes:
    """Return raw bytes for ``value``, decoding ``data:<mime>;base64,`` URLs."""

    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if not value.startswith("data:"):
        raise UnsupportedImageFormat("Expected image bytes or a base64 data URL")
    header, _, payload = value.partition(",")
    if ";base64" not in header:
        raise UnsupportedImageFormat("Only base64 encoded data URLs are supported")
    normalize_image_mime(header[len("data:"):].split(";", 1)[0])
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise UnsupportedImageFormat("Malformed base64 image data") from exc


def ensure_page_indices(indices: Iterable[int], page_count: int) -> list[int]:
    """Validate every index against ``page_count`` before anything is mutated."""

    checked: list[int] = []
    invalid: list[int] = []
    for index in indices:
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(f"Page indices must be integers, got {index!r}")
        if not 0 <= index < page_count:
            invalid.append(index)
        checked.append(index)
    if invalid:
        raise PageIndexOutOfRange(invalid, page_count)
    return checked


def coerce_color(value: object) -> tuple[float, float, float]:
    """Return an RGB tuple in ``[0, 1]`` from ``#RRGGBB``, ``#RGB`` or a sequence."""

    if isinstance(value, str):
        raw = value.strip().lstrip("#")
        if len(raw) == 3:
            raw = "".join(char * 2 for char in raw)
        if len(raw) != 6:
            raise ValueError(f"Invalid color: {value!r}")
        try:
            return tuple(int(raw[offset:offset + 2], 16) / 255.0 for offset in (0, 2, 4))  # type: ignore[return-value]
        except ValueError as exc:
            raise ValueError(f"Invalid color: {value!r}") from exc
    if isinstance(value, (list, tuple)) and len(value) == 3:
        components = tuple(float(component) for component in value)
        if any(component > 1.0 for component in components):
            components = tuple(component / 255.0 for component in components)
        if any(not 0.0 <= component <= 1.0 for component in components):
            raise ValueError(f"Invalid color: {value!r}")
        return components  # type: ignore[return-value]
    raise ValueError(f"Invalid color: {value!r}")


__all__ = [
    "ImageInfo",
    "coerce_color",
    "decode_data_url",
    "ensure_page_indices",
    "inspect_image",
    "normalize_image_mime",
]

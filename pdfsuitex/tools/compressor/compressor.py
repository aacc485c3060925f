"""Compression engine for :mod:`pdfsuitex` documents."""

from __future__ import annotations

import dataclasses
import io
import logging
from datetime import datetime
from typing import Literal

from PIL import Image

from ...core import codec
from ...core.model import Document, ImageInstruction, ImageResource, SaveOptions
from ..pages.operations import extract_pages
from .images import (
    downsample,
    effective_dpi,
    encode,
    has_alpha,
    native_image_placements,
    prepare_for_pdf,
    target_size,
)

_LOGGER = logging.getLogger("pdfsuitex.compress")

CompressionLevelName = Literal["low", "medium", "high"]


@dataclasses.dataclass(frozen=True, slots=True)
class CompressionLevel:
    """Resolution cap, re-encode quality and compaction toggle of one tier."""

    name: CompressionLevelName
    max_dpi: int | None
    quality: float
    compact: bool


@dataclasses.dataclass(slots=True)
class CompressionResult:
    """Represents the measured outcome of a compression run."""

    level: CompressionLevelName
    original_size: int
    compressed_size: int
    images_reencoded: int
    data: bytes = dataclasses.field(repr=False)
    document: Document = dataclasses.field(repr=False)

    @property
    def bytes_saved(self) -> int:
        return max(self.original_size - self.compressed_size, 0)

    @property
    def compression_ratio(self) -> float:
        if self.original_size == 0:
            return 1.0
        return self.compressed_size / self.original_size


COMPRESSION_LEVELS: dict[CompressionLevelName, CompressionLevel] = {
    "low": CompressionLevel("low", max_dpi=None, quality=0.9, compact=False),
    "medium": CompressionLevel("medium", max_dpi=300, quality=0.6, compact=True),
    "high": CompressionLevel("high", max_dpi=150, quality=0.3, compact=True),
}


def get_compression_level(name: str | CompressionLevel) -> CompressionLevel:
    if isinstance(name, CompressionLevel):
        return name
    try:
        return COMPRESSION_LEVELS[name.lower()]  # type: ignore[index]
    except (AttributeError, KeyError) as exc:
        raise ValueError(f"Unknown compression level: {name}") from exc


def _native_placements(document: Document) -> dict[int, tuple[float, float]]:
    sizes: dict[int, tuple[float, float]] = {}
    for index, page in enumerate(document.pages):
        try:
            placements = native_image_placements(page.native)
        except Exception as exc:  # pypdf content stream errors vary
            _LOGGER.warning("Could not measure image placements on page %d: %s", index, exc)
            continue
        for idnum, (width, height) in placements.items():
            previous = sizes.get(idnum, (0.0, 0.0))
            sizes[idnum] = (max(previous[0], width), max(previous[1], height))
    return sizes


def _reencode_native_images(document: Document, max_dpi: int, quality: float) -> int:
    """Downsample images drawn by the pages' own content streams.

    The resolution of each image is measured at the largest size it is drawn
    at; images whose placement cannot be measured are assumed to fill the page.
    """

    placements = _native_placements(document)
    seen: set[int] = set()
    count = 0
    for index, page in enumerate(document.pages):
        native = page.native
        try:
            names = list(native.images.keys())
        except Exception as exc:  # pypdf resource errors vary
            _LOGGER.warning("Skipping images on page %d: %s", index, exc)
            continue
        for name in names:
            try:
                image_file = native.images[name]
                reference = image_file.indirect_reference
                if reference is None or reference.idnum in seen:
                    continue
                seen.add(reference.idnum)
                pil_image = image_file.image
                if pil_image is None or has_alpha(pil_image):
                    continue
                drawn = placements.get(reference.idnum, (page.width, page.height))
                dpi = effective_dpi(pil_image.width, pil_image.height, *drawn)
                size = target_size(pil_image.size, dpi, max_dpi)
                if size == pil_image.size:
                    continue
                resized = prepare_for_pdf(downsample(pil_image, size))
                image_file.replace(resized, quality=int(round(quality * 100)))
            except Exception as exc:  # pypdf/Pillow decode errors vary
                _LOGGER.warning("Could not re-encode image %s on page %d: %s", name, index, exc)
                continue
            _LOGGER.debug("Re-encoded image %s on page %d from %.0f DPI", name, index, dpi)
            count += 1
    return count


def _placements(document: Document) -> dict[str, tuple[float, float]]:
    """Largest drawn size (points) of every pool image."""

    sizes: dict[str, tuple[float, float]] = {}
    for page in document.pages:
        for item in page.instructions:
            if isinstance(item, ImageInstruction):
                width, height = sizes.get(item.resource, (0.0, 0.0))
                sizes[item.resource] = (max(width, item.width), max(height, item.height))
    return sizes


def _reencode_pool_images(document: Document, max_dpi: int, quality: float) -> int:
    """Downsample overlay images to the resolution they are drawn at."""

    placements = _placements(document)
    count = 0
    for resource in document.resources.images():
        placed = placements.get(resource.id)
        if placed is None:
            continue
        dpi = effective_dpi(resource.width, resource.height, *placed)
        size = target_size((resource.width, resource.height), dpi, max_dpi)
        if size == (resource.width, resource.height):
            continue
        try:
            with Image.open(io.BytesIO(resource.data)) as image:
                image.load()
                data, mime_type = encode(downsample(image, size), quality)
        except (OSError, ValueError) as exc:
            _LOGGER.warning("Could not re-encode image resource %s: %s", resource.id, exc)
            continue
        if len(data) >= len(resource.data):
            _LOGGER.debug("Keeping image resource %s; re-encoding did not shrink it", resource.id)
            continue
        document.resources.replace(ImageResource(resource.id, data, mime_type, size[0], size[1]))
        _LOGGER.debug(
            "Re-encoded image resource %s from %dx%d to %dx%d",
            resource.id,
            resource.width,
            resource.height,
            size[0],
            size[1],
        )
        count += 1
    return count


def compress_document(
    document: Document,
    level: CompressionLevelName | CompressionLevel = "medium",
    *,
    timestamp: datetime | None = None,
) -> CompressionResult:
    """Compress ``document`` according to ``level`` and report measured sizes.

    The input document is left untouched; the result carries the compressed
    copy and its serialised bytes. Output that does not shrink is reported as
    is. ``original_size`` is the byte length of the input the document was
    loaded from, so edits made after loading are not reflected in it;
    documents built in memory are measured with a plain save.
    """

    tier = get_compression_level(level)
    if document.source_size is not None:
        original_size = document.source_size
    else:
        original_size = len(codec.save(document, timestamp=timestamp))

    working = extract_pages(document, range(document.page_count))
    reencoded = 0
    if tier.max_dpi is not None:
        reencoded += _reencode_native_images(working, tier.max_dpi, tier.quality)
        reencoded += _reencode_pool_images(working, tier.max_dpi, tier.quality)

    data = codec.save(working, SaveOptions(compact=tier.compact, timestamp=timestamp))
    result = CompressionResult(
        level=tier.name,
        original_size=original_size,
        compressed_size=len(data),
        images_reencoded=reencoded,
        data=data,
        document=working,
    )
    if result.compressed_size >= result.original_size:
        _LOGGER.warning(
            "Compression at level %s did not reduce size (%d -> %d bytes)",
            tier.name,
            result.original_size,
            result.compressed_size,
        )
    else:
        _LOGGER.info(
            "Compressed document at level %s: %d -> %d bytes (%d image(s) re-encoded)",
            tier.name,
            result.original_size,
            result.compressed_size,
            reencoded,
        )
    return result


__all__ = [
    "COMPRESSION_LEVELS",
    "CompressionLevel",
    "CompressionLevelName",
    "CompressionResult",
    "compress_document",
    "get_compression_level",
]

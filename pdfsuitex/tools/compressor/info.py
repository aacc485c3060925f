"""Information utilities for the :mod:`pdfsuitex.tools.compressor` package."""

from __future__ import annotations

import dataclasses
import logging

from ...core import codec
from ...core.model import Document, ImageInstruction
from .images import effective_dpi, native_image_placements

_LOGGER = logging.getLogger("pdfsuitex.compress")


@dataclasses.dataclass(slots=True)
class CompressionInfo:
    """Describes metrics about a document relevant for compression."""

    file_size_bytes: int
    image_count: int
    average_image_dpi: float | None


def _estimate_image_dpi(document: Document) -> tuple[int, float | None]:
    image_count = 0
    dpi_values: list[float] = []

    for page in document.pages:
        try:
            images = list(page.native.images)
            placements = native_image_placements(page.native)
        except Exception:  # pragma: no cover - undecodable image guard
            images, placements = [], {}
        for image in images:
            image_count += 1
            pil_image = image.image
            if pil_image is None:
                continue
            reference = image.indirect_reference
            drawn = placements.get(reference.idnum) if reference is not None else None
            width, height = drawn or (page.width, page.height)
            dpi_values.append(effective_dpi(pil_image.width, pil_image.height, width, height))

        for item in page.instructions:
            if not isinstance(item, ImageInstruction):
                continue
            image_count += 1
            resource = document.resources.get(item.resource)
            dpi_values.append(effective_dpi(resource.width, resource.height, item.width, item.height))

    average_dpi = sum(dpi_values) / len(dpi_values) if dpi_values else None
    return image_count, average_dpi


def get_compression_info(document: Document) -> CompressionInfo:
    """Return :class:`CompressionInfo` for ``document``."""

    if document.source_size is not None:
        file_size = document.source_size
    else:
        file_size = len(codec.save(document))
    image_count, average_dpi = _estimate_image_dpi(document)

    info = CompressionInfo(
        file_size_bytes=file_size,
        image_count=image_count,
        average_image_dpi=average_dpi,
    )
    _LOGGER.debug("Compression info: %s", info)
    return info


__all__ = ["CompressionInfo", "get_compression_info"]

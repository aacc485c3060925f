"""Structural page edits: copy, remove, extract, rotate, reorder, merge, split.

Every page-index operation validates all requested indices before touching
any document, so an out-of-range index leaves source and target unchanged.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Iterable, Sequence

from ...core import codec
from ...core.exceptions import InsufficientInput
from ...core.model import ContentInstruction, Document, ImageInstruction, Page, TextInstruction
from ...core.validator import ensure_page_indices
from .utils import PageRange, parse_page_ranges

LOGGER = logging.getLogger("pdfsuitex.pages")


def _relink(instruction: ContentInstruction, source: Document, target: Document) -> ContentInstruction:
    if source is target:
        return instruction
    if isinstance(instruction, ImageInstruction):
        resource_id = target.resources.adopt(source.resources.get(instruction.resource))
        if resource_id != instruction.resource:
            return dataclasses.replace(instruction, resource=resource_id)
    elif isinstance(instruction, TextInstruction) and instruction.font in source.resources:
        resource_id = target.resources.adopt(source.resources.get(instruction.font))
        if resource_id != instruction.font:
            return dataclasses.replace(instruction, font=resource_id)
    return instruction


def copy_pages(source: Document, page_indices: Iterable[int], target: Document) -> list[Page]:
    """Append copies of ``source`` pages (in the given order) to ``target``.

    Native content is cloned into the target's object store and every font or
    image the copied instructions use is re-embedded into the target's
    resource pool. Raises :class:`PageIndexOutOfRange` without modifying
    ``target`` when any index is invalid.
    """

    indices = ensure_page_indices(page_indices, source.page_count)
    originals = [source.page(index) for index in indices]

    natives = [
        page.native if source is target else target.adopt_native_page(page.native)
        for page in originals
    ]
    copies = [
        Page(
            native,
            rotation=page.rotation,
            instructions=[_relink(item, source, target) for item in page.instructions],
        )
        for page, native in zip(originals, natives)
    ]
    for page in copies:
        target.attach_page(page)

    LOGGER.debug("Copied page(s) %s into a document now holding %d page(s)", indices, target.page_count)
    return copies


def remove_pages(document: Document, page_indices: Iterable[int]) -> None:
    """Remove every page whose original index is in ``page_indices``."""

    doomed = set(ensure_page_indices(page_indices, document.page_count))
    if not doomed:
        return
    document.set_pages([page for index, page in enumerate(document.pages) if index not in doomed])
    LOGGER.debug("Removed page(s) %s; %d page(s) remain", sorted(doomed), document.page_count)


def extract_pages(document: Document, page_indices: Iterable[int]) -> Document:
    """Return a new document holding copies of the selected pages."""

    extracted = codec.create()
    extracted.metadata = dict(document.metadata)
    copy_pages(document, page_indices, extracted)
    return extracted


def rotate_pages(document: Document, page_indices: Iterable[int] | None, degrees: int) -> None:
    """Rotate the selected pages (all pages for ``None``) by ``degrees``."""

    if isinstance(degrees, bool) or not isinstance(degrees, int) or degrees % 90:
        raise ValueError(f"Rotation must be a multiple of 90 degrees, got {degrees!r}")
    if page_indices is None:
        indices = list(range(document.page_count))
    else:
        indices = list(dict.fromkeys(ensure_page_indices(page_indices, document.page_count)))
    for index in indices:
        document.page(index).rotate(degrees)
    LOGGER.debug("Rotated page(s) %s by %d degrees", indices, degrees)


def reorder_pages(document: Document, order: Sequence[int]) -> None:
    """Reorder pages so that new position ``i`` holds original page ``order[i]``."""

    indices = ensure_page_indices(order, document.page_count)
    if sorted(indices) != list(range(document.page_count)):
        raise ValueError("Page order must list every page exactly once")
    pages = document.pages
    document.set_pages([pages[index] for index in indices])


def merge_documents(documents: Iterable[Document]) -> Document:
    """Concatenate ``documents`` in the given order into a new document."""

    sources = list(documents)
    if len(sources) < 2:
        raise InsufficientInput("Merging requires at least two documents")
    if sum(document.page_count for document in sources) == 0:
        raise InsufficientInput("Merging requires at least one page")

    merged = codec.create()
    merged.metadata = dict(sources[0].metadata)
    for position, document in enumerate(sources):
        LOGGER.debug("Adding %d page(s) from input %d", document.page_count, position)
        copy_pages(document, range(document.page_count), merged)

    LOGGER.info("Merged %d documents into %d page(s)", len(sources), merged.page_count)
    return merged


def split_document(
    document: Document,
    ranges: str | Sequence[object] | None = None,
) -> list[tuple[PageRange, Document]]:
    """Split ``document`` into one new document per page range."""

    page_ranges = parse_page_ranges(ranges, total_pages=document.page_count)
    parts = [(page_range, extract_pages(document, page_range.indices())) for page_range in page_ranges]
    LOGGER.debug("Split document into %d part(s)", len(parts))
    return parts


__all__ = [
    "copy_pages",
    "remove_pages",
    "extract_pages",
    "rotate_pages",
    "reorder_pages",
    "merge_documents",
    "split_document",
]

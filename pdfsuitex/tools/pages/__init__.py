"""Page-structure operations exposed through the pdfsuitex tools namespace."""

from __future__ import annotations

from .operations import (
    copy_pages,
    extract_pages,
    merge_documents,
    remove_pages,
    reorder_pages,
    rotate_pages,
    split_document,
)
from .utils import PageRange, build_output_filename, parse_page_ranges

__all__ = [
    "copy_pages",
    "extract_pages",
    "merge_documents",
    "remove_pages",
    "reorder_pages",
    "rotate_pages",
    "split_document",
    "PageRange",
    "build_output_filename",
    "parse_page_ranges",
]

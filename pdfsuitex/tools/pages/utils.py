"""Utility helpers for :mod:`pdfsuitex.tools.pages`."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath
from typing import Iterable, Iterator, List, Sequence

from ...core.exceptions import PageIndexOutOfRange


@dataclass(frozen=True)
class PageRange:
    """Represents an inclusive, zero-based page range."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < 0:
            raise ValueError("Page indices must not be negative")
        if self.start > self.end:
            raise ValueError("Page range start must be less than or equal to end")

    def indices(self) -> list[int]:
        return list(range(self.start, self.end + 1))

    def label(self) -> str:
        """Return a human-readable, one-based label for the range."""

        if self.start == self.end:
            return f"page_{self.start + 1}"
        return f"pages_{self.start + 1}-{self.end + 1}"


def _range_tokens(ranges: Iterable[object]) -> Iterator[str | PageRange]:
    for item in ranges:
        if isinstance(item, PageRange):
            yield item
        elif isinstance(item, str):
            yield from (token.strip() for token in item.split(",") if token.strip())
        elif isinstance(item, Sequence) and len(item) == 2:
            yield PageRange(int(item[0]), int(item[1]))
        elif isinstance(item, int) and not isinstance(item, bool):
            yield PageRange(item, item)
        else:
            raise ValueError(f"Invalid page range: {item!r}")


def _parse_token(token: str) -> PageRange:
    """Parse a one-based ``"2-4"`` or ``"7"`` token into a zero-based range."""

    if "-" in token:
        start_str, end_str = token.split("-", 1)
    else:
        start_str = end_str = token
    try:
        start, end = int(start_str), int(end_str)
    except ValueError as exc:
        raise ValueError(f"Invalid page range: {token!r}") from exc
    if start < 1 or end < 1:
        raise ValueError(f"Page numbers start at 1: {token!r}")
    return PageRange(start - 1, end - 1)


def parse_page_ranges(
    ranges: str | Sequence[object] | None,
    *,
    total_pages: int,
) -> List[PageRange]:
    """Parse ``ranges`` into a list of :class:`PageRange` instances.

    Args:
        ranges: Either a comma-separated string of one-based page numbers and
            ranges as users type them (``"1-3,5"``), or a sequence of
            zero-based :class:`PageRange` objects, ``(start, end)`` pairs or
            single indices. ``None`` selects every page on its own.
        total_pages: Total number of pages in the source document, used to
            validate the resulting ranges.

    Raises:
        ValueError: If the ranges cannot be parsed.
        PageIndexOutOfRange: If a range ends past the last page.

    Returns:
        A list of :class:`PageRange` objects in the order they were supplied.
    """

    if ranges is None:
        return [PageRange(index, index) for index in range(total_pages)]

    if isinstance(ranges, str):
        parsed = [_parse_token(token.strip()) for token in ranges.split(",") if token.strip()]
    elif isinstance(ranges, Sequence):
        parsed = [
            token if isinstance(token, PageRange) else _parse_token(token)
            for token in _range_tokens(ranges)
        ]
    else:
        raise ValueError(f"Invalid page ranges: {ranges!r}")

    if not parsed:
        raise ValueError(f"No page ranges provided: {ranges!r}")

    out_of_range = [page_range.end for page_range in parsed if page_range.end >= total_pages]
    if out_of_range:
        raise PageIndexOutOfRange(out_of_range, total_pages)
    return parsed


def build_output_filename(base_name: str, part: PageRange | int) -> str:
    """Construct a filename component for a split PDF output."""

    safe_base = PurePath(base_name).stem.replace(" ", "_") or "document"
    if isinstance(part, PageRange):
        suffix = part.label()
    else:
        suffix = f"page_{part + 1}"
    return f"{safe_base}_{suffix}.pdf"


__all__ = ["PageRange", "parse_page_ranges", "build_output_filename"]

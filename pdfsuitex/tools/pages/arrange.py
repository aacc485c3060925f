"""Plugins exposing page rotation and removal through the registry."""

from __future__ import annotations

from ...core.exceptions import InvalidOption
from ...core.model import OperationResult
from ...core.utils import get_logger
from ...core.validator import ensure_page_indices
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool
from .operations import remove_pages, rotate_pages

LOGGER = get_logger("pdfsuitex.tools.pages")


@register_tool("rotate-pdf")
class RotateTool(BaseTool):
    name = "rotate-pdf"

    def run(self) -> OperationResult:
        document = self.context.load()
        request = self.request
        LOGGER.debug("Rotating pages %s by %d degrees", request.page_indices or "all", request.degrees)
        rotate_pages(document, request.page_indices, request.degrees)
        return self.pdf_result(document)


@register_tool("delete-pages")
class DeletePagesTool(BaseTool):
    name = "delete-pages"

    def run(self) -> OperationResult:
        document = self.context.load()
        doomed = set(ensure_page_indices(self.request.page_indices, document.page_count))
        if doomed and len(doomed) == document.page_count:
            raise InvalidOption(self.name, "page_indices", "at least one page must remain")
        remove_pages(document, doomed)
        return self.pdf_result(document, removed=sorted(doomed))

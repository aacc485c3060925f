"""Plugin building a PDF from JPEG/PNG images."""

from __future__ import annotations

from ...core.model import OperationResult
from ...core.utils import get_logger
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool
from .content import images_to_pdf

LOGGER = get_logger("pdfsuitex.tools.convert")


@register_tool("jpg-to-pdf")
class ImagesToPdfTool(BaseTool):
    name = "jpg-to-pdf"

    def run(self) -> OperationResult:
        images = [item.data for item in self.context.inputs]
        LOGGER.debug("Converting %d image(s) to PDF", len(images))
        return self.pdf_result(images_to_pdf(images))

"""Plugin exposing signature stamping through the registry."""

from __future__ import annotations

from ...core.model import OperationResult
from ...core.utils import get_logger
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool
from .content import add_signature

LOGGER = get_logger("pdfsuitex.tools.sign")


@register_tool("sign-pdf")
class SignTool(BaseTool):
    name = "sign-pdf"

    def run(self) -> OperationResult:
        context = self.context
        document = context.load()
        request = self.request
        instruction = add_signature(
            document,
            request.signature_image,
            request.page_index,
            scale=context.config.signature_scale,
            margin=context.config.signature_margin,
        )
        page_index = request.page_index if request.page_index is not None else document.page_count - 1
        LOGGER.debug("Signed page %d at (%.1f, %.1f)", page_index, instruction.x, instruction.y)
        return self.pdf_result(document, page_index=page_index)

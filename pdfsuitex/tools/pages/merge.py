"""Plugin exposing document merging through the registry."""

from __future__ import annotations

from ...core import codec
from ...core.model import OperationResult
from ...core.utils import get_logger
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool
from .operations import merge_documents

LOGGER = get_logger("pdfsuitex.tools.merge")

MERGED_FILENAME = "merged.pdf"


@register_tool("merge-pdf")
class MergeTool(BaseTool):
    name = "merge-pdf"
    min_inputs = 2

    def run(self) -> OperationResult:
        context = self.context
        documents = context.load_all()
        LOGGER.debug("Merging %d input(s)", len(documents))
        merged = merge_documents(documents)
        result = OperationResult(
            data=codec.save(merged),
            filename=MERGED_FILENAME,
            details={"page_count": merged.page_count, "input_count": len(documents)},
        )
        context.resources["result"] = result
        return result

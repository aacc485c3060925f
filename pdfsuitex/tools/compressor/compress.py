"""Plugin exposing compression helper through the registry."""

from __future__ import annotations

from ...core.model import OperationResult
from ...core.utils import get_logger
from ..common.interfaces import BaseTool, output_filename
from ..common.pipeline import register_tool
from .compressor import compress_document

LOGGER = get_logger("pdfsuitex.tools.compress")


@register_tool("compress-pdf")
class CompressTool(BaseTool):
    name = "compress-pdf"

    def run(self) -> OperationResult:
        context = self.context
        document = context.load()
        level = self.request.tier
        LOGGER.debug("Compressing %s with level %s", context.primary_name or "<input>", level)
        compressed = compress_document(document, level)
        result = OperationResult(
            data=compressed.data,
            filename=output_filename(self.name, context.primary_name),
            details={
                "page_count": compressed.document.page_count,
                "tier": compressed.level,
                "original_size": compressed.original_size,
                "compressed_size": compressed.compressed_size,
                "bytes_saved": compressed.bytes_saved,
                "compression_ratio": compressed.compression_ratio,
                "images_reencoded": compressed.images_reencoded,
            },
        )
        context.resources["result"] = result
        return result

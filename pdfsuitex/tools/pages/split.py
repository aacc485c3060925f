"""Plugins exposing split and extract utilities through the registry."""

from __future__ import annotations

import io
import zipfile

from ...core import codec
from ...core.exceptions import InvalidOption
from ...core.model import OperationResult
from ...core.utils import get_logger
from ..common.interfaces import BaseTool, output_filename
from ..common.pipeline import register_tool
from .operations import extract_pages, split_document
from .utils import build_output_filename

LOGGER = get_logger("pdfsuitex.tools.split")

ZIP_MIME_TYPE = "application/zip"

# Fixed member timestamp so identical input gives identical archives.
_ZIP_DATE = (1980, 1, 1, 0, 0, 0)


@register_tool("split-pdf")
class SplitTool(BaseTool):
    name = "split-pdf"

    def run(self) -> OperationResult:
        context = self.context
        document = context.load()
        ranges = self.request.ranges
        try:
            parts = split_document(document, ranges)
        except ValueError as exc:
            raise InvalidOption(self.name, "ranges", str(exc)) from exc

        base_name = context.primary_name or "document"
        buffer = io.BytesIO()
        names: list[str] = []
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for page_range, part in parts:
                member = build_output_filename(base_name, page_range)
                LOGGER.debug("Writing pages %s-%s to %s", page_range.start, page_range.end, member)
                info = zipfile.ZipInfo(member, date_time=_ZIP_DATE)
                info.compress_type = zipfile.ZIP_DEFLATED
                archive.writestr(info, codec.save(part))
                names.append(member)

        result = OperationResult(
            data=buffer.getvalue(),
            filename=output_filename(self.name, context.primary_name, suffix=".zip"),
            mime_type=ZIP_MIME_TYPE,
            details={"parts": names},
        )
        context.resources["result"] = result
        return result


@register_tool("extract-pages")
class ExtractTool(BaseTool):
    name = "extract-pages"

    def run(self) -> OperationResult:
        document = self.context.load()
        indices = self.request.page_indices
        LOGGER.debug("Extracting pages %s", list(indices))
        return self.pdf_result(extract_pages(document, indices))

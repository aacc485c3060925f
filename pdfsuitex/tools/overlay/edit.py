"""Plugins exposing page editing and OCR text layers through the registry."""

from __future__ import annotations

from ...core.exceptions import InvalidOption
from ...core.model import BLACK, Document, OperationResult
from ...core.utils import get_logger
from ...core.validator import ensure_page_indices, inspect_image
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool
from ..common.requests import Edit
from .content import add_image, add_ocr_layer, add_shape, add_text

LOGGER = get_logger("pdfsuitex.tools.edit")


@register_tool("edit-pdf")
class EditTool(BaseTool):
    name = "edit-pdf"

    def run(self) -> OperationResult:
        context = self.context
        document = context.load()
        edits: tuple[Edit, ...] = self.request.edits
        ensure_page_indices([edit.page_index for edit in edits], document.page_count)
        for position, edit in enumerate(edits):
            try:
                self._apply(document, edit)
            except ValueError as exc:
                raise InvalidOption(self.name, f"edits[{position}]", str(exc)) from exc
        LOGGER.debug("Applied %d edit(s)", len(edits))
        return self.pdf_result(document, edits=len(edits))

    def _apply(self, document: Document, edit: Edit) -> None:
        config = self.context.config
        color = edit.color if edit.color is not None else BLACK
        if edit.type == "text":
            add_text(
                document,
                edit.page_index,
                edit.content,
                edit.x,
                edit.y,
                font=edit.font or config.default_font,
                size=edit.size or config.default_font_size,
                color=color,
                opacity=edit.opacity,
            )
        elif edit.type == "image":
            mime_type = edit.mime_type or inspect_image(edit.content).mime_type
            add_image(
                document,
                edit.page_index,
                edit.content,
                mime_type,
                edit.x,
                edit.y,
                edit.width,
                edit.height,
                opacity=edit.opacity,
            )
        else:
            add_shape(
                document,
                edit.page_index,
                edit.shape,
                edit.x,
                edit.y,
                edit.width,
                edit.height,
                color=color,
                opacity=edit.opacity,
            )


@register_tool("pdf-ocr")
class OcrTool(BaseTool):
    name = "pdf-ocr"

    def run(self) -> OperationResult:
        context = self.context
        document = context.load()
        added = add_ocr_layer(document, self.request.recognized, font=context.config.ocr_font)
        return self.pdf_result(document, text_runs=len(added))

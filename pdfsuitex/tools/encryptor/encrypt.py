"""Plugins exposing PDF encryption utilities."""

from __future__ import annotations

from ...core import codec
from ...core.model import OperationResult
from ...core.utils import get_logger
from ..common.interfaces import BaseTool, output_filename
from ..common.pipeline import register_tool
from .api import build_encryption_spec, protect, unlock

LOGGER = get_logger("pdfsuitex.tools.encrypt")


@register_tool("protect-pdf")
class ProtectTool(BaseTool):
    name = "protect-pdf"

    def run(self) -> OperationResult:
        context = self.context
        request = self.request
        document = context.load()
        spec = build_encryption_spec(
            request.password,
            owner_password=request.owner_password,
            permissions=request.permissions,
            algorithm=request.algorithm,
        )
        LOGGER.debug(
            "Encrypting %s with owner password %s",
            context.primary_name or "<input>",
            "<provided>" if request.owner_password else "<default>",
        )
        result = OperationResult(
            data=protect(document, spec),
            filename=output_filename(self.name, context.primary_name),
            details={"page_count": document.page_count, "algorithm": request.algorithm or "RC4-128"},
        )
        context.resources["result"] = result
        return result


@register_tool("unlock-pdf")
class UnlockTool(BaseTool):
    name = "unlock-pdf"

    def run(self) -> OperationResult:
        context = self.context
        document = unlock(context.inputs[0].data, self.request.password)
        LOGGER.debug("Decrypting %s", context.primary_name or "<input>")
        result = OperationResult(
            data=codec.save(document),
            filename=output_filename(self.name, context.primary_name),
            details={"page_count": document.page_count, "was_encrypted": document.was_encrypted},
        )
        context.resources["result"] = result
        return result

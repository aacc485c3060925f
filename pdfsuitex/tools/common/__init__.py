"""Shared interfaces, registry and request types for pdfsuitex tools."""

from __future__ import annotations

from .interfaces import BaseTool, InputFile, OperationContext, output_filename
from .pipeline import ToolRegistry, register_tool, registry
from .requests import REQUEST_TYPES, OperationRequest, parse_request

__all__ = [
    "BaseTool",
    "InputFile",
    "OperationContext",
    "OperationRequest",
    "REQUEST_TYPES",
    "ToolRegistry",
    "output_filename",
    "parse_request",
    "register_tool",
    "registry",
]

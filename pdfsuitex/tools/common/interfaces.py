"""Core interfaces and context objects shared by pdfsuitex tools."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePath
from typing import TYPE_CHECKING, Any

from ...core import codec
from ...core.config import DEFAULT_CONFIG, EngineConfig
from ...core.model import Document, OperationResult

if TYPE_CHECKING:
    from .requests import OperationRequest


@dataclass(frozen=True)
class InputFile:
    """One input of an operation: raw bytes plus the name the user gave it."""

    data: bytes = field(repr=False)
    name: str | None = None


@dataclass
class OperationContext:
    """Holds shared execution state for a tool invocation."""

    inputs: list[InputFile] = field(default_factory=list)
    request: "OperationRequest | None" = None
    config: EngineConfig = DEFAULT_CONFIG
    resources: dict[str, Any] = field(default_factory=dict)

    @property
    def primary_name(self) -> str | None:
        return self.inputs[0].name if self.inputs else None

    def load(self, index: int = 0, *, password: str | None = None) -> Document:
        if not 0 <= index < len(self.inputs):
            raise ValueError(f"OperationContext has no input at position {index}")
        document = codec.load(self.inputs[index].data, password=password)
        self.resources.setdefault("documents", {})[index] = document
        return document

    def load_all(self) -> list[Document]:
        return [self.load(index) for index in range(len(self.inputs))]


def output_filename(operation: str, name: str | None, suffix: str = ".pdf") -> str:
    """Return ``"{operation}-{name}"`` with ``suffix`` forced on the name."""

    if not name:
        return f"{operation}-result{suffix}"
    stem = PurePath(name).stem or "result"
    return f"{operation}-{stem}{suffix}"


class BaseTool:
    """Base class for all pluggable pdfsuitex tools."""

    name: str
    min_inputs: int = 1

    def __init__(self, context: OperationContext) -> None:
        self.context = context

    @property
    def request(self) -> Any:
        if self.context.request is None:
            raise ValueError(f"Tool '{self.name}' was invoked without a parsed request")
        return self.context.request

    def pdf_result(self, document: Document, **details: Any) -> OperationResult:
        """Serialise ``document`` into the tool's default PDF output."""

        data = codec.save(document)
        details.setdefault("page_count", document.page_count)
        result = OperationResult(
            data=data,
            filename=output_filename(self.name, self.context.primary_name),
            details=details,
        )
        self.context.resources["result"] = result
        return result

    def run(self) -> OperationResult:  # pragma: no cover - to be implemented by subclasses
        raise NotImplementedError


__all__ = ["BaseTool", "InputFile", "OperationContext", "output_filename"]

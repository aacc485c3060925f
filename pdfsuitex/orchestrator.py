"""Single entry point dispatching named operations to the registered tools.

``apply`` validates the operation name, parses its options into a typed
request, checks input cardinality and only then runs the tool. Errors
propagate unchanged; there are no retries and no partial output.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from .core.config import DEFAULT_CONFIG, EngineConfig
from .core.exceptions import InsufficientInput, UnknownOperation
from .core.model import OperationResult
from .core.utils import configure_logging, get_logger
from .tools import load_builtin_plugins
from .tools.common.interfaces import InputFile, OperationContext
from .tools.common.pipeline import registry
from .tools.common.requests import REQUEST_TYPES, parse_request

LOGGER = get_logger("pdfsuitex.orchestrator")

OPERATIONS = tuple(sorted(REQUEST_TYPES))

InputLike = InputFile | bytes | bytearray


def _as_inputs(inputs: InputLike | Iterable[InputLike]) -> list[InputFile]:
    if isinstance(inputs, (InputFile, bytes, bytearray)):
        inputs = [inputs]
    files: list[InputFile] = []
    for item in inputs:
        if isinstance(item, InputFile):
            files.append(item)
        elif isinstance(item, (bytes, bytearray)):
            files.append(InputFile(bytes(item)))
        else:
            raise TypeError(f"Inputs must be bytes or InputFile objects, got {type(item).__name__}")
    return files


def apply(
    operation: str,
    inputs: InputLike | Iterable[InputLike],
    options: Mapping[str, Any] | None = None,
    *,
    config: EngineConfig | None = None,
) -> OperationResult:
    """Run ``operation`` on ``inputs`` and return its serialised output.

    Args:
        operation: One of :data:`OPERATIONS` (``"merge-pdf"``, ``"sign-pdf"``, ...).
        inputs: Ordered input files; raw bytes are wrapped into :class:`InputFile`.
        options: Operation options, validated into a typed request before any
            document is read.
        config: Engine defaults; :data:`DEFAULT_CONFIG` when omitted.

    Raises:
        UnknownOperation: ``operation`` is not registered.
        MissingRequiredOption: a required option is absent.
        InvalidOption: an option is malformed.
        InsufficientInput: too few inputs for ``operation``.
    """

    config = config or DEFAULT_CONFIG
    configure_logging(config.logging_level)
    load_builtin_plugins()

    tool_class = registry.get(operation)
    if tool_class is None:
        raise UnknownOperation(operation)
    request = parse_request(operation, options, config)

    files = _as_inputs(inputs)
    if len(files) < tool_class.min_inputs:
        raise InsufficientInput(
            f"Operation '{operation}' needs at least {tool_class.min_inputs} input(s), got {len(files)}"
        )

    context = OperationContext(inputs=files, request=request, config=config)
    LOGGER.debug("Dispatching %s with %d input(s)", operation, len(files))
    result = registry.create(operation, context).run()
    LOGGER.info("%s produced %s (%d bytes)", operation, result.filename, result.size)
    return result


__all__ = ["OPERATIONS", "apply"]

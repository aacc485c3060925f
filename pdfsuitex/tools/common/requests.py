"""Typed operation requests validated before an operation is dispatched.

Each orchestrator operation has one frozen request dataclass. Options arrive
as a loose mapping (snake_case keys, camelCase aliases accepted) and are
turned into exactly one request by :func:`parse_request`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Mapping, Sequence, Union

from ...core.config import DEFAULT_CONFIG, EngineConfig
from ...core.exceptions import InvalidOption, MissingRequiredOption, UnknownOperation
from ...core.model import SHAPE_KINDS, STANDARD_FONTS, PermissionSet, RecognizedText
from ...core.validator import coerce_color, decode_data_url
from ..compressor.compressor import COMPRESSION_LEVELS
from ..encryptor.api import SUPPORTED_ALGORITHMS

_MISSING = object()

EDIT_TYPES = frozenset({"text", "image", "shape", "highlight"})


@dataclass(frozen=True, slots=True)
class CompressRequest:
    operation: ClassVar[str] = "compress-pdf"
    tier: str = "medium"


@dataclass(frozen=True, slots=True)
class MergeRequest:
    operation: ClassVar[str] = "merge-pdf"


@dataclass(frozen=True, slots=True)
class SplitRequest:
    operation: ClassVar[str] = "split-pdf"
    ranges: str | tuple[Any, ...] | None = None


@dataclass(frozen=True, slots=True)
class RotateRequest:
    operation: ClassVar[str] = "rotate-pdf"
    degrees: int
    page_indices: tuple[int, ...] | None = None


@dataclass(frozen=True, slots=True)
class DeletePagesRequest:
    operation: ClassVar[str] = "delete-pages"
    page_indices: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class ExtractPagesRequest:
    operation: ClassVar[str] = "extract-pages"
    page_indices: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class ProtectRequest:
    operation: ClassVar[str] = "protect-pdf"
    password: str
    owner_password: str | None = None
    permissions: PermissionSet = field(default_factory=PermissionSet)
    algorithm: str | None = None


@dataclass(frozen=True, slots=True)
class UnlockRequest:
    operation: ClassVar[str] = "unlock-pdf"
    password: str


@dataclass(frozen=True, slots=True)
class SignRequest:
    operation: ClassVar[str] = "sign-pdf"
    signature_image: bytes = field(repr=False)
    page_index: int | None = None


@dataclass(frozen=True, slots=True)
class Edit:
    """One entry of an ``edit-pdf`` request."""

    type: str
    page_index: int
    x: float
    y: float
    content: str | bytes | None = field(default=None, repr=False)
    width: float | None = None
    height: float | None = None
    size: float | None = None
    color: tuple[float, float, float] | None = None
    opacity: float = 1.0
    font: str | None = None
    mime_type: str | None = None
    shape: str = "rectangle"


@dataclass(frozen=True, slots=True)
class EditRequest:
    operation: ClassVar[str] = "edit-pdf"
    edits: tuple[Edit, ...]


@dataclass(frozen=True, slots=True)
class OcrRequest:
    operation: ClassVar[str] = "pdf-ocr"
    recognized: tuple[RecognizedText, ...]


@dataclass(frozen=True, slots=True)
class ImagesToPdfRequest:
    operation: ClassVar[str] = "jpg-to-pdf"


OperationRequest = Union[
    CompressRequest,
    MergeRequest,
    SplitRequest,
    RotateRequest,
    DeletePagesRequest,
    ExtractPagesRequest,
    ProtectRequest,
    UnlockRequest,
    SignRequest,
    EditRequest,
    OcrRequest,
    ImagesToPdfRequest,
]

REQUEST_TYPES: dict[str, type] = {
    cls.operation: cls
    for cls in (
        CompressRequest,
        MergeRequest,
        SplitRequest,
        RotateRequest,
        DeletePagesRequest,
        ExtractPagesRequest,
        ProtectRequest,
        UnlockRequest,
        SignRequest,
        EditRequest,
        OcrRequest,
        ImagesToPdfRequest,
    )
}


# -- Option readers ----------------------------------------------------------


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _get(options: Mapping[str, Any], name: str, *aliases: str) -> Any:
    for key in (name, _camel(name), *aliases):
        if key in options:
            return options[key]
    return _MISSING


def _require(operation: str, options: Mapping[str, Any], name: str, *aliases: str) -> Any:
    value = _get(options, name, *aliases)
    if value is _MISSING or value is None:
        raise MissingRequiredOption(operation, name)
    return value


def _as_int(operation: str, option: str, value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidOption(operation, option, f"expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise InvalidOption(operation, option, f"expected an integer, got {value!r}")


def _as_number(operation: str, option: str, value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidOption(operation, option, f"expected a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidOption(operation, option, f"expected a number, got {value!r}") from exc


def _as_indices(operation: str, option: str, value: Any) -> tuple[int, ...]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise InvalidOption(operation, option, "expected a list of page indices")
    return tuple(_as_int(operation, option, item) for item in value)


def _as_password(operation: str, option: str, value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidOption(operation, option, "expected a string")
    if not value:
        raise MissingRequiredOption(operation, option)
    return value


def _as_records(operation: str, option: str, value: Any) -> list[Mapping[str, Any]]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise InvalidOption(operation, option, "expected a list of objects")
    for item in value:
        if not isinstance(item, Mapping):
            raise InvalidOption(operation, option, f"expected an object, got {item!r}")
    return list(value)


# -- Per operation parsers ---------------------------------------------------


def _parse_compress(options: Mapping[str, Any], config: EngineConfig) -> CompressRequest:
    tier = _get(options, "tier", "level")
    if tier is _MISSING or tier is None:
        tier = config.default_tier
    if not isinstance(tier, str) or tier.lower() not in COMPRESSION_LEVELS:
        raise InvalidOption("compress-pdf", "tier", f"expected one of low, medium, high, got {tier!r}")
    return CompressRequest(tier=tier.lower())


def _parse_split(options: Mapping[str, Any], config: EngineConfig) -> SplitRequest:
    ranges = _get(options, "ranges")
    if ranges is _MISSING or ranges is None:
        return SplitRequest()
    if isinstance(ranges, str):
        return SplitRequest(ranges=ranges)
    if isinstance(ranges, Sequence):
        return SplitRequest(ranges=tuple(tuple(item) if isinstance(item, list) else item for item in ranges))
    raise InvalidOption("split-pdf", "ranges", f"expected a string or a list, got {ranges!r}")


def _parse_rotate(options: Mapping[str, Any], config: EngineConfig) -> RotateRequest:
    degrees = _as_int("rotate-pdf", "degrees", _require("rotate-pdf", options, "degrees", "angle"))
    if degrees % 90:
        raise InvalidOption("rotate-pdf", "degrees", "must be a multiple of 90")
    indices = _get(options, "page_indices")
    if indices is _MISSING or indices is None:
        return RotateRequest(degrees=degrees)
    return RotateRequest(degrees=degrees, page_indices=_as_indices("rotate-pdf", "page_indices", indices))


def _parse_delete(options: Mapping[str, Any], config: EngineConfig) -> DeletePagesRequest:
    value = _require("delete-pages", options, "page_indices")
    return DeletePagesRequest(page_indices=_as_indices("delete-pages", "page_indices", value))


def _parse_extract(options: Mapping[str, Any], config: EngineConfig) -> ExtractPagesRequest:
    value = _require("extract-pages", options, "page_indices")
    indices = _as_indices("extract-pages", "page_indices", value)
    if not indices:
        raise InvalidOption("extract-pages", "page_indices", "select at least one page")
    return ExtractPagesRequest(page_indices=indices)


def _parse_protect(options: Mapping[str, Any], config: EngineConfig) -> ProtectRequest:
    password = _as_password("protect-pdf", "password", _require("protect-pdf", options, "password"))

    owner_password = _get(options, "owner_password")
    if owner_password is _MISSING or owner_password in (None, ""):
        owner_password = None
    elif not isinstance(owner_password, str):
        raise InvalidOption("protect-pdf", "owner_password", "expected a string")

    permissions = _get(options, "permissions")
    if permissions is _MISSING or permissions is None:
        permission_set = PermissionSet()
    elif isinstance(permissions, PermissionSet):
        permission_set = permissions
    elif isinstance(permissions, Mapping):
        try:
            permission_set = PermissionSet.from_mapping(dict(permissions))
        except ValueError as exc:
            raise InvalidOption("protect-pdf", "permissions", str(exc)) from exc
    else:
        raise InvalidOption("protect-pdf", "permissions", "expected a mapping of permission flags")

    algorithm = _get(options, "algorithm")
    if algorithm is _MISSING or algorithm is None:
        algorithm = None
    elif algorithm not in SUPPORTED_ALGORITHMS:
        raise InvalidOption("protect-pdf", "algorithm", f"expected one of {', '.join(SUPPORTED_ALGORITHMS)}")

    return ProtectRequest(
        password=password,
        owner_password=owner_password,
        permissions=permission_set,
        algorithm=algorithm,
    )


def _parse_unlock(options: Mapping[str, Any], config: EngineConfig) -> UnlockRequest:
    password = _as_password("unlock-pdf", "password", _require("unlock-pdf", options, "password"))
    return UnlockRequest(password=password)


def _parse_sign(options: Mapping[str, Any], config: EngineConfig) -> SignRequest:
    value = _require("sign-pdf", options, "signature_image", "signatureImageBytes", "signature")
    if not isinstance(value, (bytes, bytearray, str)):
        raise InvalidOption("sign-pdf", "signature_image", "expected image bytes or a data URL")
    page_index = _get(options, "page_index")
    if page_index is _MISSING or page_index is None:
        page_index = None
    else:
        page_index = _as_int("sign-pdf", "page_index", page_index)
    return SignRequest(signature_image=decode_data_url(value), page_index=page_index)


def _parse_edit_item(position: int, item: Mapping[str, Any]) -> Edit:
    prefix = f"edits[{position}]"

    def option(name: str) -> str:
        return f"{prefix}.{name}"

    edit_type = _require("edit-pdf", item, "type")
    if edit_type not in EDIT_TYPES:
        raise InvalidOption("edit-pdf", option("type"), f"expected one of {', '.join(sorted(EDIT_TYPES))}")

    values: dict[str, Any] = {
        "type": edit_type,
        "page_index": _as_int("edit-pdf", option("page_index"), _require("edit-pdf", item, "page_index")),
        "x": _as_number("edit-pdf", option("x"), _require("edit-pdf", item, "x")),
        "y": _as_number("edit-pdf", option("y"), _require("edit-pdf", item, "y")),
    }

    for name in ("width", "height", "size", "opacity"):
        raw = _get(item, name)
        if raw is not _MISSING and raw is not None:
            values[name] = _as_number("edit-pdf", option(name), raw)

    for name in ("width", "height", "size"):
        if name in values and values[name] <= 0:
            raise InvalidOption("edit-pdf", option(name), "must be positive")
    if not 0.0 <= values.get("opacity", 1.0) <= 1.0:
        raise InvalidOption("edit-pdf", option("opacity"), "must be between 0 and 1")

    color = _get(item, "color")
    if color is not _MISSING and color is not None:
        try:
            values["color"] = coerce_color(color)
        except ValueError as exc:
            raise InvalidOption("edit-pdf", option("color"), str(exc)) from exc

    for name in ("font", "mime_type"):
        raw = _get(item, name)
        if raw is not _MISSING and raw is not None:
            values[name] = str(raw)
    if "font" in values and values["font"] not in STANDARD_FONTS:
        raise InvalidOption("edit-pdf", option("font"), f"unknown font {values['font']!r}")

    if edit_type in ("text", "image"):
        content = _require("edit-pdf", item, "content")
        if edit_type == "text" and not isinstance(content, str):
            raise InvalidOption("edit-pdf", option("content"), "expected text")
        if edit_type == "image":
            if not isinstance(content, (bytes, bytearray, str)):
                raise InvalidOption("edit-pdf", option("content"), "expected image bytes or a data URL")
            if isinstance(content, str) and content.startswith("data:") and "mime_type" not in values:
                values["mime_type"] = content[len("data:"):].split(";", 1)[0]
            content = decode_data_url(content)
        values["content"] = content
    else:
        if "width" not in values:
            raise MissingRequiredOption("edit-pdf", option("width"))
        if "height" not in values:
            raise MissingRequiredOption("edit-pdf", option("height"))
        shape = "highlight" if edit_type == "highlight" else _get(item, "shape", "kind")
        if shape is _MISSING or shape is None:
            shape = "rectangle"
        if shape not in SHAPE_KINDS:
            raise InvalidOption("edit-pdf", option("shape"), f"unsupported shape {shape!r}")
        values["shape"] = shape

    return Edit(**values)


def _parse_edit(options: Mapping[str, Any], config: EngineConfig) -> EditRequest:
    records = _as_records("edit-pdf", "edits", _require("edit-pdf", options, "edits"))
    return EditRequest(edits=tuple(_parse_edit_item(position, item) for position, item in enumerate(records)))


def _parse_ocr(options: Mapping[str, Any], config: EngineConfig) -> OcrRequest:
    records = _as_records("pdf-ocr", "recognized", _require("pdf-ocr", options, "recognized"))
    recognized = []
    for position, item in enumerate(records):
        prefix = f"recognized[{position}]"
        text = _require("pdf-ocr", item, "text")
        if not isinstance(text, str):
            raise InvalidOption("pdf-ocr", f"{prefix}.text", "expected text")
        recognized.append(
            RecognizedText(
                page_index=_as_int("pdf-ocr", f"{prefix}.page_index", _require("pdf-ocr", item, "page_index")),
                text=text,
                **{
                    name: _as_number("pdf-ocr", f"{prefix}.{name}", _require("pdf-ocr", item, name))
                    for name in ("x", "y", "width", "height")
                },
            )
        )
    return OcrRequest(recognized=tuple(recognized))


_PARSERS = {
    "compress-pdf": _parse_compress,
    "merge-pdf": lambda options, config: MergeRequest(),
    "split-pdf": _parse_split,
    "rotate-pdf": _parse_rotate,
    "delete-pages": _parse_delete,
    "extract-pages": _parse_extract,
    "protect-pdf": _parse_protect,
    "unlock-pdf": _parse_unlock,
    "sign-pdf": _parse_sign,
    "edit-pdf": _parse_edit,
    "pdf-ocr": _parse_ocr,
    "jpg-to-pdf": lambda options, config: ImagesToPdfRequest(),
}


def parse_request(
    operation: str,
    options: Mapping[str, Any] | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> OperationRequest:
    """Validate ``options`` for ``operation`` and return its typed request.

    Raises:
        UnknownOperation: ``operation`` is not part of the closed operation set.
        MissingRequiredOption: a required option is absent.
        InvalidOption: an option is present but malformed.
    """

    try:
        parser = _PARSERS[operation]
    except (KeyError, TypeError) as exc:
        raise UnknownOperation(operation) from exc
    if options is None:
        options = {}
    if not isinstance(options, Mapping):
        raise InvalidOption(operation, "options", "expected a mapping")
    return parser(options, config)


__all__ = [
    "CompressRequest",
    "DeletePagesRequest",
    "EDIT_TYPES",
    "Edit",
    "EditRequest",
    "ExtractPagesRequest",
    "ImagesToPdfRequest",
    "MergeRequest",
    "OcrRequest",
    "OperationRequest",
    "ProtectRequest",
    "REQUEST_TYPES",
    "RotateRequest",
    "SignRequest",
    "SplitRequest",
    "UnlockRequest",
    "parse_request",
]

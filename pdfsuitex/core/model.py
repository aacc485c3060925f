"""Shared domain models used across pdfsuitex tools."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from typing import Any, Iterator, Union

from pypdf import PageObject, PdfWriter
from pypdf.constants import UserAccessPermissions

from .exceptions import PageIndexOutOfRange
from .utils import content_id
from .validator import inspect_image, normalize_image_mime

Color = tuple[float, float, float]

BLACK: Color = (0.0, 0.0, 0.0)

STANDARD_FONTS = frozenset(
    {
        "Courier",
        "Courier-Bold",
        "Courier-BoldOblique",
        "Courier-Oblique",
        "Helvetica",
        "Helvetica-Bold",
        "Helvetica-BoldOblique",
        "Helvetica-Oblique",
        "Symbol",
        "Times-Bold",
        "Times-BoldItalic",
        "Times-Italic",
        "Times-Roman",
        "ZapfDingbats",
    }
)

SHAPE_KINDS = frozenset({"rectangle", "filled-rectangle", "ellipse", "line", "highlight"})


@dataclass(frozen=True, slots=True)
class RecognizedText:
    """One run of text located by an external OCR service."""

    page_index: int
    text: str
    x: float
    y: float
    width: float
    height: float


# -- Content instructions ----------------------------------------------------


@dataclass(frozen=True, slots=True)
class TextInstruction:
    content: str
    x: float
    y: float
    font: str = "Helvetica"
    size: float = 12.0
    color: Color = BLACK
    opacity: float = 1.0
    invisible: bool = False

    kind = "text"


@dataclass(frozen=True, slots=True)
class ImageInstruction:
    resource: str
    x: float
    y: float
    width: float
    height: float
    opacity: float = 1.0

    kind = "image"


@dataclass(frozen=True, slots=True)
class ShapeInstruction:
    shape: str
    x: float
    y: float
    width: float
    height: float
    color: Color = BLACK
    opacity: float = 1.0
    stroke_width: float = 1.0

    kind = "shape"

    def __post_init__(self) -> None:
        if self.shape not in SHAPE_KINDS:
            raise ValueError(f"Unsupported shape kind: {self.shape}")


ContentInstruction = Union[TextInstruction, ImageInstruction, ShapeInstruction]

_INSTRUCTION_TYPES: dict[str, type] = {
    "text": TextInstruction,
    "image": ImageInstruction,
    "shape": ShapeInstruction,
}


def instruction_to_dict(instruction: ContentInstruction) -> dict[str, Any]:
    """Serialise ``instruction`` into a JSON compatible mapping."""

    data = asdict(instruction)
    data["type"] = instruction.kind
    return data


def instruction_from_dict(data: dict[str, Any]) -> ContentInstruction:
    """Rebuild an instruction produced by :func:`instruction_to_dict`."""

    payload = dict(data)
    try:
        cls = _INSTRUCTION_TYPES[payload.pop("type")]
    except KeyError as exc:
        raise ValueError(f"Unknown content instruction: {data!r}") from exc
    known = {item.name for item in fields(cls)}
    values = {key: value for key, value in payload.items() if key in known}
    if "color" in values:
        values["color"] = tuple(float(component) for component in values["color"])
    return cls(**values)


# -- Resources ---------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FontResource:
    id: str
    data: bytes = field(repr=False)
    name: str | None = None


@dataclass(frozen=True, slots=True)
class ImageResource:
    id: str
    data: bytes = field(repr=False)
    mime_type: str
    width: int
    height: int


Resource = Union[FontResource, ImageResource]


class ResourcePool:
    """Fonts and images embedded in exactly one :class:`Document`."""

    def __init__(self) -> None:
        self._items: dict[str, Resource] = {}

    def __contains__(self, resource_id: object) -> bool:
        return resource_id in self._items

    def __iter__(self) -> Iterator[Resource]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)

    def get(self, resource_id: str) -> Resource:
        try:
            return self._items[resource_id]
        except KeyError as exc:
            raise KeyError(f"Unknown resource: {resource_id}") from exc

    def images(self) -> list[ImageResource]:
        return [item for item in self._items.values() if isinstance(item, ImageResource)]

    def fonts(self) -> list[FontResource]:
        return [item for item in self._items.values() if isinstance(item, FontResource)]

    def add(self, resource: Resource) -> Resource:
        self._items[resource.id] = resource
        return resource

    def replace(self, resource: Resource) -> Resource:
        if resource.id not in self._items:
            raise KeyError(f"Unknown resource: {resource.id}")
        self._items[resource.id] = resource
        return resource

    def embed_image(self, data: bytes, mime_type: str | None = None) -> ImageResource:
        """Embed raster ``data`` (JPEG or PNG) and return its resource."""

        if mime_type is not None:
            normalize_image_mime(mime_type)
        info = inspect_image(data)
        resource_id = content_id("img", data)
        existing = self._items.get(resource_id)
        if isinstance(existing, ImageResource):
            return existing
        resource = ImageResource(resource_id, bytes(data), info.mime_type, info.width, info.height)
        return self.add(resource)

    def embed_font(self, data: bytes, name: str | None = None) -> FontResource:
        """Embed TrueType font ``data`` and return its resource."""

        if not data:
            raise ValueError("Font data must not be empty")
        resource_id = content_id("font", data)
        existing = self._items.get(resource_id)
        if isinstance(existing, FontResource):
            return existing
        return self.add(FontResource(resource_id, bytes(data), name))

    def adopt(self, resource: Resource) -> str:
        """Re-embed ``resource`` from another pool and return its local id."""

        existing = self._items.get(resource.id)
        if existing is None:
            self.add(resource)
            return resource.id
        if existing.data == resource.data:
            return existing.id
        suffix = 1
        while f"{resource.id}-{suffix}" in self._items:
            candidate = self._items[f"{resource.id}-{suffix}"]
            if candidate.data == resource.data:
                return candidate.id
            suffix += 1
        new_id = f"{resource.id}-{suffix}"
        if isinstance(resource, ImageResource):
            self.add(ImageResource(new_id, resource.data, resource.mime_type, resource.width, resource.height))
        else:
            self.add(FontResource(new_id, resource.data, resource.name))
        return new_id


# -- Pages and documents -----------------------------------------------------


class Page:
    """One page: geometry, rotation and ordered content instructions."""

    def __init__(
        self,
        native: PageObject,
        *,
        rotation: int = 0,
        instructions: tuple[ContentInstruction, ...] | list[ContentInstruction] = (),
    ) -> None:
        self._native = native
        self._rotation = int(rotation) % 360
        self._instructions: list[ContentInstruction] = list(instructions)
        self._history: list[list[tuple[str, int, ContentInstruction]]] = []

    def __repr__(self) -> str:
        return (
            f"Page(width={self.width!r}, height={self.height!r}, rotation={self.rotation!r}, "
            f"instructions={len(self._instructions)})"
        )

    @property
    def native(self) -> PageObject:
        return self._native

    @property
    def width(self) -> float:
        return float(self._native.mediabox.width)

    @property
    def height(self) -> float:
        return float(self._native.mediabox.height)

    @property
    def origin(self) -> tuple[float, float]:
        box = self._native.mediabox
        return float(box.left), float(box.bottom)

    @property
    def rotation(self) -> int:
        return self._rotation

    def rotate(self, degrees: int) -> int:
        if degrees % 90:
            raise ValueError(f"Rotation must be a multiple of 90 degrees, got {degrees}")
        self._rotation = (self._rotation + degrees) % 360
        return self._rotation

    @property
    def instructions(self) -> tuple[ContentInstruction, ...]:
        return tuple(self._instructions)

    def append(self, instruction: ContentInstruction) -> ContentInstruction:
        self._instructions.append(instruction)
        self._history.append([("append", len(self._instructions) - 1, instruction)])
        return instruction

    def remove(self, index: int) -> ContentInstruction:
        removed = self._pop(index)
        self._history.append([("remove", index, removed)])
        return removed

    def replace(self, index: int, instruction: ContentInstruction) -> ContentInstruction:
        """Delete the instruction at ``index`` and append ``instruction``."""

        removed = self._pop(index)
        self._instructions.append(instruction)
        self._history.append(
            [("remove", index, removed), ("append", len(self._instructions) - 1, instruction)]
        )
        return removed

    def undo(self) -> bool:
        """Revert the most recent edit; return ``False`` when nothing is left."""

        if not self._history:
            return False
        for action, index, instruction in reversed(self._history.pop()):
            if action == "append":
                self._instructions.pop(index)
            else:
                self._instructions.insert(index, instruction)
        return True

    def _pop(self, index: int) -> ContentInstruction:
        if not 0 <= index < len(self._instructions):
            raise IndexError(f"Instruction index out of range: {index}")
        return self._instructions.pop(index)


class Document:
    """In-memory PDF: ordered pages, resource pool and document metadata.

    Native page objects live in a private :class:`pypdf.PdfWriter` owned by
    this document only; pages copied from another document are cloned into it.
    """

    def __init__(
        self,
        *,
        store: PdfWriter | None = None,
        metadata: dict[str, str] | None = None,
        permissions: "PermissionSet | None" = None,
        was_encrypted: bool = False,
        source_size: int | None = None,
    ) -> None:
        self._store = store if store is not None else PdfWriter()
        self._pages: list[Page] = []
        self.resources = ResourcePool()
        self.metadata: dict[str, str] = dict(metadata or {})
        self.permissions = permissions
        self.was_encrypted = was_encrypted
        self.source_size = source_size

    def __repr__(self) -> str:
        return f"Document(pages={len(self._pages)}, resources={len(self.resources)})"

    @property
    def pages(self) -> tuple[Page, ...]:
        return tuple(self._pages)

    @property
    def page_count(self) -> int:
        return len(self._pages)

    def page(self, index: int) -> Page:
        if not 0 <= index < len(self._pages):
            raise PageIndexOutOfRange([index], len(self._pages))
        return self._pages[index]

    def add_page(self, width: float = 612.0, height: float = 792.0) -> Page:
        if width <= 0 or height <= 0:
            raise ValueError("Page dimensions must be positive")
        native = self._store.add_blank_page(width=width, height=height)
        return self.attach_page(Page(native))

    def adopt_native_page(self, native: PageObject) -> PageObject:
        """Clone ``native`` (from any reader/writer) into this document's store."""

        return self._store.add_page(native)

    def attach_page(self, page: Page) -> Page:
        self._pages.append(page)
        return page

    def set_pages(self, pages: list[Page]) -> None:
        self._pages = list(pages)

    @property
    def store(self) -> PdfWriter:
        return self._store


# -- Access control ----------------------------------------------------------


# Every permission bit set except the two reserved low bits.
_ALL_PERMISSIONS = 0xFFFFFFFC

_PERMISSION_FLAGS: dict[str, int] = {
    "printing": int(UserAccessPermissions.PRINT | UserAccessPermissions.PRINT_TO_REPRESENTATION),
    "modifying": int(UserAccessPermissions.MODIFY),
    "copying": int(UserAccessPermissions.EXTRACT),
    "annotating": int(UserAccessPermissions.ADD_OR_MODIFY),
    "form_filling": int(UserAccessPermissions.FILL_FORM_FIELDS),
    "assembly": int(UserAccessPermissions.ASSEMBLE_DOC),
    "accessibility": int(UserAccessPermissions.EXTRACT_TEXT_AND_GRAPHICS),
}


@dataclass(frozen=True, slots=True)
class PermissionSet:
    """Permissions granted to users who open a document with the user password."""

    printing: bool = True
    modifying: bool = False
    copying: bool = False
    annotating: bool = False
    form_filling: bool = False
    assembly: bool = False
    accessibility: bool = True

    def to_flags(self) -> UserAccessPermissions:
        value = _ALL_PERMISSIONS
        for name, flag in _PERMISSION_FLAGS.items():
            if not getattr(self, name):
                value &= ~flag
        return UserAccessPermissions(value)

    @classmethod
    def from_flags(cls, flags: int) -> "PermissionSet":
        value = int(flags) & 0xFFFFFFFF
        return cls(**{name: (value & flag) == flag for name, flag in _PERMISSION_FLAGS.items()})

    @classmethod
    def from_mapping(cls, values: dict[str, Any]) -> "PermissionSet":
        aliases = {"formFilling": "form_filling", "fillForms": "form_filling"}
        known = {item.name for item in fields(cls)}
        kwargs: dict[str, bool] = {}
        for key, value in values.items():
            name = aliases.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown permission: {key}")
            kwargs[name] = bool(value)
        return cls(**kwargs)


@dataclass(frozen=True, slots=True)
class EncryptionSpec:
    """Password-based access control applied when a document is saved."""

    user_password: str
    owner_password: str | None = None
    permissions: PermissionSet = field(default_factory=PermissionSet)
    algorithm: str | None = None

    def __post_init__(self) -> None:
        if not self.user_password:
            raise ValueError("A non-empty user password is required")

    @property
    def effective_owner_password(self) -> str:
        return self.owner_password or self.user_password


@dataclass(frozen=True, slots=True)
class SaveOptions:
    encryption: EncryptionSpec | None = None
    compact: bool = False
    timestamp: datetime | None = None


@dataclass(slots=True)
class OperationResult:
    """Normalized output of an orchestrated operation."""

    data: bytes = field(repr=False)
    filename: str
    mime_type: str = "application/pdf"
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def size(self) -> int:
        return len(self.data)


__all__ = [
    "BLACK",
    "Color",
    "ContentInstruction",
    "Document",
    "EncryptionSpec",
    "FontResource",
    "ImageInstruction",
    "ImageResource",
    "OperationResult",
    "Page",
    "PermissionSet",
    "RecognizedText",
    "Resource",
    "ResourcePool",
    "SHAPE_KINDS",
    "STANDARD_FONTS",
    "SaveOptions",
    "ShapeInstruction",
    "TextInstruction",
    "instruction_from_dict",
    "instruction_to_dict",
]

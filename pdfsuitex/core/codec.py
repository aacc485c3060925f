"""Load and save :class:`~pdfsuitex.core.model.Document` instances.

Overlay instructions and embedded resources survive a save/load round trip:
they are stored as ``/PieceInfo`` private data (page level for instructions,
catalog level for resources) next to the rendered content, and the rendered
marked-content section is removed again on load.
"""

from __future__ import annotations

import io
import json
from datetime import datetime
from typing import Any

from pypdf import PageObject, PasswordType, PdfReader, PdfWriter
from pypdf.errors import DependencyError
from pypdf.generic import (
    ContentStream,
    DecodedStreamObject,
    DictionaryObject,
    NameObject,
    NumberObject,
    TextStringObject,
)

from .exceptions import CorruptDocument, PasswordRequired, PdfEngineError, WrongPassword
from .model import (
    ContentInstruction,
    Document,
    EncryptionSpec,
    FontResource,
    ImageResource,
    Page,
    PermissionSet,
    ResourcePool,
    SaveOptions,
    instruction_from_dict,
    instruction_to_dict,
)
from .render import OVERLAY_TAG, render_overlay
from .utils import get_logger, pdf_date

LOGGER = get_logger("pdfsuitex.codec")

PIECE_INFO = "/PieceInfo"
PRIVATE_KEY = "/PdfSuiteX"


# -- Loading -----------------------------------------------------------------


def _open_reader(data: bytes) -> PdfReader:
    if not data:
        raise CorruptDocument("Input is empty")
    try:
        return PdfReader(io.BytesIO(data))
    except Exception as exc:  # pypdf exceptions vary
        raise CorruptDocument(f"Unable to parse PDF: {exc}") from exc


def _try_decrypt(reader: PdfReader, password: str) -> bool:
    try:
        return reader.decrypt(password) != PasswordType.NOT_DECRYPTED
    except DependencyError:
        raise
    except Exception as exc:  # pypdf exceptions vary
        raise CorruptDocument(f"Unable to decrypt PDF: {exc}") from exc


def _read_permissions(reader: PdfReader) -> PermissionSet | None:
    encrypt = reader.trailer.get("/Encrypt")
    if encrypt is None:
        return None
    flags = encrypt.get_object().get("/P")
    if flags is None:
        return None
    return PermissionSet.from_flags(int(flags))


def _private_entry(container: Any) -> Any | None:
    piece_info = container.get(PIECE_INFO)
    if piece_info is None:
        return None
    entry = piece_info.get_object().get(PRIVATE_KEY)
    if entry is None:
        return None
    private = entry.get_object().get("/Private")
    return private.get_object() if private is not None else None


def _restore_resources(reader: PdfReader, pool: ResourcePool) -> None:
    catalog = reader.trailer["/Root"].get_object()
    private = _private_entry(catalog)
    if not private:
        return
    for key, reference in private.items():
        stream = reference.get_object()
        resource_id = str(key)[1:]
        data = stream.get_data()
        if stream.get("/Kind") == "/Font":
            name = stream.get("/FontName")
            pool.add(FontResource(resource_id, data, str(name) if name is not None else None))
        else:
            pool.add(
                ImageResource(
                    resource_id,
                    data,
                    str(stream.get("/MimeType", "image/png")),
                    int(stream.get("/Width", 0)),
                    int(stream.get("/Height", 0)),
                )
            )
    LOGGER.debug("Restored %d embedded resource(s)", len(pool))


def _restore_instructions(native: PageObject) -> list[ContentInstruction]:
    private = _private_entry(native)
    if private is None:
        return []
    del native[NameObject(PIECE_INFO)]
    try:
        payload = json.loads(str(private))
        instructions = [instruction_from_dict(item) for item in payload]
    except (TypeError, ValueError) as exc:
        raise CorruptDocument("Overlay data is malformed") from exc
    _strip_overlay(native)
    return instructions


def _strip_overlay(native: PageObject) -> None:
    content = native.get_contents()
    if content is None:
        return
    if not isinstance(content, ContentStream):
        content = ContentStream(content, native.pdf)

    kept: list[tuple[Any, bytes]] = []
    depth = 0
    for operands, operator in content.operations:
        if depth:
            if operator in (b"BMC", b"BDC"):
                depth += 1
            elif operator == b"EMC":
                depth -= 1
            continue
        if operator == b"BMC" and operands and operands[0] == f"/{OVERLAY_TAG}":
            depth = 1
            continue
        kept.append((operands, operator))

    if len(kept) != len(content.operations):
        content.operations = kept
        native.replace_contents(content)


def load(data: bytes, *, password: str | None = None) -> Document:
    """Parse ``data`` into a :class:`Document`.

    Raises:
        CorruptDocument: ``data`` is not a readable PDF.
        PasswordRequired: the document is encrypted and no password was given.
        WrongPassword: the supplied password does not open the document.
    """

    reader = _open_reader(data)
    permissions: PermissionSet | None = None
    if reader.is_encrypted:
        permissions = _read_permissions(reader)
        if not password:
            if not _try_decrypt(reader, ""):
                raise PasswordRequired("Encrypted PDF requires a password")
        elif not _try_decrypt(reader, password):
            raise WrongPassword("Incorrect password for encrypted PDF")
    elif password:
        LOGGER.debug("Ignoring password for unencrypted PDF")

    try:
        store = PdfWriter(clone_from=reader)
        metadata = {
            key: str(value)
            for key, value in (reader.metadata or {}).items()
            if isinstance(key, str) and value is not None
        }
        document = Document(
            store=store,
            metadata=metadata,
            permissions=permissions,
            was_encrypted=reader.is_encrypted,
            source_size=len(data),
        )
        _restore_resources(reader, document.resources)
        for native in store.pages:
            instructions = _restore_instructions(native)
            document.attach_page(Page(native, rotation=native.rotation, instructions=instructions))
    except PdfEngineError:
        raise
    except Exception as exc:  # pypdf exceptions vary
        raise CorruptDocument(f"Unable to read PDF structure: {exc}") from exc

    LOGGER.debug("Loaded PDF with %d page(s)", document.page_count)
    return document


def create() -> Document:
    """Return an empty document with zero pages."""

    return Document()


# -- Saving ------------------------------------------------------------------


def _private_dictionary(private: Any, timestamp: datetime | None) -> DictionaryObject:
    entry = DictionaryObject({NameObject("/Private"): private})
    if timestamp is not None:
        entry[NameObject("/LastModified")] = TextStringObject(pdf_date(timestamp))
    return DictionaryObject({NameObject(PRIVATE_KEY): entry})


def _write_resources(writer: PdfWriter, pool: ResourcePool, timestamp: datetime | None) -> None:
    entries = DictionaryObject()
    for resource in sorted(pool, key=lambda item: item.id):
        stream = DecodedStreamObject()
        stream.set_data(resource.data)
        if isinstance(resource, FontResource):
            stream[NameObject("/Kind")] = NameObject("/Font")
            if resource.name:
                stream[NameObject("/FontName")] = TextStringObject(resource.name)
        else:
            stream[NameObject("/Kind")] = NameObject("/Image")
            stream[NameObject("/MimeType")] = TextStringObject(resource.mime_type)
            stream[NameObject("/Width")] = NumberObject(resource.width)
            stream[NameObject("/Height")] = NumberObject(resource.height)
        entries[NameObject(f"/{resource.id}")] = writer._add_object(stream)
    writer.root_object[NameObject(PIECE_INFO)] = _private_dictionary(entries, timestamp)


def _encrypt(writer: PdfWriter, spec: EncryptionSpec) -> None:
    kwargs: dict[str, Any] = {}
    if spec.algorithm:
        kwargs["algorithm"] = spec.algorithm
    try:
        writer.encrypt(
            user_password=spec.user_password,
            owner_password=spec.effective_owner_password,
            permissions_flag=spec.permissions.to_flags(),
            **kwargs,
        )
    except DependencyError:
        raise
    except Exception as exc:  # pragma: no cover - encryption errors vary
        raise PdfEngineError("Failed to encrypt PDF") from exc


def save(
    document: Document,
    options: SaveOptions | None = None,
    *,
    encryption: EncryptionSpec | None = None,
    compact: bool = False,
    timestamp: datetime | None = None,
) -> bytes:
    """Serialise ``document`` to PDF bytes.

    ``options`` takes precedence over the keyword arguments. The document is
    not modified; output is deterministic for identical state and options
    except for the random file identifier of encrypted output.
    """

    if options is None:
        options = SaveOptions(encryption=encryption, compact=compact, timestamp=timestamp)

    writer = PdfWriter()
    for page in document.pages:
        native = writer.add_page(page.native)
        native[NameObject("/Rotate")] = NumberObject(page.rotation)
        if PIECE_INFO in native:
            del native[NameObject(PIECE_INFO)]
        if page.instructions:
            native.merge_page(render_overlay(page, document.resources))
            payload = json.dumps(
                [instruction_to_dict(item) for item in page.instructions],
                sort_keys=True,
                separators=(",", ":"),
            )
            native[NameObject(PIECE_INFO)] = _private_dictionary(TextStringObject(payload), options.timestamp)

    if len(document.resources):
        _write_resources(writer, document.resources, options.timestamp)

    metadata = dict(document.metadata)
    if options.timestamp is not None:
        metadata["/ModDate"] = pdf_date(options.timestamp)
    if metadata:
        writer.add_metadata(metadata)

    if options.compact:
        for native in writer.pages:
            native.compress_content_streams(level=9)
        writer.compress_identical_objects(remove_duplicates=True, remove_unreferenced=True)

    if options.encryption is not None:
        _encrypt(writer, options.encryption)

    buffer = io.BytesIO()
    try:
        writer.write(buffer)
    except Exception as exc:  # pragma: no cover - pypdf write errors vary
        raise PdfEngineError("Unable to serialise PDF") from exc

    output = buffer.getvalue()
    LOGGER.debug(
        "Saved %d page(s) into %d bytes (compact=%s, encrypted=%s)",
        document.page_count,
        len(output),
        options.compact,
        options.encryption is not None,
    )
    return output


__all__ = ["load", "create", "save", "PIECE_INFO", "PRIVATE_KEY"]

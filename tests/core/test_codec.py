from __future__ import annotations

import io
import warnings
from datetime import datetime, timedelta, timezone

import pytest
from pypdf import PdfReader, PdfWriter

from pdfsuitex import codec
from pdfsuitex.core.exceptions import CorruptDocument, PasswordRequired, WrongPassword
from pdfsuitex.core.model import EncryptionSpec, PermissionSet, SaveOptions
from pdfsuitex.tools.overlay import add_image, add_shape, add_text


def test_load_reports_pages_and_geometry(sample_pdf: bytes) -> None:
    document = codec.load(sample_pdf)

    assert document.page_count == 5
    assert [page.width for page in document.pages] == [100, 110, 120, 130, 140]
    assert all(page.height == 200 for page in document.pages)
    assert document.metadata["/Title"] == "Sample"
    assert document.source_size == len(sample_pdf)
    assert document.was_encrypted is False


@pytest.mark.parametrize("data", [b"", b"not a pdf at all"])
def test_load_rejects_unparseable_bytes(data: bytes) -> None:
    with pytest.raises(CorruptDocument):
        codec.load(data)


def test_zero_page_document_loads(empty_pdf: bytes) -> None:
    document = codec.load(empty_pdf)
    assert document.page_count == 0
    assert codec.load(codec.save(document)).page_count == 0


def test_create_returns_empty_document() -> None:
    document = codec.create()
    assert document.page_count == 0
    assert document.source_size is None

    page = document.add_page(300, 400)
    assert (page.width, page.height) == (300, 400)


def test_round_trip_preserves_geometry_rotation_and_instructions(pdf_factory) -> None:
    document = codec.load(pdf_factory([(200, 300), (400, 100)]))
    document.page(1).rotate(90)
    text = add_text(document, 0, "Hello round trip", 20, 30, font="Times-Roman", size=14, color="#336699")
    shape = add_shape(document, 1, "ellipse", 10, 10, 50, 25, color=(0, 128, 0), opacity=0.5)

    restored = codec.load(codec.save(document))

    assert restored.page_count == 2
    assert [(page.width, page.height) for page in restored.pages] == [(200, 300), (400, 100)]
    assert [page.rotation for page in restored.pages] == [0, 90]
    assert restored.page(0).instructions == (text,)
    assert restored.page(1).instructions == (shape,)


def test_resaving_does_not_duplicate_overlay(pdf_factory) -> None:
    document = codec.load(pdf_factory())
    add_text(document, 0, "Only once", 10, 10)

    first = codec.save(document)
    second = codec.save(codec.load(first))
    reloaded = codec.load(second)

    assert len(reloaded.page(0).instructions) == 1
    content = PdfReader(io.BytesIO(second)).pages[0].get_contents().get_data()
    assert content.count(b"/PdfSuiteXOverlay BMC") == 1


def test_rendered_text_is_extractable(pdf_factory) -> None:
    document = codec.load(pdf_factory([(300, 300)]))
    add_text(document, 0, "Searchable words", 20, 150)

    reader = PdfReader(io.BytesIO(codec.save(document)))
    assert "Searchable words" in reader.pages[0].extract_text()


def test_image_resources_survive_round_trip(pdf_factory, png_bytes: bytes) -> None:
    document = codec.load(pdf_factory())
    instruction = add_image(document, 0, png_bytes, "image/png", 5, 5)

    restored = codec.load(codec.save(document))
    (restored_instruction,) = restored.page(0).instructions
    resource = restored.resources.get(restored_instruction.resource)

    assert restored_instruction == instruction
    assert resource.data == png_bytes
    assert (resource.mime_type, resource.width, resource.height) == ("image/png", 40, 20)


def test_save_is_deterministic_and_does_not_mutate(pdf_factory) -> None:
    document = codec.load(pdf_factory([(200, 200), (200, 200)]))
    add_text(document, 1, "stable", 10, 10)
    stamp = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)

    first = codec.save(document, timestamp=stamp)
    second = codec.save(document, SaveOptions(timestamp=stamp))

    assert first == second
    assert document.page_count == 2
    assert len(document.page(1).instructions) == 1
    assert PdfReader(io.BytesIO(first)).metadata["/ModDate"] == "D:20240501123000Z"


def test_compact_save_stays_readable(sample_pdf: bytes) -> None:
    document = codec.load(sample_pdf)
    with warnings.catch_warnings():
        warnings.simplefilter("error", DeprecationWarning)
        data = codec.save(document, compact=True)
    assert codec.load(data).page_count == 5


def test_naive_timestamps_are_treated_as_utc(sample_pdf: bytes) -> None:
    document = codec.load(sample_pdf)
    naive = codec.save(document, timestamp=datetime(2024, 5, 1, 12, 30))
    shifted = codec.save(document, timestamp=datetime(2024, 5, 1, 14, 30, tzinfo=timezone(timedelta(hours=2))))

    assert naive == shifted
    assert PdfReader(io.BytesIO(naive)).metadata["/ModDate"] == "D:20240501123000Z"


def test_encrypted_input_requires_password(sample_pdf: bytes) -> None:
    document = codec.load(sample_pdf)
    protected = codec.save(document, encryption=EncryptionSpec("secret"))

    with pytest.raises(PasswordRequired):
        codec.load(protected)
    with pytest.raises(WrongPassword):
        codec.load(protected, password="nope")

    opened = codec.load(protected, password="secret")
    assert opened.page_count == 5
    assert opened.was_encrypted is True
    assert opened.permissions == PermissionSet()


def test_empty_user_password_opens_without_prompt(pdf_factory) -> None:
    reader = PdfReader(io.BytesIO(pdf_factory()))
    writer = PdfWriter(clone_from=reader)
    writer.encrypt(user_password="", owner_password="owner")
    buffer = io.BytesIO()
    writer.write(buffer)

    document = codec.load(buffer.getvalue())
    assert document.page_count == 1
    assert document.was_encrypted is True


def test_password_is_ignored_for_plain_documents(sample_pdf: bytes) -> None:
    assert codec.load(sample_pdf, password="unused").page_count == 5

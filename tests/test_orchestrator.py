from __future__ import annotations

import base64
import io
import zipfile

import pytest
from pypdf import PdfReader

import pdfsuitex
from pdfsuitex import InputFile, apply, codec
from pdfsuitex.core.config import EngineConfig
from pdfsuitex.core.exceptions import (
    InsufficientInput,
    InvalidOption,
    MissingRequiredOption,
    PageIndexOutOfRange,
    UnknownOperation,
    WrongPassword,
    describe_error,
)
from pdfsuitex.tools import load_builtin_plugins, registry
from pdfsuitex.tools.common.requests import REQUEST_TYPES


def setup_module(module):
    load_builtin_plugins()


def test_registry_covers_every_operation() -> None:
    assert list(registry.names()) == sorted(REQUEST_TYPES)
    assert pdfsuitex.OPERATIONS == tuple(sorted(REQUEST_TYPES))


def test_merge_scenario(pdf_factory) -> None:
    a = InputFile(pdf_factory([(100, 100)]), "a.pdf")
    b = InputFile(pdf_factory([(300, 300)]), "b.pdf")

    result = apply("merge-pdf", [a, b])

    assert result.filename == "merged.pdf"
    assert result.mime_type == "application/pdf"
    reader = PdfReader(io.BytesIO(result.data))
    assert [float(page.mediabox.width) for page in reader.pages] == [100, 300]


def test_merge_requires_two_inputs(sample_pdf: bytes) -> None:
    with pytest.raises(InsufficientInput):
        apply("merge-pdf", [sample_pdf])


def test_operations_need_an_input() -> None:
    with pytest.raises(InsufficientInput):
        apply("rotate-pdf", [], {"degrees": 90})


def test_delete_pages_scenario(sample_pdf: bytes) -> None:
    result = apply("delete-pages", [InputFile(sample_pdf, "report.pdf")], {"pageIndices": [1, 3]})

    assert result.filename == "delete-pages-report.pdf"
    document = codec.load(result.data)
    assert [page.width for page in document.pages] == [100, 120, 140]
    assert result.details["removed"] == [1, 3]


def test_delete_pages_cannot_remove_everything(pdf_factory) -> None:
    with pytest.raises(InvalidOption):
        apply("delete-pages", [pdf_factory([(10, 10), (10, 10)])], {"page_indices": [0, 1, 1]})


def test_delete_pages_is_strict(sample_pdf: bytes) -> None:
    with pytest.raises(PageIndexOutOfRange):
        apply("delete-pages", [sample_pdf], {"page_indices": [0, 9]})


def test_extract_pages_keeps_requested_order(sample_pdf: bytes) -> None:
    result = apply("extract-pages", [sample_pdf], {"page_indices": [4, 0]})

    assert result.filename == "extract-pages-result.pdf"
    assert [page.width for page in codec.load(result.data).pages] == [140, 100]


def test_rotate_all_pages_by_default(sample_pdf: bytes) -> None:
    result = apply("rotate-pdf", [InputFile(sample_pdf, "scan")], {"degrees": 90})

    assert result.filename == "rotate-pdf-scan.pdf"
    assert {page.rotation for page in codec.load(result.data).pages} == {90}


def test_split_returns_zip_of_parts(sample_pdf: bytes) -> None:
    result = apply("split-pdf", [InputFile(sample_pdf, "book.pdf")], {"ranges": "1-2,3"})

    assert result.mime_type == "application/zip"
    assert result.filename == "split-pdf-book.zip"
    with zipfile.ZipFile(io.BytesIO(result.data)) as archive:
        assert archive.namelist() == ["book_pages_1-2.pdf", "book_page_3.pdf"]
        assert codec.load(archive.read("book_pages_1-2.pdf")).page_count == 2


def test_split_rejects_bad_ranges(sample_pdf: bytes) -> None:
    with pytest.raises(InvalidOption):
        apply("split-pdf", [sample_pdf], {"ranges": "x-y"})


def test_protect_then_unlock(sample_pdf: bytes) -> None:
    protected = apply("protect-pdf", [InputFile(sample_pdf, "secret.pdf")], {"password": "x"})
    assert protected.filename == "protect-pdf-secret.pdf"
    assert PdfReader(io.BytesIO(protected.data)).is_encrypted

    with pytest.raises(WrongPassword):
        apply("unlock-pdf", [protected.data], {"password": "y"})

    unlocked = apply("unlock-pdf", [protected.data], {"password": "x"})
    assert not PdfReader(io.BytesIO(unlocked.data)).is_encrypted
    assert codec.load(unlocked.data).page_count == 5


def test_protect_requires_password(sample_pdf: bytes) -> None:
    with pytest.raises(MissingRequiredOption) as excinfo:
        apply("protect-pdf", [sample_pdf], {})
    assert excinfo.value.option == "password"
    with pytest.raises(MissingRequiredOption):
        apply("protect-pdf", [sample_pdf], {"password": ""})


def test_sign_pdf_uses_config_defaults(pdf_factory, image_factory) -> None:
    signature = base64.b64encode(image_factory(100, 50)).decode("ascii")
    config = EngineConfig(signature_margin=20, signature_scale=1.0)

    result = apply(
        "sign-pdf",
        [pdf_factory([(400, 400)])],
        {"signatureImageBytes": f"data:image/png;base64,{signature}"},
        config=config,
    )

    (instruction,) = codec.load(result.data).page(0).instructions
    assert (instruction.x, instruction.y, instruction.width, instruction.height) == (280, 20, 100, 50)


def test_edit_pdf_applies_edits(pdf_factory, png_bytes: bytes) -> None:
    edits = [
        {"type": "text", "content": "Hello", "pageIndex": 0, "x": 10, "y": 20, "color": "#ff0000"},
        {"type": "image", "content": png_bytes, "page_index": 1, "x": 5, "y": 5, "width": 20},
        {"type": "highlight", "page_index": 1, "x": 0, "y": 0, "width": 50, "height": 10},
    ]
    result = apply("edit-pdf", [pdf_factory([(200, 200), (200, 200)])], {"edits": edits})

    document = codec.load(result.data)
    (text,) = document.page(0).instructions
    image, highlight = document.page(1).instructions
    assert (text.content, text.color) == ("Hello", (1.0, 0.0, 0.0))
    assert (image.width, image.height) == (20, 10)
    assert highlight.shape == "highlight"


def test_edit_pdf_validates_page_indices_first(pdf_factory) -> None:
    edits = [
        {"type": "text", "content": "ok", "page_index": 0, "x": 1, "y": 1},
        {"type": "text", "content": "bad", "page_index": 4, "x": 1, "y": 1},
    ]
    with pytest.raises(PageIndexOutOfRange):
        apply("edit-pdf", [pdf_factory()], {"edits": edits})


def test_edit_pdf_reports_malformed_edits_as_invalid_options(pdf_factory) -> None:
    edits = [{"type": "text", "content": "hi", "page_index": 0, "x": 1, "y": 1, "opacity": 2}]
    with pytest.raises(InvalidOption) as excinfo:
        apply("edit-pdf", [pdf_factory()], {"edits": edits})
    assert describe_error(excinfo.value) == InvalidOption.user_message

    edits = [{"type": "shape", "page_index": 0, "x": 1, "y": 1, "width": 0, "height": 5}]
    with pytest.raises(InvalidOption):
        apply("edit-pdf", [pdf_factory()], {"edits": edits})


def test_edit_pdf_wraps_tool_value_errors(pdf_factory) -> None:
    config = EngineConfig(default_font="Arial")
    edits = [{"type": "text", "content": "hi", "page_index": 0, "x": 1, "y": 1}]
    with pytest.raises(InvalidOption) as excinfo:
        apply("edit-pdf", [pdf_factory()], {"edits": edits}, config=config)
    assert excinfo.value.option == "edits[0]"


def test_pdf_ocr_overlays_recognized_text(pdf_factory) -> None:
    recognized = [{"pageIndex": 0, "text": "Scanned words", "x": 20, "y": 100, "width": 150, "height": 15}]
    result = apply("pdf-ocr", [pdf_factory([(300, 300)])], {"recognized": recognized})

    assert "Scanned words" in PdfReader(io.BytesIO(result.data)).pages[0].extract_text()
    assert result.details["text_runs"] == 1


def test_compress_reports_sizes(photo_pdf: bytes) -> None:
    result = apply("compress-pdf", [InputFile(photo_pdf, "photo.pdf")], {"tier": "high"})

    assert result.filename == "compress-pdf-photo.pdf"
    assert result.details["original_size"] == len(photo_pdf)
    assert result.details["compressed_size"] == len(result.data)
    assert result.details["tier"] == "high"


def test_compress_uses_configured_default_tier(sample_pdf: bytes) -> None:
    result = apply("compress-pdf", [sample_pdf], config=EngineConfig(default_tier="low"))
    assert result.details["tier"] == "low"


def test_jpg_to_pdf(png_bytes: bytes, jpeg_bytes: bytes) -> None:
    result = apply("jpg-to-pdf", [InputFile(png_bytes, "one.png"), InputFile(jpeg_bytes, "two.jpg")])

    assert result.filename == "jpg-to-pdf-one.pdf"
    assert codec.load(result.data).page_count == 2


def test_unknown_operation(sample_pdf: bytes) -> None:
    with pytest.raises(UnknownOperation):
        apply("pdf-to-word", [sample_pdf])


def test_raw_bytes_are_accepted(sample_pdf: bytes) -> None:
    result = apply("rotate-pdf", sample_pdf, {"degrees": 180, "page_indices": [0]})
    assert codec.load(result.data).page(0).rotation == 180

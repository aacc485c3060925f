from __future__ import annotations

import io
from pathlib import Path
from typing import Callable, Sequence
import sys

import pytest
from PIL import Image
from pypdf import PdfWriter

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


def _write(writer: PdfWriter) -> bytes:
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture()
def pdf_factory() -> Callable[..., bytes]:
    def _create(
        sizes: Sequence[tuple[float, float]] = ((200, 200),),
        *,
        title: str | None = None,
        rotations: Sequence[int] | None = None,
    ) -> bytes:
        writer = PdfWriter()
        for index, (width, height) in enumerate(sizes):
            page = writer.add_blank_page(width=width, height=height)
            if rotations is not None:
                page.rotate(rotations[index])
        if title is not None:
            writer.add_metadata({"/Title": title})
        return _write(writer)

    return _create


@pytest.fixture()
def sample_pdf() -> bytes:
    writer = PdfWriter()
    for width in (100, 110, 120, 130, 140):
        writer.add_blank_page(width=width, height=200)
    writer.add_metadata({"/Producer": "pdfsuitex-tests", "/Title": "Sample"})
    return _write(writer)


@pytest.fixture()
def empty_pdf() -> bytes:
    return _write(PdfWriter())


@pytest.fixture()
def sample_pdfs(pdf_factory: Callable[..., bytes]) -> list[bytes]:
    first = pdf_factory([(100, 100), (100, 150)], title="Document One")
    second = pdf_factory([(300, 300)])
    return [first, second]


@pytest.fixture()
def image_factory() -> Callable[..., bytes]:
    def _create(width: int = 40, height: int = 20, *, fmt: str = "PNG", mode: str = "RGB") -> bytes:
        color = (200, 30, 30, 128) if mode == "RGBA" else (200, 30, 30)
        image = Image.new(mode, (width, height), color if mode in {"RGB", "RGBA"} else 128)
        buffer = io.BytesIO()
        image.save(buffer, format=fmt)
        return buffer.getvalue()

    return _create


@pytest.fixture()
def png_bytes(image_factory: Callable[..., bytes]) -> bytes:
    return image_factory(40, 20, fmt="PNG")


@pytest.fixture()
def jpeg_bytes(image_factory: Callable[..., bytes]) -> bytes:
    return image_factory(30, 60, fmt="JPEG")


def _photo(width: int, height: int) -> Image.Image:
    gradient = Image.linear_gradient("L").resize((width, height))
    noise = Image.effect_noise((width, height), 48)
    return Image.merge("RGB", (gradient, noise, gradient.transpose(Image.Transpose.FLIP_LEFT_RIGHT)))


@pytest.fixture()
def photo_bytes() -> bytes:
    buffer = io.BytesIO()
    _photo(800, 800).save(buffer, format="JPEG", quality=95)
    return buffer.getvalue()


@pytest.fixture()
def photo_pdf() -> bytes:
    """A one page PDF holding a 1200x1200 photo drawn at 600 DPI."""

    buffer = io.BytesIO()
    _photo(1200, 1200).save(buffer, format="PDF", resolution=600.0, quality=95)
    return buffer.getvalue()


@pytest.fixture()
def thumbnail_pdf() -> bytes:
    """A letter page drawing a 1200x1200 photo in a 72x72 pt box (1200 DPI)."""

    from reportlab.lib.utils import ImageReader
    from reportlab.pdfgen.canvas import Canvas

    photo = io.BytesIO()
    _photo(1200, 1200).save(photo, format="JPEG", quality=95)
    photo.seek(0)

    buffer = io.BytesIO()
    canvas = Canvas(buffer, pagesize=(612, 792), invariant=1)
    canvas.drawImage(ImageReader(photo), 100, 600, width=72, height=72)
    canvas.showPage()
    canvas.save()
    return buffer.getvalue()


@pytest.fixture()
def truetype_font() -> bytes:
    import reportlab

    path = Path(reportlab.__file__).resolve().parent / "fonts" / "Vera.ttf"
    return path.read_bytes()

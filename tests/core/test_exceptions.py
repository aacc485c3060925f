from __future__ import annotations

import pytest

from pdfsuitex.core.exceptions import (
    CorruptDocument,
    InsufficientInput,
    InvalidOption,
    MissingRequiredOption,
    PageIndexOutOfRange,
    PasswordRequired,
    PdfEngineError,
    UnknownOperation,
    UnsupportedImageFormat,
    WrongPassword,
    describe_error,
)


@pytest.mark.parametrize(
    "error",
    [
        CorruptDocument("bad"),
        PasswordRequired("locked"),
        WrongPassword("nope"),
        PageIndexOutOfRange([3], 2),
        UnsupportedImageFormat("gif"),
        MissingRequiredOption("protect-pdf", "password"),
        InvalidOption("rotate-pdf", "degrees", "must be a multiple of 90"),
        UnknownOperation("pdf-to-word"),
        InsufficientInput("need more"),
    ],
)
def test_every_error_has_its_own_category(error: PdfEngineError) -> None:
    assert isinstance(error, PdfEngineError)
    assert error.category != PdfEngineError.category
    assert describe_error(error) == type(error).user_message


def test_categories_are_distinct() -> None:
    classes = [
        CorruptDocument,
        PasswordRequired,
        WrongPassword,
        PageIndexOutOfRange,
        UnsupportedImageFormat,
        MissingRequiredOption,
        InvalidOption,
        UnknownOperation,
        InsufficientInput,
    ]
    assert len({cls.category for cls in classes}) == len(classes)


def test_foreign_errors_get_generic_message() -> None:
    assert describe_error(RuntimeError("boom")) == PdfEngineError.user_message


def test_error_details() -> None:
    error = PageIndexOutOfRange([7, 9], 5)
    assert isinstance(error, IndexError)
    assert error.indices == [7, 9]
    assert "5 page(s)" in str(error)

    missing = MissingRequiredOption("protect-pdf", "password")
    assert (missing.operation, missing.option) == ("protect-pdf", "password")

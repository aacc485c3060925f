from __future__ import annotations

import pytest

from pdfsuitex.core.config import EngineConfig
from pdfsuitex.core.exceptions import InvalidOption, MissingRequiredOption, UnknownOperation
from pdfsuitex.core.model import PermissionSet
from pdfsuitex.tools.common.requests import (
    CompressRequest,
    DeletePagesRequest,
    EditRequest,
    MergeRequest,
    OcrRequest,
    ProtectRequest,
    RotateRequest,
    SignRequest,
    SplitRequest,
    parse_request,
)


def test_compress_tier_defaults_and_validation() -> None:
    assert parse_request("compress-pdf", None) == CompressRequest(tier="medium")
    assert parse_request("compress-pdf", {}, EngineConfig(default_tier="high")) == CompressRequest(tier="high")
    assert parse_request("compress-pdf", {"tier": "LOW"}) == CompressRequest(tier="low")
    with pytest.raises(InvalidOption):
        parse_request("compress-pdf", {"tier": "maximum"})


def test_merge_takes_no_options() -> None:
    assert parse_request("merge-pdf", {"ignored": True}) == MergeRequest()


def test_page_indices_accept_camel_case_alias() -> None:
    request = parse_request("delete-pages", {"pageIndices": [3, "1"]})
    assert request == DeletePagesRequest(page_indices=(3, 1))


@pytest.mark.parametrize("value", ["1,2", [True], [1.5], 3])
def test_page_indices_must_be_integer_lists(value) -> None:
    with pytest.raises(InvalidOption):
        parse_request("extract-pages", {"page_indices": value})


def test_missing_required_options() -> None:
    for operation, option in (
        ("delete-pages", "page_indices"),
        ("extract-pages", "page_indices"),
        ("rotate-pdf", "degrees"),
        ("unlock-pdf", "password"),
        ("protect-pdf", "password"),
        ("sign-pdf", "signature_image"),
        ("edit-pdf", "edits"),
        ("pdf-ocr", "recognized"),
    ):
        with pytest.raises(MissingRequiredOption) as excinfo:
            parse_request(operation, {})
        assert excinfo.value.option == option


def test_rotate_degrees_must_be_right_angles() -> None:
    assert parse_request("rotate-pdf", {"degrees": -90}) == RotateRequest(degrees=-90)
    with pytest.raises(InvalidOption):
        parse_request("rotate-pdf", {"degrees": 45})


def test_protect_request_parses_permissions() -> None:
    request = parse_request(
        "protect-pdf",
        {"password": "pw", "ownerPassword": "owner", "permissions": {"copying": True}},
    )
    assert request == ProtectRequest(
        password="pw",
        owner_password="owner",
        permissions=PermissionSet(copying=True),
    )
    with pytest.raises(InvalidOption):
        parse_request("protect-pdf", {"password": "pw", "permissions": {"fly": True}})
    with pytest.raises(InvalidOption):
        parse_request("protect-pdf", {"password": "pw", "algorithm": "DES"})


def test_sign_request_decodes_data_url(png_bytes: bytes) -> None:
    import base64

    url = "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")
    assert parse_request("sign-pdf", {"signature_image": url, "pageIndex": 0}) == SignRequest(png_bytes, 0)


def test_edit_request_items() -> None:
    request = parse_request(
        "edit-pdf",
        {"edits": [{"type": "text", "content": "a", "page_index": 0, "x": "1.5", "y": 2, "size": 9}]},
    )
    assert isinstance(request, EditRequest)
    (edit,) = request.edits
    assert (edit.type, edit.x, edit.y, edit.size) == ("text", 1.5, 2.0, 9.0)

    with pytest.raises(InvalidOption):
        parse_request("edit-pdf", {"edits": [{"type": "sticker", "page_index": 0, "x": 0, "y": 0}]})
    with pytest.raises(MissingRequiredOption) as excinfo:
        parse_request("edit-pdf", {"edits": [{"type": "shape", "page_index": 0, "x": 0, "y": 0}]})
    assert excinfo.value.option == "edits[0].width"
    with pytest.raises(InvalidOption):
        parse_request("edit-pdf", {"edits": "not a list"})


def test_ocr_request_items() -> None:
    request = parse_request(
        "pdf-ocr",
        {"recognized": [{"page_index": 0, "text": "t", "x": 1, "y": 2, "width": 3, "height": 4}]},
    )
    assert isinstance(request, OcrRequest)
    assert request.recognized[0].height == 4.0
    with pytest.raises(MissingRequiredOption):
        parse_request("pdf-ocr", {"recognized": [{"page_index": 0, "text": "t"}]})


def test_split_ranges_are_optional() -> None:
    assert parse_request("split-pdf", {}) == SplitRequest()
    assert parse_request("split-pdf", {"ranges": [[0, 1], 3]}) == SplitRequest(ranges=((0, 1), 3))
    with pytest.raises(InvalidOption):
        parse_request("split-pdf", {"ranges": 5})


def test_unknown_operation() -> None:
    with pytest.raises(UnknownOperation):
        parse_request("pdf-to-excel", {})


@pytest.mark.parametrize(
    ("extra", "option"),
    [
        ({"opacity": 2}, "edits[0].opacity"),
        ({"opacity": -0.1}, "edits[0].opacity"),
        ({"size": 0}, "edits[0].size"),
        ({"width": -5}, "edits[0].width"),
        ({"height": 0}, "edits[0].height"),
        ({"font": "Arial"}, "edits[0].font"),
    ],
)
def test_edit_item_ranges_are_checked(extra: dict, option: str) -> None:
    item = {"type": "text", "content": "hi", "page_index": 0, "x": 1, "y": 1, **extra}
    with pytest.raises(InvalidOption) as excinfo:
        parse_request("edit-pdf", {"edits": [item]})
    assert excinfo.value.option == option

from __future__ import annotations

import pytest
from library_api.api.negotiation import ResponseShape, resolve_response_shape

VENDOR = "application/vnd.library.hateoas+json"


@pytest.mark.parametrize(
    "accept",
    [
        VENDOR,
        "APPLICATION/VND.LIBRARY.HATEOAS+JSON",
        f"application/json, {VENDOR};q=0.5",
        f"{VENDOR}; charset=utf-8",
    ],
)
def test_vendor_media_type_selects_hypermedia(accept):
    assert resolve_response_shape(accept, VENDOR) is ResponseShape.HYPERMEDIA


@pytest.mark.parametrize(
    "accept",
    [None, "", "application/json", "*/*", "application/*", f"{VENDOR};q=0"],
)
def test_everything_else_is_plain(accept):
    assert resolve_response_shape(accept, VENDOR) is ResponseShape.PLAIN


def test_custom_media_type():
    assert (
        resolve_response_shape("application/x-links+json", "application/x-links+json")
        is ResponseShape.HYPERMEDIA
    )

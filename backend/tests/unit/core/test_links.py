from __future__ import annotations

import dataclasses
import uuid
from urllib.parse import urlencode

import pytest
from library_api.api.links import Link, LinkBuilder, LinkedCollection, ResourceUriType
from library_api.repositories.base import Page
from library_api.services._shared.dto import ResourceParameters

AUTHOR_ID = uuid.UUID("76053df4-6687-4353-8937-b45556748abe")
BOOK_ID = uuid.UUID("447eb762-95e9-4c31-95e1-b20053fbe215")


def fake_url_for(endpoint: str, **values) -> str:
    """Deterministic stand-in for ``url_for``: endpoint plus sorted query."""
    if any(v is None for v in values.values()):
        raise AssertionError(f"None passed to url_for: {values}")
    return f"http://test/{endpoint}?{urlencode(sorted(values.items()))}"


@pytest.fixture()
def builder() -> LinkBuilder:
    return LinkBuilder(fake_url_for)


def _query(url: str) -> dict[str, str]:
    from urllib.parse import parse_qsl, urlsplit

    return dict(parse_qsl(urlsplit(url).query))


class TestResourceUri:
    def test_navigation_only_changes_page_number(self, builder):
        params = ResourceParameters(
            page_number=2, page_size=5, order_by="genre", search_query="king", fields="id,name"
        )
        url = builder.resource_uri("authors.get_authors", params, ResourceUriType.NEXT_PAGE)
        assert _query(url) == {
            "fields": "id,name",
            "order_by": "genre",
            "page_number": "3",
            "page_size": "5",
            "search_query": "king",
        }
        # the request's parameters are never mutated
        assert params.page_number == 2

    def test_previous_and_current(self, builder):
        params = ResourceParameters(page_number=2, page_size=5)
        prev = builder.resource_uri("authors.get_authors", params, ResourceUriType.PREVIOUS_PAGE)
        cur = builder.resource_uri("authors.get_authors", params, ResourceUriType.CURRENT)
        assert _query(prev)["page_number"] == "1"
        assert _query(cur)["page_number"] == "2"

    def test_filter_emitted_under_its_key(self, builder):
        params = ResourceParameters(filter="Horror", filter_key="genre")
        url = builder.resource_uri("authors.get_authors", params, ResourceUriType.CURRENT)
        assert _query(url)["genre"] == "Horror"
        assert "filter" not in _query(url)

    def test_route_values_are_forwarded(self, builder):
        params = ResourceParameters(order_by="title")
        url = builder.resource_uri(
            "books.get_books_for_author",
            params,
            ResourceUriType.CURRENT,
            author_id=AUTHOR_ID,
        )
        assert _query(url)["author_id"] == str(AUTHOR_ID)


class TestNavigation:
    """``next`` must only follow ``has_next`` and ``previous`` only ``has_previous``."""

    def test_first_page_has_only_next(self, builder):
        params = ResourceParameters(page_number=1, page_size=2)
        previous, following = builder.navigation_uris(
            "authors.get_authors", params, Page([1, 2], 6, 2, 1)
        )
        assert previous is None
        assert following is not None and _query(following)["page_number"] == "2"

    def test_last_page_has_only_previous(self, builder):
        params = ResourceParameters(page_number=3, page_size=2)
        previous, following = builder.navigation_uris(
            "authors.get_authors", params, Page([5, 6], 6, 2, 3)
        )
        assert following is None
        assert previous is not None and _query(previous)["page_number"] == "2"

    def test_single_page_has_neither(self, builder):
        params = ResourceParameters()
        assert builder.navigation_uris("authors.get_authors", params, Page([1], 1, 10, 1)) == (
            None,
            None,
        )

    def test_collection_links_order_and_rels(self, builder):
        params = ResourceParameters(page_number=2, page_size=2)
        links = builder.collection_links("authors.get_authors", params, Page([3, 4], 6, 2, 2))
        assert [link.rel for link in links] == ["self", "next_page", "previous_page"]
        assert [_query(link.href)["page_number"] for link in links] == ["2", "3", "1"]
        assert all(link.method == "GET" for link in links)

    def test_collection_links_are_deterministic(self, builder):
        params = ResourceParameters(
            page_number=2, page_size=2, order_by="genre desc", search_query="king", fields="id"
        )
        snapshot = dataclasses.replace(params)
        page = Page([3, 4], 6, 2, 2)

        first = builder.collection_links("authors.get_authors", params, page)
        second = builder.collection_links("authors.get_authors", params, page)

        assert first == second
        assert params == snapshot


class TestItemLinks:
    def test_author_links(self, builder):
        links = builder.author_links(AUTHOR_ID, "id,name")
        assert [(link.rel, link.method) for link in links] == [
            ("self", "GET"),
            ("delete_author", "DELETE"),
            ("create_book_for_author", "POST"),
            ("books", "GET"),
        ]
        assert _query(links[0].href) == {"id": str(AUTHOR_ID), "fields": "id,name"}

    def test_author_self_link_without_fields(self, builder):
        links = builder.author_links(AUTHOR_ID)
        assert "fields" not in _query(links[0].href)

    def test_book_links(self, builder):
        links = builder.book_links(AUTHOR_ID, BOOK_ID)
        assert [(link.rel, link.method) for link in links] == [
            ("self", "GET"),
            ("delete_book", "DELETE"),
            ("update_book", "PUT"),
            ("partially_update_book", "PATCH"),
            ("author", "GET"),
        ]
        assert _query(links[0].href) == {"author_id": str(AUTHOR_ID), "book_id": str(BOOK_ID)}


def test_linked_collection_to_dict():
    body = LinkedCollection(value=[{"id": 1}], links=[Link("http://x", "self")]).to_dict()
    assert body == {
        "value": [{"id": 1}],
        "links": [{"href": "http://x", "rel": "self", "method": "GET"}],
    }

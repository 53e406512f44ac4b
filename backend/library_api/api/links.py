"""Hypermedia links for single resources and paged collections.

The builder takes a URL factory ``(endpoint, **values) -> str`` instead of
calling Flask directly, so link construction can be exercised with a plain
function in tests. In the app the factory is ``url_for(..., _external=True)``.
"""

from __future__ import annotations

import dataclasses
import enum
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from library_api.repositories.base import Page
from library_api.services._shared.dto import ResourceParameters

T = TypeVar("T")

UrlFactory = Callable[..., str]


@dataclass(frozen=True, slots=True)
class Link:
    """
    One hypermedia control.

    :param href: Absolute URL.
    :type href: str
    :param rel: Relation name (``self``, ``next_page``...).
    :type rel: str
    :param method: HTTP method to use on ``href``.
    :type method: str
    """

    href: str
    rel: str
    method: str = "GET"

    def to_dict(self) -> dict[str, str]:
        return {"href": self.href, "rel": self.rel, "method": self.method}


@dataclass(frozen=True, slots=True)
class LinkedCollection(Generic[T]):
    """Collection body in hypermedia mode: items plus collection links."""

    value: Sequence[T]
    links: Sequence[Link] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {"value": list(self.value), "links": [link.to_dict() for link in self.links]}


class ResourceUriType(enum.Enum):
    PREVIOUS_PAGE = "previous_page"
    NEXT_PAGE = "next_page"
    CURRENT = "current"


class LinkBuilder:
    """
    Build item and collection links from endpoint names.

    Parameters
    ----------
    url_for:
        Factory returning an absolute URL for an endpoint and its values.
        ``None`` values are dropped before the call so optional query
        parameters never render as ``"None"``.
    """

    def __init__(self, url_for: UrlFactory) -> None:
        self._url_for = url_for

    def _url(self, endpoint: str, **values: Any) -> str:
        return self._url_for(endpoint, **{k: v for k, v in values.items() if v is not None})

    # ------------------------------ Collections -------------------------------

    def resource_uri(
        self,
        endpoint: str,
        params: ResourceParameters,
        uri_type: ResourceUriType,
        **route_values: Any,
    ) -> str:
        """
        Return the collection URL for the previous, next or current page.

        Navigation derives an independent copy of ``params``; only
        ``page_number`` differs from the current request.

        :param endpoint: Collection endpoint name.
        :type endpoint: str
        :param params: Parameters of the current request.
        :type params: ResourceParameters
        :param uri_type: Which page to link to.
        :type uri_type: ResourceUriType
        :returns: Absolute URL.
        :rtype: str
        """
        if uri_type is ResourceUriType.PREVIOUS_PAGE:
            target = dataclasses.replace(params, page_number=params.page_number - 1)
        elif uri_type is ResourceUriType.NEXT_PAGE:
            target = dataclasses.replace(params, page_number=params.page_number + 1)
        else:
            target = params
        return self._url(endpoint, **route_values, **target.to_query())

    def navigation_uris(
        self,
        endpoint: str,
        params: ResourceParameters,
        page: Page[Any],
        **route_values: Any,
    ) -> tuple[str | None, str | None]:
        """
        Return ``(previous, next)`` page URLs, ``None`` where no such page exists.

        ``has_previous`` guards the previous link and ``has_next`` the next.
        """
        previous = (
            self.resource_uri(endpoint, params, ResourceUriType.PREVIOUS_PAGE, **route_values)
            if page.has_previous
            else None
        )
        following = (
            self.resource_uri(endpoint, params, ResourceUriType.NEXT_PAGE, **route_values)
            if page.has_next
            else None
        )
        return previous, following

    def collection_links(
        self,
        endpoint: str,
        params: ResourceParameters,
        page: Page[Any],
        **route_values: Any,
    ) -> list[Link]:
        """
        Links for a collection page: ``self`` plus available navigation.

        :returns: ``self``, then ``next_page`` and ``previous_page`` when present.
        :rtype: list[Link]
        """
        links = [
            Link(self.resource_uri(endpoint, params, ResourceUriType.CURRENT, **route_values), "self"),
        ]
        previous, following = self.navigation_uris(endpoint, params, page, **route_values)
        if following is not None:
            links.append(Link(following, "next_page"))
        if previous is not None:
            links.append(Link(previous, "previous_page"))
        return links

    # -------------------------------- Items -----------------------------------

    def author_links(self, author_id: uuid.UUID, fields: str | None = None) -> list[Link]:
        """Links for one author."""
        return [
            Link(self._url("authors.get_author", id=author_id, fields=fields or None), "self"),
            Link(self._url("authors.delete_author", id=author_id), "delete_author", "DELETE"),
            Link(
                self._url("books.create_book_for_author", author_id=author_id),
                "create_book_for_author",
                "POST",
            ),
            Link(self._url("books.get_books_for_author", author_id=author_id), "books"),
        ]

    def book_links(
        self, author_id: uuid.UUID, book_id: uuid.UUID, fields: str | None = None
    ) -> list[Link]:
        """Links for one book of an author."""
        ids = {"author_id": author_id, "book_id": book_id}
        return [
            Link(self._url("books.get_book_for_author", **ids, fields=fields or None), "self"),
            Link(self._url("books.delete_book_for_author", **ids), "delete_book", "DELETE"),
            Link(self._url("books.update_book_for_author", **ids), "update_book", "PUT"),
            Link(
                self._url("books.partially_update_book_for_author", **ids),
                "partially_update_book",
                "PATCH",
            ),
            Link(self._url("authors.get_author", id=author_id), "author"),
        ]

# comments in English; reST docstrings strict
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ResourceParameters:
    """
    Validated collection query contract.

    Built once per request by the API layer and read-only afterwards; page
    navigation derives new instances with :func:`dataclasses.replace`.

    :param page_number: 1-based page number.
    :type page_number: int
    :param page_size: Page size, already clamped to the configured maximum.
    :type page_size: int
    :param order_by: Client sort expression, e.g. ``"genre, name desc"``.
    :type order_by: str
    :param search_query: Free-text search across searchable columns.
    :type search_query: str | None
    :param filter: Exact-match filter value (case-insensitive).
    :type filter: str | None
    :param filter_key: Query-string name the filter was read from (e.g. ``genre``).
    :type filter_key: str | None
    :param fields: Comma-separated projection list.
    :type fields: str | None
    """

    page_number: int = 1
    page_size: int = 10
    order_by: str = "name"
    search_query: str | None = None
    filter: str | None = None
    filter_key: str | None = None
    fields: str | None = None

    def __post_init__(self) -> None:
        if self.page_number < 1:
            raise ValueError("page_number must be >= 1")
        if self.page_size < 1:
            raise ValueError("page_size must be >= 1")

    @property
    def skip(self) -> int:
        return (self.page_number - 1) * self.page_size

    def to_query(self) -> dict[str, Any]:
        """
        Return the query-string values that reproduce these parameters.

        ``None`` values are omitted; the filter is emitted under
        ``filter_key`` when both are set.

        :returns: Ordered mapping suitable for ``url_for(**values)``.
        :rtype: dict[str, Any]
        """
        query: dict[str, Any] = {}
        if self.fields:
            query["fields"] = self.fields
        query["order_by"] = self.order_by
        query["page_number"] = self.page_number
        query["page_size"] = self.page_size
        if self.search_query:
            query["search_query"] = self.search_query
        if self.filter and self.filter_key:
            query[self.filter_key] = self.filter
        return query

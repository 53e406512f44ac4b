"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from typing import Any, ClassVar

from marshmallow import EXCLUDE, Schema, fields, post_load, validate

from library_api.services._shared.dto import ResourceParameters


class ResourceParametersSchema(Schema):
    """Parse collection query parameters into :class:`ResourceParameters`.

    ``page_size`` above ``max_page_size`` is clamped rather than rejected.
    An explicit empty ``order_by`` is kept as-is so the sort validator can
    reject it.
    """

    #: Query-string name of the resource-specific exact-match filter
    filter_key: ClassVar[str | None] = None

    class Meta:
        unknown = EXCLUDE

    page_number = fields.Integer(load_default=1, validate=validate.Range(min=1))
    page_size = fields.Integer(validate=validate.Range(min=1))
    order_by = fields.String(load_default=None)
    search_query = fields.String(load_default=None)
    projection = fields.String(data_key="fields", load_default=None)

    def __init__(
        self,
        *,
        default_order_by: str,
        default_page_size: int = 10,
        max_page_size: int = 20,
        **kwargs: Any,
    ) -> None:
        self._default_order_by = default_order_by
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size
        super().__init__(**kwargs)

    def _filter_value(self, data: dict[str, Any]) -> str | None:
        return data.get(self.filter_key) if self.filter_key else None

    @post_load
    def to_parameters(self, data: dict[str, Any], **_: Any) -> ResourceParameters:
        page_size = data.get("page_size", self._default_page_size)
        order_by = data.get("order_by")
        return ResourceParameters(
            page_number=data["page_number"],
            page_size=min(page_size, self._max_page_size),
            order_by=self._default_order_by if order_by is None else order_by,
            search_query=data.get("search_query"),
            filter=self._filter_value(data),
            filter_key=self.filter_key,
            fields=data.get("projection"),
        )


class FieldsQuerySchema(Schema):
    """Parse the ``fields`` projection list of single-resource reads."""

    class Meta:
        unknown = EXCLUDE

    projection = fields.String(data_key="fields", load_default=None)

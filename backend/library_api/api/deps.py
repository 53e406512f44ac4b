"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import json
import time
import uuid
from collections.abc import Callable, Sequence
from typing import Any, TypeVar, cast

from flask import Response, current_app, jsonify, request, url_for
from marshmallow import ValidationError

from library_api.api.links import LinkBuilder, LinkedCollection
from library_api.api.negotiation import ResponseShape, resolve_response_shape
from library_api.core.errors import APIError, BadRequest
from library_api.core.extensions import SORT_REGISTRY_KEY
from library_api.repositories.base import Page
from library_api.schemas.common import FieldsQuerySchema, ResourceParametersSchema
from library_api.services._shared.dto import ResourceParameters
from library_api.services._shared.property_mapping import PropertyMappingRegistry
from library_api.services._shared.shaping import FieldSelector, Projector, ShapedResource

F = TypeVar("F", bound=Callable[..., Any])

field_selector = FieldSelector()
projector = Projector()
fields_query_schema = FieldsQuerySchema()


# ------------------------------ App services ---------------------------------


def sort_registry() -> PropertyMappingRegistry:
    """Return the process-wide sort-mapping registry built at startup."""

    return cast(PropertyMappingRegistry, current_app.extensions[SORT_REGISTRY_KEY])


def _external_url(endpoint: str, **values: Any) -> str:
    return url_for(endpoint, _external=True, **values)


def link_builder() -> LinkBuilder:
    """Return a link builder producing absolute URLs for the current request."""

    return LinkBuilder(_external_url)


def response_shape() -> ResponseShape:
    """Negotiate plain vs hypermedia output from the ``Accept`` header."""

    media_type = current_app.config["HYPERMEDIA_MEDIA_TYPE"]
    return resolve_response_shape(request.headers.get("Accept"), media_type)


# ------------------------------ Request parsing -------------------------------


def parse_resource_parameters(
    schema_cls: type[ResourceParametersSchema], *, default_order_by: str
) -> ResourceParameters:
    """Parse collection query parameters from ``request.args`` using Marshmallow.

    Malformed values (e.g. ``page_number=abc``) are client errors and map to 400.
    """

    schema = schema_cls(
        default_order_by=default_order_by,
        default_page_size=current_app.config["DEFAULT_PAGE_SIZE"],
        max_page_size=current_app.config["MAX_PAGE_SIZE"],
    )
    try:
        return cast(ResourceParameters, schema.load(request.args))
    except ValidationError as err:
        raise APIError(
            "Invalid query parameters",
            status_code=400,
            code="invalid_query",
            details={"errors": err.messages},
        ) from err


def parse_fields() -> str | None:
    """Return the ``fields`` projection list of a single-resource read."""

    return cast(str | None, fields_query_schema.load(request.args).get("projection"))


def parse_id_list(raw: str) -> list[uuid.UUID]:
    """Parse a comma-separated list of UUIDs, e.g. from ``/(<ids>)`` routes."""

    tokens = [token.strip() for token in raw.split(",") if token.strip()]
    if not tokens:
        raise BadRequest("At least one id is required", code="invalid_ids")
    try:
        return [uuid.UUID(token) for token in tokens]
    except ValueError as err:
        raise BadRequest("Ids must be UUIDs", code="invalid_ids") from err


def ensure_valid_sort(dto_type: type, entity_type: type, order_by: str) -> None:
    """Reject sort expressions naming keys the resource does not map."""

    if not sort_registry().is_valid_sort(dto_type, entity_type, order_by):
        raise BadRequest(f"Cannot sort by '{order_by}'", code="invalid_sort")


def ensure_valid_fields(dto_type: type, fields: str | None) -> None:
    """Reject projection lists naming fields the resource does not have."""

    if not field_selector.has_properties(dto_type, fields):
        raise BadRequest(f"Unknown fields requested: '{fields}'", code="invalid_fields")


# ------------------------------ Response building -----------------------------


def json_response(
    payload: Any, *, status: int = 200, shape: ResponseShape = ResponseShape.PLAIN
) -> Response:
    """Return a JSON response; hypermedia bodies use the vendor media type."""

    response = jsonify(payload)
    response.status_code = status
    if shape is ResponseShape.HYPERMEDIA:
        response.mimetype = current_app.config["HYPERMEDIA_MEDIA_TYPE"]
    return response


def pagination_metadata(
    page: Page[Any],
    *,
    previous_link: str | None = None,
    next_link: str | None = None,
    with_links: bool = False,
) -> dict[str, Any]:
    """Build the ``X-Pagination`` header payload."""

    meta: dict[str, Any] = {
        "total_count": page.total_count,
        "page_size": page.page_size,
        "current_page": page.current_page,
        "total_pages": page.total_pages,
    }
    if with_links:
        meta["previous_page_link"] = previous_link
        meta["next_page_link"] = next_link
    return meta


def collection_response(
    page: Page[Any],
    params: ResourceParameters,
    *,
    resource_type: type,
    endpoint: str,
    item_links: Callable[[Any], Sequence[Any]],
    route_values: dict[str, Any] | None = None,
) -> Response:
    """Render one page of a collection in the negotiated shape.

    * Plain: shaped items as the body; paging metadata and navigation URLs
      in the ``X-Pagination`` header.
    * Hypermedia: ``{"value": [...], "links": [...]}`` where every item carries
      its own ``links``; the header keeps counts only.

    :param page: Page of output DTOs.
    :param params: Parameters of the current request.
    :param resource_type: DTO type used for projection.
    :param endpoint: Collection endpoint name for navigation links.
    :param item_links: Callable returning the links of one DTO.
    :param route_values: Extra route values of the collection endpoint.
    """

    route_values = route_values or {}
    shape = response_shape()
    builder = link_builder()
    shaped = projector.shape_all(page.items, params.fields, resource_type=resource_type)

    if shape is ResponseShape.HYPERMEDIA:
        value: list[ShapedResource] = []
        for dto, item in zip(page.items, shaped, strict=True):
            item["links"] = [link.to_dict() for link in item_links(dto)]
            value.append(item)
        body = LinkedCollection(
            value=value,
            links=builder.collection_links(endpoint, params, page, **route_values),
        ).to_dict()
        meta = pagination_metadata(page)
    else:
        body = shaped
        previous_link, next_link = builder.navigation_uris(endpoint, params, page, **route_values)
        meta = pagination_metadata(
            page, previous_link=previous_link, next_link=next_link, with_links=True
        )

    response = json_response(body, shape=shape)
    response.headers[current_app.config["PAGINATION_HEADER"]] = json.dumps(meta)
    return response


def item_response(
    dto: Any,
    fields: str | None,
    *,
    links: Callable[[Any], Sequence[Any]],
    status: int = 200,
) -> Response:
    """Render one resource, adding ``links`` in hypermedia mode."""

    shape = response_shape()
    body = projector.shape(dto, fields)
    if shape is ResponseShape.HYPERMEDIA:
        body["links"] = [link.to_dict() for link in links(dto)]
    return json_response(body, status=status, shape=shape)


# ------------------------------ Decorators -----------------------------------


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]

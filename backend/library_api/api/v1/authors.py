"""Author endpoints."""

from __future__ import annotations

import uuid

from flask import Blueprint, Response, request, url_for

from library_api.api.deps import (
    collection_response,
    ensure_valid_fields,
    ensure_valid_sort,
    item_response,
    link_builder,
    parse_fields,
    parse_resource_parameters,
    sort_registry,
    timing,
)
from library_api.core.errors import BadRequest
from library_api.models.author import Author
from library_api.schemas.author import AuthorCreateSchema, AuthorResourceParametersSchema
from library_api.services.authors.dto import AuthorOut
from library_api.services.authors.service import AuthorService

bp = Blueprint("authors", __name__)

author_create_schema = AuthorCreateSchema()

DEFAULT_ORDER_BY = "name"


def _service() -> AuthorService:
    return AuthorService(registry=sort_registry())


@bp.get("")
@timing
def get_authors():
    """Return one page of authors, shaped and optionally with links."""

    params = parse_resource_parameters(
        AuthorResourceParametersSchema, default_order_by=DEFAULT_ORDER_BY
    )
    ensure_valid_sort(AuthorOut, Author, params.order_by)
    ensure_valid_fields(AuthorOut, params.fields)

    page = _service().list(params)
    builder = link_builder()
    return collection_response(
        page,
        params,
        resource_type=AuthorOut,
        endpoint="authors.get_authors",
        item_links=lambda author: builder.author_links(author.id, params.fields),
    )


@bp.get("/<uuid:id>")
@timing
def get_author(id: uuid.UUID):
    """Return one author, shaped by ``fields``."""

    fields = parse_fields()
    ensure_valid_fields(AuthorOut, fields)
    author = _service().get(id)
    return item_response(
        author, fields, links=lambda a: link_builder().author_links(a.id, fields)
    )


@bp.post("")
@timing
def create_author():
    """Create an author, including any nested books."""

    payload = request.get_json(silent=True)
    if payload is None:
        raise BadRequest("A JSON body is required")
    dto = author_create_schema.load(payload)
    author = _service().create(dto)
    response = item_response(
        author, None, links=lambda a: link_builder().author_links(a.id), status=201
    )
    response.headers["Location"] = url_for("authors.get_author", id=author.id, _external=True)
    return response


@bp.post("/<uuid:id>")
@timing
def block_author_creation(id: uuid.UUID):
    """POST to an existing author URI conflicts; to an unknown one, 404."""

    _service().block_creation(id)


@bp.delete("/<uuid:id>")
@timing
def delete_author(id: uuid.UUID):
    """Delete an author and its books."""

    _service().delete(id)
    return Response(status=204)

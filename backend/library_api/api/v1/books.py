"""Book endpoints, nested under their author."""

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
from library_api.models.author import Book
from library_api.schemas.book import BookCreateSchema, BookUpdateSchema
from library_api.schemas.common import ResourceParametersSchema
from library_api.schemas.patch import load_patch_document
from library_api.services.books.dto import BookOut, BookUpsertOut
from library_api.services.books.service import BookService

bp = Blueprint("books", __name__)

book_create_schema = BookCreateSchema()
book_update_schema = BookUpdateSchema()

DEFAULT_ORDER_BY = "title"


def _service() -> BookService:
    return BookService(registry=sort_registry())


def _book_links(book: BookOut, fields: str | None = None):
    return link_builder().book_links(book.author_id, book.id, fields)


def _json_body() -> object:
    payload = request.get_json(silent=True)
    if payload is None:
        raise BadRequest("A JSON body is required")
    return payload


def _created(book: BookOut) -> Response:
    response = item_response(book, None, links=_book_links, status=201)
    response.headers["Location"] = url_for(
        "books.get_book_for_author", author_id=book.author_id, book_id=book.id, _external=True
    )
    return response


def _upserted(result: BookUpsertOut) -> Response:
    if result.created:
        return _created(result.book)
    return Response(status=204)


@bp.get("")
@timing
def get_books_for_author(author_id: uuid.UUID):
    """Return one page of an author's books."""

    params = parse_resource_parameters(ResourceParametersSchema, default_order_by=DEFAULT_ORDER_BY)
    ensure_valid_sort(BookOut, Book, params.order_by)
    ensure_valid_fields(BookOut, params.fields)

    page = _service().list(author_id, params)
    return collection_response(
        page,
        params,
        resource_type=BookOut,
        endpoint="books.get_books_for_author",
        item_links=lambda book: _book_links(book, params.fields),
        route_values={"author_id": author_id},
    )


@bp.get("/<uuid:book_id>")
@timing
def get_book_for_author(author_id: uuid.UUID, book_id: uuid.UUID):
    """Return one book, shaped by ``fields``."""

    fields = parse_fields()
    ensure_valid_fields(BookOut, fields)
    book = _service().get(author_id, book_id)
    return item_response(book, fields, links=lambda b: _book_links(b, fields))


@bp.post("")
@timing
def create_book_for_author(author_id: uuid.UUID):
    """Create a book for an author."""

    dto = book_create_schema.load(_json_body())
    return _created(_service().create(author_id, dto))


@bp.put("/<uuid:book_id>")
@timing
def update_book_for_author(author_id: uuid.UUID, book_id: uuid.UUID):
    """Replace a book; creates it under ``book_id`` when missing."""

    dto = book_update_schema.load(_json_body())
    return _upserted(_service().update(author_id, book_id, dto))


@bp.patch("/<uuid:book_id>")
@timing
def partially_update_book_for_author(author_id: uuid.UUID, book_id: uuid.UUID):
    """Apply a JSON Patch document; creates the book when missing."""

    document = load_patch_document(_json_body())
    return _upserted(_service().patch(author_id, book_id, document))


@bp.delete("/<uuid:book_id>")
@timing
def delete_book_for_author(author_id: uuid.UUID, book_id: uuid.UUID):
    """Delete one book of an author."""

    _service().delete(author_id, book_id)
    return Response(status=204)

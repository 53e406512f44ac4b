"""Author resource schemas."""

from __future__ import annotations

from typing import Any, ClassVar

from marshmallow import Schema, fields, post_load, validate

from library_api.schemas.book import BookCreateSchema
from library_api.schemas.common import ResourceParametersSchema
from library_api.services.authors.dto import AuthorCreateIn


class AuthorCreateSchema(Schema):
    """Payload for creating an author, optionally with books."""

    first_name = fields.String(required=True, validate=validate.Length(min=1, max=50))
    last_name = fields.String(required=True, validate=validate.Length(min=1, max=50))
    date_of_birth = fields.Date(required=True)
    genre = fields.String(required=True, validate=validate.Length(min=1, max=50))
    books = fields.List(fields.Nested(BookCreateSchema), load_default=list)

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> AuthorCreateIn:
        data["books"] = tuple(data.get("books") or ())
        return AuthorCreateIn(**data)


class AuthorResourceParametersSchema(ResourceParametersSchema):
    """Author collection query: adds the exact-match ``genre`` filter."""

    filter_key: ClassVar[str | None] = "genre"

    genre = fields.String(load_default=None)

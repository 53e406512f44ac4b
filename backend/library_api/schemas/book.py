"""Book resource schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, ValidationError, fields, post_load, validate, validates_schema

from library_api.services.books.dto import BookCreateIn, BookUpdateIn


class _BookManipulationSchema(Schema):
    """Rules shared by create and update payloads."""

    title = fields.String(required=True, validate=validate.Length(min=1, max=100))
    description = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=500))

    @validates_schema
    def description_differs_from_title(self, data: dict[str, Any], **_: Any) -> None:
        title = data.get("title")
        if title is not None and title == data.get("description"):
            raise ValidationError(
                "The provided description should be different from the title.",
                field_name="description",
            )


class BookCreateSchema(_BookManipulationSchema):
    """Payload for creating a book under an author."""

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> BookCreateIn:
        return BookCreateIn(**data)


class BookUpdateSchema(_BookManipulationSchema):
    """Payload for replacing a book; the description becomes mandatory."""

    description = fields.String(required=True, validate=validate.Length(max=500))

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> BookUpdateIn:
        return BookUpdateIn(**data)

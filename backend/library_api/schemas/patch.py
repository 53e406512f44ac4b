"""JSON Patch (RFC 6902) document schema."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, ValidationError, fields, post_load, validate, validates_schema

from library_api.services._shared.patch import OPERATIONS, PatchDocument, PatchOperation


class PatchOperationSchema(Schema):
    """One operation of a patch document."""

    op = fields.String(required=True, validate=validate.OneOf(OPERATIONS))
    path = fields.String(required=True)
    value = fields.Raw(load_default=None, allow_none=True)
    from_ = fields.String(data_key="from", load_default=None)

    @validates_schema
    def source_for_copy_and_move(self, data: dict[str, Any], **_: Any) -> None:
        if data.get("op") in ("copy", "move") and not data.get("from_"):
            raise ValidationError("'from' is required for copy and move.", field_name="from")

    @post_load
    def make_operation(self, data: dict[str, Any], **_: Any) -> PatchOperation:
        return PatchOperation(**data)


_operations_schema = PatchOperationSchema(many=True)


def load_patch_document(payload: Any) -> PatchDocument:
    """Validate a JSON array of operations into a :class:`PatchDocument`.

    :raises marshmallow.ValidationError: When the payload is not a valid document.
    """
    if not isinstance(payload, list):
        raise ValidationError("A patch document must be a JSON array of operations.")
    return PatchDocument.of(_operations_schema.load(payload))

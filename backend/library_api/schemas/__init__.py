"""Convenience exports for application schemas."""

from __future__ import annotations

from .author import AuthorCreateSchema, AuthorResourceParametersSchema
from .book import BookCreateSchema, BookUpdateSchema
from .common import FieldsQuerySchema, ResourceParametersSchema
from .patch import PatchOperationSchema, load_patch_document

__all__ = [
    "ResourceParametersSchema",
    "FieldsQuerySchema",
    "AuthorCreateSchema",
    "AuthorResourceParametersSchema",
    "BookCreateSchema",
    "BookUpdateSchema",
    "PatchOperationSchema",
    "load_patch_document",
]

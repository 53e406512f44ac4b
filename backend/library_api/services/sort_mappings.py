"""Sort-key declarations for every exposed resource."""

from __future__ import annotations

from library_api.models.author import Author, Book
from library_api.services._shared.property_mapping import (
    PropertyMapping,
    PropertyMappingRegistry,
    PropertyMappingValue,
)
from library_api.services.authors.dto import AuthorOut
from library_api.services.books.dto import BookOut

AUTHOR_SORT_KEYS: dict[str, PropertyMappingValue] = {
    "id": PropertyMappingValue.of("id"),
    "genre": PropertyMappingValue.of("genre"),
    # older authors have an earlier date of birth
    "age": PropertyMappingValue.of("date_of_birth", reverse=True),
    "name": PropertyMappingValue.of("first_name", "last_name"),
}

BOOK_SORT_KEYS: dict[str, PropertyMappingValue] = {
    "id": PropertyMappingValue.of("id"),
    "title": PropertyMappingValue.of("title"),
    "description": PropertyMappingValue.of("description"),
}


def build_registry() -> PropertyMappingRegistry:
    """Return a registry holding every (DTO, entity) sort mapping."""
    registry = PropertyMappingRegistry()
    registry.register(AuthorOut, Author, PropertyMapping(AUTHOR_SORT_KEYS))
    registry.register(BookOut, Book, PropertyMapping(BOOK_SORT_KEYS))
    return registry

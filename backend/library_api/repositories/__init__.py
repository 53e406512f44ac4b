"""Repository package exposing persistence-layer access for catalog models."""

from __future__ import annotations

from library_api.repositories.author import AuthorRepository
from library_api.repositories.base import (
    BaseRepository,
    Page,
    apply_sort_terms,
    paginate,
    paginate_select,
)
from library_api.repositories.book import BookRepository

__all__ = [
    # Base
    "BaseRepository",
    "Page",
    "paginate",
    "paginate_select",
    "apply_sort_terms",
    # Domain
    "AuthorRepository",
    "BookRepository",
]

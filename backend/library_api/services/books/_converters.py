from __future__ import annotations

from library_api.models.author import Book

from .dto import BookCreateIn, BookOut, BookUpdateIn


def book_to_out(row: Book) -> BookOut:
    return BookOut(
        id=row.id,
        title=row.title,
        description=row.description,
        author_id=row.author_id,
    )


def book_to_update_in(row: Book) -> BookUpdateIn:
    """Current state of ``row`` as a patchable update model."""

    return BookUpdateIn(title=row.title, description=row.description)


def book_from_in(dto: BookCreateIn | BookUpdateIn) -> Book:
    return Book(title=dto.title, description=dto.description)

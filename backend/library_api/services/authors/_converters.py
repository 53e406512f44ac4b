from __future__ import annotations

from datetime import date

from library_api.models.author import Author
from library_api.services.books._converters import book_from_in

from .dto import AuthorCreateIn, AuthorOut


def age_in_years(date_of_birth: date, today: date | None = None) -> int:
    """Whole years elapsed since ``date_of_birth``."""

    today = today or date.today()
    had_birthday = (today.month, today.day) >= (date_of_birth.month, date_of_birth.day)
    return today.year - date_of_birth.year - (0 if had_birthday else 1)


def author_to_out(row: Author, today: date | None = None) -> AuthorOut:
    return AuthorOut(
        id=row.id,
        name=f"{row.first_name} {row.last_name}",
        age=age_in_years(row.date_of_birth, today),
        genre=row.genre,
    )


def author_from_in(dto: AuthorCreateIn) -> Author:
    return Author(
        first_name=dto.first_name.strip(),
        last_name=dto.last_name.strip(),
        date_of_birth=dto.date_of_birth,
        genre=dto.genre.strip(),
        books=[book_from_in(b) for b in dto.books],
    )

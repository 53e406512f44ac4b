# comments in English; strict reST docstrings
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date

from library_api.services.books.dto import BookCreateIn

# ------------------------------ Output DTOs ------------------------------ #


@dataclass(frozen=True, slots=True)
class AuthorOut:
    """
    Public projection of an Author row.

    :param id: Primary key.
    :type id: uuid.UUID
    :param name: ``"{first_name} {last_name}"``.
    :type name: str
    :param age: Whole years since the date of birth.
    :type age: int
    :param genre: Main genre.
    :type genre: str
    """

    id: uuid.UUID
    name: str
    age: int
    genre: str


# ------------------------------ Input DTOs ------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthorCreateIn:
    """
    Input for creating an author, optionally with books.

    :param first_name: Given name.
    :type first_name: str
    :param last_name: Family name.
    :type last_name: str
    :param date_of_birth: Birth date.
    :type date_of_birth: date
    :param genre: Main genre.
    :type genre: str
    :param books: Books created together with the author.
    :type books: tuple[BookCreateIn, ...]
    """

    first_name: str
    last_name: str
    date_of_birth: date
    genre: str
    books: tuple[BookCreateIn, ...] = ()

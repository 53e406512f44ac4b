# comments in English; strict reST docstrings
from __future__ import annotations

import uuid
from dataclasses import dataclass

# ------------------------------ Output DTOs ------------------------------ #


@dataclass(frozen=True, slots=True)
class BookOut:
    """
    Public projection of a Book row.

    :param id: Primary key.
    :type id: uuid.UUID
    :param title: Book title.
    :type title: str
    :param description: Optional blurb.
    :type description: str | None
    :param author_id: Owning author id.
    :type author_id: uuid.UUID
    """

    id: uuid.UUID
    title: str
    description: str | None
    author_id: uuid.UUID


@dataclass(frozen=True, slots=True)
class BookUpsertOut:
    """
    Result of a PUT/PATCH that may have created the book.

    :param book: Book as stored after the operation.
    :type book: BookOut
    :param created: ``True`` when the book did not exist and was inserted.
    :type created: bool
    """

    book: BookOut
    created: bool


# ------------------------------ Input DTOs ------------------------------- #


@dataclass(frozen=True, slots=True)
class BookCreateIn:
    """
    Input for creating a book under an author.

    :param title: Book title.
    :type title: str
    :param description: Optional blurb.
    :type description: str | None
    """

    title: str
    description: str | None = None


@dataclass(frozen=True, slots=True)
class BookUpdateIn:
    """
    Full replacement of a book's editable fields; also the patch target.

    Both fields default to ``None`` so an empty instance can be patched
    when upserting a book that does not exist yet.

    :param title: Book title.
    :type title: str | None
    :param description: Optional blurb.
    :type description: str | None
    """

    title: str | None = None
    description: str | None = None

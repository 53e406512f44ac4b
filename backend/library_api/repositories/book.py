from __future__ import annotations

import uuid
from collections.abc import Iterable
from typing import Any, cast

from sqlalchemy import Select, func, or_, select

from library_api.models.author import Book
from library_api.repositories.base import BaseRepository, Page
from library_api.services._shared.property_mapping import SortTerm


class BookRepository(BaseRepository[Book]):
    """
    Persistence-only repository for :class:`library_api.models.author.Book`.

    Every lookup is scoped to an author; a book id under the wrong author is
    treated as missing.
    """

    model = Book

    def list_page_for_author(
        self,
        author_id: uuid.UUID,
        terms: Iterable[SortTerm],
        *,
        page_number: int,
        page_size: int,
        search_query: str | None = None,
    ) -> Page[Book]:
        """
        Filter, sort and page the books of one author.

        :param author_id: Owning author.
        :type author_id: uuid.UUID
        :param terms: Translated sort terms.
        :type terms: Iterable[SortTerm]
        :param search_query: Optional substring matched on title or description.
        :type search_query: str | None
        :returns: Page of books.
        :rtype: Page[Book]
        """
        stmt: Select[Any] = select(self.model).where(self.model.author_id == author_id)
        if search_query and search_query.strip():
            pattern = f"%{search_query.strip().lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(self.model.title).like(pattern),
                    func.lower(self.model.description).like(pattern),
                )
            )
        return self.page(stmt, terms, page_number=page_number, page_size=page_size)

    def get_for_author(self, author_id: uuid.UUID, book_id: uuid.UUID) -> Book | None:
        """
        Fetch one book of an author.

        :returns: The book or ``None``.
        :rtype: :class:`library_api.models.author.Book` | None
        """
        stmt = select(self.model).where(
            self.model.author_id == author_id, self.model.id == book_id
        )
        result = self.session.execute(stmt).scalars().first()
        return cast(Book | None, result)

from __future__ import annotations

import uuid
from collections.abc import Iterable, Sequence
from typing import Any, cast

from sqlalchemy import Select, func, or_, select

from library_api.models.author import Author
from library_api.repositories.base import BaseRepository, Page
from library_api.services._shared.property_mapping import SortTerm


class AuthorRepository(BaseRepository[Author]):
    """
    Persistence-only repository for :class:`library_api.models.author.Author`.

    Books are loaded with ``selectin`` (configured on the relationship), so
    listing authors never issues one query per author.
    """

    model = Author

    # ------------------------------- Filters ----------------------------------
    def _filtered(self, *, genre: str | None, search_query: str | None) -> Select[Any]:
        """
        Build the filtered (unsorted) statement.

        * ``genre`` matches exactly, ignoring case and surrounding whitespace.
        * ``search_query`` matches a substring of genre, first or last name.
        """
        stmt: Select[Any] = select(self.model)
        if genre and genre.strip():
            stmt = stmt.where(func.lower(self.model.genre) == genre.strip().lower())
        if search_query and search_query.strip():
            pattern = f"%{search_query.strip().lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(self.model.genre).like(pattern),
                    func.lower(self.model.first_name).like(pattern),
                    func.lower(self.model.last_name).like(pattern),
                )
            )
        return stmt

    # ------------------------------- Listing ----------------------------------
    def list_page(
        self,
        terms: Iterable[SortTerm],
        *,
        page_number: int,
        page_size: int,
        genre: str | None = None,
        search_query: str | None = None,
    ) -> Page[Author]:
        """
        Filter, sort and page authors.

        :param terms: Translated sort terms.
        :type terms: Iterable[SortTerm]
        :param page_number: 1-based page number.
        :type page_number: int
        :param page_size: Page size.
        :type page_size: int
        :param genre: Optional genre filter.
        :type genre: str | None
        :param search_query: Optional free-text search.
        :type search_query: str | None
        :returns: Page of authors.
        :rtype: Page[Author]
        """
        stmt = self._filtered(genre=genre, search_query=search_query)
        return self.page(stmt, terms, page_number=page_number, page_size=page_size)

    def get_many(self, ids: Sequence[uuid.UUID]) -> list[Author]:
        """
        Fetch the authors whose id is in ``ids``, in the order requested.

        Missing ids are simply absent from the result.

        :param ids: Author primary keys.
        :type ids: Sequence[uuid.UUID]
        :returns: Found authors.
        :rtype: list[Author]
        """
        if not ids:
            return []
        stmt = self._default_eagerload(select(self.model).where(self.model.id.in_(list(ids))))
        found = {a.id: a for a in self.session.execute(stmt).scalars().all()}
        return cast(list[Author], [found[i] for i in dict.fromkeys(ids) if i in found])

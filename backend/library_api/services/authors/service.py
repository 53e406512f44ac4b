# comments in English; strict reST docstrings
from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence

from library_api.models.author import Author
from library_api.repositories.author import AuthorRepository
from library_api.repositories.base import Page
from library_api.services._shared.base import BaseService
from library_api.services._shared.dto import ResourceParameters
from library_api.services._shared.errors import ConflictError, NotFoundError

from ._converters import author_from_in, author_to_out
from .dto import AuthorCreateIn, AuthorOut

log = logging.getLogger(__name__)


class AuthorService(BaseService):
    """
    Application service coordinating the **author catalog**.

    Responsibilities
    ----------------
    - List authors with filtering, search, client sort keys and paging.
    - Create authors (alone, with nested books, or as a collection).
    - Read and delete single authors; deleting cascades to their books.

    Notes
    -----
    - This service is framework-agnostic; no Flask/HTTP types leak here.
    - Entities are converted to DTOs inside the unit of work.
    """

    # ------------------------------------------------------------------ #
    # Read
    # ------------------------------------------------------------------ #

    def list(self, params: ResourceParameters) -> Page[AuthorOut]:
        """
        List authors for one page of the collection.

        :param params: Validated collection parameters; ``filter`` is the genre.
        :type params: :class:`ResourceParameters`
        :returns: Page of author projections.
        :rtype: Page[AuthorOut]
        :raises InvalidSortError: When ``order_by`` has an unmapped key.
        """
        terms = self.sort_terms(AuthorOut, Author, params.order_by)
        with self.ro_uow() as uow:
            repo: AuthorRepository = uow.authors
            page = repo.list_page(
                terms,
                page_number=params.page_number,
                page_size=params.page_size,
                genre=params.filter,
                search_query=params.search_query,
            )
            return page.map(author_to_out)

    def get(self, author_id: uuid.UUID) -> AuthorOut:
        """
        Retrieve a single author.

        :raises NotFoundError: When the id does not exist.
        """
        with self.ro_uow() as uow:
            row = uow.authors.get(author_id)
            if row is None:
                raise NotFoundError("Author", str(author_id))
            return author_to_out(row)

    def exists(self, author_id: uuid.UUID) -> bool:
        with self.ro_uow() as uow:
            return uow.authors.exists(author_id)

    def block_creation(self, author_id: uuid.UUID) -> None:
        """
        Reject a POST addressed to a concrete author URI.

        :raises ConflictError: When the author already exists.
        :raises NotFoundError: Otherwise.
        """
        if self.exists(author_id):
            raise ConflictError("Author", f"{author_id} already exists")
        raise NotFoundError("Author", str(author_id))

    def get_collection(self, ids: Sequence[uuid.UUID]) -> list[AuthorOut]:
        """
        Retrieve several authors at once, in request order.

        :param ids: Requested author ids (duplicates collapse).
        :type ids: Sequence[uuid.UUID]
        :returns: Author projections.
        :rtype: list[AuthorOut]
        :raises NotFoundError: Unless every id exists.
        """
        wanted = list(dict.fromkeys(ids))
        with self.ro_uow() as uow:
            rows = uow.authors.get_many(wanted)
            if len(rows) != len(wanted):
                found = {r.id for r in rows}
                missing = ",".join(str(i) for i in wanted if i not in found)
                raise NotFoundError("Author", missing)
            return [author_to_out(r) for r in rows]

    # ------------------------------------------------------------------ #
    # Write
    # ------------------------------------------------------------------ #

    def create(self, dto: AuthorCreateIn) -> AuthorOut:
        """
        Create an author together with any nested books.

        :param dto: Creation DTO.
        :type dto: :class:`AuthorCreateIn`
        :returns: Persisted author projection.
        :rtype: :class:`AuthorOut`
        """
        with self.rw_uow() as uow:
            row = uow.authors.add(author_from_in(dto))
            out = author_to_out(row)
        log.info("author.created", extra={"author_id": str(out.id), "count": len(dto.books)})
        return out

    def create_collection(self, dtos: Sequence[AuthorCreateIn]) -> list[AuthorOut]:
        """
        Create several authors in one transaction.

        :param dtos: Creation DTOs.
        :type dtos: Sequence[AuthorCreateIn]
        :returns: Persisted author projections, in input order.
        :rtype: list[AuthorOut]
        """
        with self.rw_uow() as uow:
            rows = [uow.authors.add(author_from_in(d)) for d in dtos]
            out = [author_to_out(r) for r in rows]
        log.info("author_collection.created", extra={"count": len(out)})
        return out

    def delete(self, author_id: uuid.UUID) -> None:
        """
        Delete an author and its books.

        :raises NotFoundError: When the id does not exist.
        """
        with self.rw_uow() as uow:
            row = uow.authors.get(author_id)
            if row is None:
                raise NotFoundError("Author", str(author_id))
            uow.authors.delete(row)
        log.info("author.deleted", extra={"author_id": str(author_id)})

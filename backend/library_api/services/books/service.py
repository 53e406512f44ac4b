# comments in English; strict reST docstrings
from __future__ import annotations

import dataclasses
import logging
import uuid

from library_api.models.author import Book
from library_api.repositories.base import Page
from library_api.repositories.book import BookRepository
from library_api.schemas.book import BookUpdateSchema
from library_api.services._shared.base import BaseService
from library_api.services._shared.dto import ResourceParameters
from library_api.services._shared.errors import ConflictError, NotFoundError
from library_api.services._shared.patch import PatchDocument, apply_patch
from library_api.uow.sqlalchemy_uow import SQLAlchemyRepositoryContainer

from ._converters import book_from_in, book_to_out, book_to_update_in
from .dto import BookCreateIn, BookOut, BookUpdateIn, BookUpsertOut

log = logging.getLogger(__name__)


class BookService(BaseService):
    """
    Application service for the books of an author.

    Every operation first checks that the author exists; a missing author
    yields :class:`NotFoundError` before the book is looked at.

    Notes
    -----
    - PUT and PATCH upsert: addressing a missing book creates it under the
      requested id.
    - Patched update models are re-validated with :class:`BookUpdateSchema`,
      so a patch can fail with a marshmallow ``ValidationError``.
    """

    _update_schema = BookUpdateSchema()

    @staticmethod
    def _require_author(uow: SQLAlchemyRepositoryContainer, author_id: uuid.UUID) -> None:
        if not uow.authors.exists(author_id):
            raise NotFoundError("Author", str(author_id))

    # ------------------------------------------------------------------ #
    # Read
    # ------------------------------------------------------------------ #

    def list(self, author_id: uuid.UUID, params: ResourceParameters) -> Page[BookOut]:
        """
        List one page of an author's books.

        :param author_id: Owning author.
        :type author_id: uuid.UUID
        :param params: Validated collection parameters.
        :type params: :class:`ResourceParameters`
        :returns: Page of book projections.
        :rtype: Page[BookOut]
        :raises NotFoundError: When the author does not exist.
        """
        terms = self.sort_terms(BookOut, Book, params.order_by)
        with self.ro_uow() as uow:
            self._require_author(uow, author_id)
            repo: BookRepository = uow.books
            page = repo.list_page_for_author(
                author_id,
                terms,
                page_number=params.page_number,
                page_size=params.page_size,
                search_query=params.search_query,
            )
            return page.map(book_to_out)

    def get(self, author_id: uuid.UUID, book_id: uuid.UUID) -> BookOut:
        """
        Retrieve one book of an author.

        :raises NotFoundError: When the author or the book does not exist.
        """
        with self.ro_uow() as uow:
            self._require_author(uow, author_id)
            row = uow.books.get_for_author(author_id, book_id)
            if row is None:
                raise NotFoundError("Book", str(book_id))
            return book_to_out(row)

    # ------------------------------------------------------------------ #
    # Write
    # ------------------------------------------------------------------ #

    def create(self, author_id: uuid.UUID, dto: BookCreateIn) -> BookOut:
        """
        Create a book for an author.

        :param author_id: Owning author.
        :type author_id: uuid.UUID
        :param dto: Validated creation DTO.
        :type dto: :class:`BookCreateIn`
        :returns: Persisted book projection.
        :rtype: :class:`BookOut`
        :raises NotFoundError: When the author does not exist.
        """
        with self.rw_uow() as uow:
            self._require_author(uow, author_id)
            row = book_from_in(dto)
            row.author_id = author_id
            uow.books.add(row)
            out = book_to_out(row)
        log.info("book.created", extra={"author_id": str(author_id), "book_id": str(out.id)})
        return out

    def _upsert(
        self,
        uow: SQLAlchemyRepositoryContainer,
        author_id: uuid.UUID,
        book_id: uuid.UUID,
        dto: BookUpdateIn,
    ) -> BookUpsertOut:
        row = uow.books.get_for_author(author_id, book_id)
        if row is None:
            if uow.books.exists(book_id):
                raise ConflictError("Book", f"{book_id} belongs to another author")
            row = book_from_in(dto)
            row.id = book_id
            row.author_id = author_id
            uow.books.add(row)
            log.info("book.upserted", extra={"author_id": str(author_id), "book_id": str(book_id)})
            return BookUpsertOut(book=book_to_out(row), created=True)

        row.title = dto.title
        row.description = dto.description
        uow.books.flush()
        return BookUpsertOut(book=book_to_out(row), created=False)

    def update(self, author_id: uuid.UUID, book_id: uuid.UUID, dto: BookUpdateIn) -> BookUpsertOut:
        """
        Replace a book's editable fields, creating the book when missing.

        :param dto: Validated update DTO.
        :type dto: :class:`BookUpdateIn`
        :returns: Stored book and whether it was created.
        :rtype: :class:`BookUpsertOut`
        :raises NotFoundError: When the author does not exist.
        :raises ConflictError: When ``book_id`` is taken by another author's book.
        """
        with self.rw_uow() as uow:
            self._require_author(uow, author_id)
            return self._upsert(uow, author_id, book_id, dto)

    def patch(
        self, author_id: uuid.UUID, book_id: uuid.UUID, document: PatchDocument
    ) -> BookUpsertOut:
        """
        Apply a patch document to a book, creating the book when missing.

        A missing book is patched starting from an empty :class:`BookUpdateIn`.

        :param document: Parsed patch document.
        :type document: :class:`PatchDocument`
        :returns: Stored book and whether it was created.
        :rtype: :class:`BookUpsertOut`
        :raises NotFoundError: When the author does not exist.
        :raises PatchError: When an operation cannot be applied.
        :raises marshmallow.ValidationError: When the patched book is invalid.
        """
        with self.rw_uow() as uow:
            self._require_author(uow, author_id)
            row = uow.books.get_for_author(author_id, book_id)
            current = book_to_update_in(row) if row is not None else BookUpdateIn()
            patched = apply_patch(document, current)
            validated: BookUpdateIn = self._update_schema.load(dataclasses.asdict(patched))
            return self._upsert(uow, author_id, book_id, validated)

    def delete(self, author_id: uuid.UUID, book_id: uuid.UUID) -> None:
        """
        Delete one book of an author.

        :raises NotFoundError: When the author or the book does not exist.
        """
        with self.rw_uow() as uow:
            self._require_author(uow, author_id)
            row = uow.books.get_for_author(author_id, book_id)
            if row is None:
                raise NotFoundError("Book", str(book_id))
            uow.books.delete(row)
        log.info(
            "book.deleted",
            extra={"author_id": str(author_id), "book_id": str(book_id)},
        )

from __future__ import annotations

import logging
import uuid
from datetime import date

import pytest
from library_api.models.author import Author, Book
from library_api.services._shared.dto import ResourceParameters
from library_api.services._shared.errors import ConflictError, InvalidSortError, NotFoundError
from library_api.services.authors._converters import age_in_years, author_to_out
from library_api.services.authors.dto import AuthorCreateIn
from library_api.services.authors.service import AuthorService
from library_api.services.books.dto import BookCreateIn
from sqlalchemy import func, select
from tests.factories.author import AuthorFactory, BookFactory


class TestAgeInYears:
    @pytest.mark.parametrize(
        ("today", "expected"),
        [(date(2020, 9, 20), 72), (date(2020, 9, 21), 73), (date(2021, 1, 1), 73)],
    )
    def test_counts_whole_years(self, today, expected):
        assert age_in_years(date(1947, 9, 21), today) == expected

    def test_author_to_out_joins_names(self):
        row = Author(
            id=uuid.uuid4(), first_name="Stephen", last_name="King",
            date_of_birth=date(1947, 9, 21), genre="Horror",
        )
        out = author_to_out(row, today=date(2018, 1, 1))
        assert out.name == "Stephen King"
        assert out.age == 70


class TestAuthorService:
    """Validate AuthorService behaviours for the catalog."""

    # -------------------------- Fixtures ---------------------------------- #

    @pytest.fixture()
    def service(self, registry) -> AuthorService:
        return AuthorService(registry=registry)

    # -------------------------- Helpers ----------------------------------- #

    def _mk_create(self, **overrides) -> AuthorCreateIn:
        data = dict(
            first_name="Douglas",
            last_name="Adams",
            date_of_birth=date(1952, 3, 11),
            genre="Science fiction",
            books=(BookCreateIn(title="The Hitchhiker's Guide to the Galaxy"),),
        )
        data.update(overrides)
        return AuthorCreateIn(**data)

    # --------------------------- Read ------------------------------------- #

    def test_list_filters_and_maps(self, service):
        AuthorFactory(first_name="Stephen", last_name="King", genre="Horror")
        AuthorFactory(first_name="Neil", last_name="Gaiman", genre="Fantasy")

        page = service.list(ResourceParameters(order_by="name", filter="horror", filter_key="genre"))
        assert [a.name for a in page.items] == ["Stephen King"]
        assert page.total_count == 1

    def test_list_rejects_unmapped_sort(self, service):
        with pytest.raises(InvalidSortError):
            service.list(ResourceParameters(order_by="title"))

    def test_get(self, service):
        author = AuthorFactory(first_name="Neil", last_name="Gaiman")
        assert service.get(author.id).name == "Neil Gaiman"

    def test_get_missing_raises(self, service):
        with pytest.raises(NotFoundError):
            service.get(uuid.uuid4())

    def test_block_creation(self, service):
        author = AuthorFactory()
        with pytest.raises(ConflictError):
            service.block_creation(author.id)
        with pytest.raises(NotFoundError):
            service.block_creation(uuid.uuid4())

    def test_get_collection_in_request_order(self, service):
        first, second = AuthorFactory(), AuthorFactory()
        out = service.get_collection([second.id, first.id, second.id])
        assert [a.id for a in out] == [second.id, first.id]

    def test_get_collection_requires_every_id(self, service):
        author = AuthorFactory()
        missing = uuid.uuid4()
        with pytest.raises(NotFoundError) as exc:
            service.get_collection([author.id, missing])
        assert str(missing) in str(exc.value)

    # --------------------------- Write ------------------------------------ #

    def test_create_with_books(self, service, session, caplog):
        with caplog.at_level(logging.INFO):
            out = service.create(self._mk_create())

        assert out.name == "Douglas Adams"
        assert out.genre == "Science fiction"
        row = session.get(Author, out.id)
        assert [b.title for b in row.books] == ["The Hitchhiker's Guide to the Galaxy"]
        assert any(r.getMessage() == "author.created" for r in caplog.records)

    def test_create_trims_names(self, service):
        out = service.create(self._mk_create(first_name="  Douglas ", books=()))
        assert out.name == "Douglas Adams"

    def test_create_collection_is_atomic(self, service, session):
        out = service.create_collection(
            [self._mk_create(), self._mk_create(first_name="Terry", last_name="Pratchett")]
        )
        assert [a.name for a in out] == ["Douglas Adams", "Terry Pratchett"]
        assert session.execute(select(func.count()).select_from(Author)).scalar_one() == 2

    def test_delete_removes_books(self, service, session):
        book = BookFactory()
        author_id = book.author_id
        service.delete(author_id)
        assert session.execute(select(func.count()).select_from(Book)).scalar_one() == 0
        with pytest.raises(NotFoundError):
            service.get(author_id)

    def test_delete_missing_raises(self, service):
        with pytest.raises(NotFoundError):
            service.delete(uuid.uuid4())

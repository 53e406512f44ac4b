from __future__ import annotations

import uuid

import pytest
from library_api.models.author import Book
from library_api.repositories.book import BookRepository
from library_api.services.books.dto import BookOut
from tests.factories.author import AuthorFactory, BookFactory


class TestBookRepository:
    @pytest.fixture()
    def repo(self, session) -> BookRepository:
        return BookRepository(session=session)

    def test_lists_only_the_authors_books(self, repo, registry):
        author = AuthorFactory()
        BookFactory(author=author, title="B side")
        BookFactory(author=author, title="A side")
        BookFactory(title="Elsewhere")

        terms = registry.translate_sort(BookOut, Book, "title")
        page = repo.list_page_for_author(author.id, terms, page_number=1, page_size=10)
        assert [b.title for b in page.items] == ["A side", "B side"]
        assert page.total_count == 2

    def test_search_on_title_and_description(self, repo, registry):
        author = AuthorFactory()
        BookFactory(author=author, title="The Shining", description="Hotel")
        BookFactory(author=author, title="Misery", description="A shining fan")
        BookFactory(author=author, title="It", description="Clown")

        terms = registry.translate_sort(BookOut, Book, "title desc")
        page = repo.list_page_for_author(
            author.id, terms, page_number=1, page_size=10, search_query="SHINING"
        )
        assert [b.title for b in page.items] == ["The Shining", "Misery"]

    def test_get_for_author_is_scoped(self, repo):
        book = BookFactory()
        assert repo.get_for_author(book.author_id, book.id) is not None
        assert repo.get_for_author(uuid.uuid4(), book.id) is None

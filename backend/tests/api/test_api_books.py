"""End-to-end tests for the book endpoints nested under an author."""

from __future__ import annotations

import json
import uuid

import pytest
from tests.factories.author import AuthorFactory, BookFactory

HYPERMEDIA = "application/vnd.library.hateoas+json"


def _books_url(author_id, book_id=None) -> str:
    base = f"/api/v1/authors/{author_id}/books"
    return base if book_id is None else f"{base}/{book_id}"


@pytest.fixture()
def book():
    return BookFactory(title="It", description="Clowns")


class TestListBooks:
    def test_sorted_and_paged(self, client):
        author = AuthorFactory()
        for title in ["Misery", "Carrie", "Cujo"]:
            BookFactory(author=author, title=title)

        response = client.get(_books_url(author.id), query_string={"page_size": 2})

        assert [b["title"] for b in response.get_json()] == ["Carrie", "Cujo"]
        meta = json.loads(response.headers["X-Pagination"])
        assert meta["total_count"] == 3
        assert meta["next_page_link"].startswith(f"http://localhost{_books_url(author.id)}?")

    def test_shaped_with_search(self, client):
        author = AuthorFactory()
        BookFactory(author=author, title="The Shining", description="Hotel")
        BookFactory(author=author, title="Misery", description="Fan")

        response = client.get(
            _books_url(author.id), query_string={"search_query": "hotel", "fields": "title"}
        )

        body = response.get_json()
        assert [list(b) for b in body] == [["id", "title"]]
        assert body[0]["title"] == "The Shining"

    def test_hypermedia(self, client, book):
        body = client.get(_books_url(book.author_id), headers={"Accept": HYPERMEDIA}).get_json()

        assert [link["rel"] for link in body["links"]] == ["self"]
        item = body["value"][0]
        assert [link["rel"] for link in item["links"]] == [
            "self",
            "delete_book",
            "update_book",
            "partially_update_book",
            "author",
        ]

    def test_author_sort_keys_are_rejected(self, client, book):
        response = client.get(_books_url(book.author_id), query_string={"order_by": "name"})
        assert response.status_code == 400
        assert response.get_json()["code"] == "invalid_sort"

    def test_missing_author(self, client):
        assert client.get(_books_url(uuid.uuid4())).status_code == 404


class TestSingleBook:
    def test_get(self, client, book):
        body = client.get(_books_url(book.author_id, book.id)).get_json()

        assert body == {
            "id": str(book.id),
            "title": "It",
            "description": "Clowns",
            "author_id": str(book.author_id),
        }

    def test_get_shaped(self, client, book):
        body = client.get(_books_url(book.author_id, book.id), query_string={"fields": "title"})
        assert body.get_json() == {"id": str(book.id), "title": "It"}

    def test_get_under_wrong_author(self, client, book):
        other = AuthorFactory()
        assert client.get(_books_url(other.id, book.id)).status_code == 404


class TestCreateBook:
    def test_create(self, client):
        author = AuthorFactory()

        response = client.post(
            _books_url(author.id), json={"title": "Carrie", "description": "Prom night"}
        )

        assert response.status_code == 201
        body = response.get_json()
        assert body["author_id"] == str(author.id)
        assert response.headers["Location"].endswith(_books_url(author.id, body["id"]))

    def test_create_for_missing_author(self, client):
        response = client.post(_books_url(uuid.uuid4()), json={"title": "Carrie"})
        assert response.status_code == 404

    def test_title_equal_to_description(self, client):
        author = AuthorFactory()

        response = client.post(_books_url(author.id), json={"title": "Same", "description": "Same"})

        assert response.status_code == 422
        assert "description" in response.get_json()["details"]["errors"]


class TestUpdateBook:
    def test_put_existing_is_204(self, client, book):
        response = client.put(
            _books_url(book.author_id, book.id),
            json={"title": "It (1986)", "description": "Pennywise"},
        )

        assert response.status_code == 204
        body = client.get(_books_url(book.author_id, book.id)).get_json()
        assert body["title"] == "It (1986)"

    def test_put_missing_creates_201(self, client):
        author = AuthorFactory()
        book_id = uuid.uuid4()

        response = client.put(
            _books_url(author.id, book_id), json={"title": "Cujo", "description": "A dog"}
        )

        assert response.status_code == 201
        assert response.get_json()["id"] == str(book_id)
        assert response.headers["Location"].endswith(_books_url(author.id, book_id))

    def test_put_requires_description(self, client, book):
        response = client.put(_books_url(book.author_id, book.id), json={"title": "It"})
        assert response.status_code == 422

    def test_put_id_of_another_authors_book(self, client, book):
        other = AuthorFactory()

        response = client.put(
            _books_url(other.id, book.id), json={"title": "x", "description": "y"}
        )

        assert response.status_code == 409


class TestPatchBook:
    def test_patch_existing_is_204(self, client, book):
        response = client.patch(
            _books_url(book.author_id, book.id),
            json=[{"op": "replace", "path": "/title", "value": "It: Chapter Two"}],
        )

        assert response.status_code == 204
        body = client.get(_books_url(book.author_id, book.id)).get_json()
        assert body["title"] == "It: Chapter Two"
        assert body["description"] == "Clowns"

    def test_patch_missing_creates_201(self, client):
        author = AuthorFactory()
        book_id = uuid.uuid4()

        response = client.patch(
            _books_url(author.id, book_id),
            json=[
                {"op": "add", "path": "/title", "value": "Christine"},
                {"op": "add", "path": "/description", "value": "A car"},
            ],
        )

        assert response.status_code == 201
        assert response.get_json()["title"] == "Christine"

    def test_patch_invalid_result_is_422(self, client, book):
        response = client.patch(
            _books_url(book.author_id, book.id),
            json=[{"op": "remove", "path": "/title"}],
        )

        assert response.status_code == 422
        assert response.get_json()["code"] == "validation_error"

    def test_patch_unknown_path_is_422(self, client, book):
        response = client.patch(
            _books_url(book.author_id, book.id),
            json=[{"op": "replace", "path": "/isbn", "value": "1"}],
        )

        assert response.status_code == 422
        assert response.get_json()["code"] == "unprocessable_entity"

    def test_patch_failed_test_op_is_422(self, client, book):
        response = client.patch(
            _books_url(book.author_id, book.id),
            json=[{"op": "test", "path": "/title", "value": "Carrie"}],
        )
        assert response.status_code == 422

    def test_patch_document_must_be_array(self, client, book):
        response = client.patch(
            _books_url(book.author_id, book.id),
            json={"op": "replace", "path": "/title", "value": "x"},
        )
        assert response.status_code == 422


class TestDeleteBook:
    def test_delete(self, client, book):
        url = _books_url(book.author_id, book.id)

        assert client.delete(url).status_code == 204
        assert client.get(url).status_code == 404

    def test_delete_missing(self, client):
        author = AuthorFactory()
        assert client.delete(_books_url(author.id, uuid.uuid4())).status_code == 404

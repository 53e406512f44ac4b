"""End-to-end tests for creating and fetching several authors at once."""

from __future__ import annotations

import uuid

from tests.factories.author import AuthorFactory

BASE = "/api/v1/authorcollections"

AUTHORS = [
    {"first_name": "Tom", "last_name": "Lanoye", "date_of_birth": "1958-08-27", "genre": "Various"},
    {
        "first_name": "Douglas",
        "last_name": "Adams",
        "date_of_birth": "1952-03-11",
        "genre": "Science fiction",
        "books": [{"title": "The Hitchhiker's Guide to the Galaxy"}],
    },
]


def test_create_then_fetch_round_trip(client):
    response = client.post(BASE, json=AUTHORS)

    assert response.status_code == 201
    created = response.get_json()
    assert [a["name"] for a in created] == ["Tom Lanoye", "Douglas Adams"]

    location = response.headers["Location"]
    ids = ",".join(a["id"] for a in created)
    assert location.endswith(f"{BASE}/({ids})")

    fetched = client.get(location.replace("http://localhost", ""))
    assert fetched.status_code == 200
    assert fetched.get_json() == created


def test_create_requires_an_array(client):
    assert client.post(BASE, json=AUTHORS[0]).status_code == 400


def test_create_is_all_or_nothing(client):
    payload = AUTHORS + [{"first_name": "Incomplete"}]

    assert client.post(BASE, json=payload).status_code == 422
    assert client.get("/api/v1/authors").get_json() == []


def test_fetch_requires_every_id(client):
    author = AuthorFactory()

    response = client.get(f"{BASE}/({author.id},{uuid.uuid4()})")

    assert response.status_code == 404


def test_fetch_rejects_malformed_ids(client):
    response = client.get(f"{BASE}/(one,two)")

    assert response.status_code == 400
    assert response.get_json()["code"] == "invalid_ids"


def test_fetch_keeps_request_order(client):
    first, second = AuthorFactory(), AuthorFactory()

    body = client.get(f"{BASE}/({second.id},{first.id})").get_json()

    assert [a["id"] for a in body] == [str(second.id), str(first.id)]

"""Idempotent sample catalog for local development environments."""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Any, cast

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import select
from sqlalchemy.orm import Session

from library_api.models.author import Author, Book

LOGGER = logging.getLogger(__name__)

#: Namespace for deterministic ids, so reseeding never duplicates rows
SEED_NAMESPACE = uuid.UUID("6f1c2b9e-3c5d-4e0a-9a57-0c1b8f6d2a44")

AUTHOR_FIXTURES: list[dict[str, Any]] = [
    {
        "first_name": "Stephen",
        "last_name": "King",
        "date_of_birth": date(1947, 9, 21),
        "genre": "Horror",
        "books": [
            ("The Shining", "The Shining is a horror novel by American author Stephen King. "
             "Published in 1977, it is King's third published novel and first hardback bestseller."),
            ("Misery", "Misery is a 1987 psychological horror novel by Stephen King."),
            ("It", "It is a 1986 horror novel by American author Stephen King. "
             "The story follows the exploits of seven children as they are terrorized by an "
             "eponymous being."),
            ("The Stand", "The Stand is a post-apocalyptic horror/fantasy novel by American "
             "author Stephen King."),
        ],
    },
    {
        "first_name": "George",
        "last_name": "RR Martin",
        "date_of_birth": date(1948, 9, 20),
        "genre": "Fantasy",
        "books": [
            ("A Game of Thrones", "A Game of Thrones is the first novel in A Song of Ice and "
             "Fire, a series of fantasy novels by American author George R. R. Martin."),
            ("The Winds of Winter", "Forthcoming 6th novel in A Song of Ice and Fire."),
            ("A Dance with Dragons", "A Dance with Dragons is the fifth of seven planned novels "
             "in the epic fantasy series A Song of Ice and Fire."),
        ],
    },
    {
        "first_name": "Neil",
        "last_name": "Gaiman",
        "date_of_birth": date(1960, 11, 10),
        "genre": "Fantasy",
        "books": [
            ("American Gods", "American Gods is a Hugo and Nebula Award-winning novel by English "
             "author Neil Gaiman."),
        ],
    },
    {
        "first_name": "Tom",
        "last_name": "Lanoye",
        "date_of_birth": date(1958, 8, 27),
        "genre": "Various",
        "books": [
            ("Speechless", "Good-natured and often humorous, Speechless is at times a 'song of "
             "curses', as Lanoye describes the conflicts with his beloved diva of a mother."),
        ],
    },
    {
        "first_name": "Douglas",
        "last_name": "Adams",
        "date_of_birth": date(1952, 3, 11),
        "genre": "Science fiction",
        "books": [
            ("The Hitchhiker's Guide to the Galaxy", "The Hitchhiker's Guide to the Galaxy is "
             "the first of six books in the Hitchhiker's Guide to the Galaxy comedy science "
             "fiction trilogy by Douglas Adams."),
        ],
    },
    {
        "first_name": "Jens",
        "last_name": "Lapidus",
        "date_of_birth": date(1974, 5, 20),
        "genre": "Thriller",
        "books": [
            ("Easy Money", "Easy Money or Snabba cash is a novel from 2006 by Jens Lapidus."),
        ],
    },
]


def _session(database: SQLAlchemy) -> Session:
    """Return the current SQLAlchemy session."""
    return cast(Session, database.session)


def _touch(summary: dict[str, dict[str, int]], table: str, created: bool) -> None:
    """Update summary counters for the given table."""
    entry = summary.setdefault(table, {"created": 0, "existing": 0})
    if created:
        entry["created"] += 1
    else:
        entry["existing"] += 1


def seed_catalog(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Create the sample authors and their books when missing."""
    if verbose:
        LOGGER.info("Seeding authors and books...")
    session = _session(database)
    summary: dict[str, dict[str, int]] = {}

    with session.begin():
        for fixture in AUTHOR_FIXTURES:
            author_id = uuid.uuid5(SEED_NAMESPACE, f"{fixture['first_name']} {fixture['last_name']}")
            author = session.execute(select(Author).filter_by(id=author_id)).scalar_one_or_none()
            created = author is None
            if author is None:
                author = Author(
                    id=author_id,
                    first_name=fixture["first_name"],
                    last_name=fixture["last_name"],
                    date_of_birth=fixture["date_of_birth"],
                    genre=fixture["genre"],
                )
                session.add(author)
            _touch(summary, "authors", created)

            for title, description in fixture["books"]:
                book_id = uuid.uuid5(SEED_NAMESPACE, f"{author_id}/{title}")
                exists = session.execute(select(Book.id).filter_by(id=book_id)).scalar()
                if exists is None:
                    session.add(
                        Book(id=book_id, title=title, description=description, author_id=author_id)
                    )
                _touch(summary, "books", exists is None)
            session.flush()
    return summary


def run_all(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Run all seeders in the correct foreign-key order."""
    if verbose:
        LOGGER.info("Running full seed pipeline...")
    return seed_catalog(database, verbose=verbose)


__all__ = ["seed_catalog", "run_all", "AUTHOR_FIXTURES"]

"""Catalog models: authors and the books they wrote."""

from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import Date, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.core.extensions import db

from .base import ReprMixin, TimestampMixin, UUIDPKMixin


class Author(UUIDPKMixin, TimestampMixin, ReprMixin, db.Model):
    """
    Author of one or more books.

    Notes
    -----
    - Deleting an author deletes its books (ORM cascade, mirrored by the FK ``ON DELETE CASCADE``).
    - ``genre`` is free text; filtering compares it case-insensitively.
    """

    __tablename__ = "authors"

    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    genre: Mapped[str] = mapped_column(String(50), nullable=False)

    __table_args__ = (
        Index("ix_authors_last_first", "last_name", "first_name"),
        Index("ix_authors_genre", "genre"),
    )

    books: Mapped[list[Book]] = relationship(
        "Book",
        back_populates="author",
        cascade="all, delete-orphan",
        order_by="Book.title",
        lazy="selectin",
    )


class Book(UUIDPKMixin, TimestampMixin, ReprMixin, db.Model):
    """A book written by exactly one author."""

    __tablename__ = "books"

    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500))
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("authors.id", ondelete="CASCADE"), nullable=False, index=True
    )

    author: Mapped[Author] = relationship("Author", back_populates="books")

"""Generic repository base and paging utilities for SQLAlchemy 2.x.

This module centralizes persistence-only concerns shared by all repositories:
- Page-aware results with navigation metadata (:class:`Page`).
- Translated sort terms applied as ``ORDER BY`` clauses.
- Deterministic pagination (adds primary-key tiebreaker).
- Total counting with ``ORDER BY`` stripped.
- No business logic, no commit/rollback; Services own transactions.

Design decisions
----------------
* Repositories MUST remain thin and persistence-focused:
  - They never implement use cases or domain policies.
  - They never call commit/rollback; Services define the Unit of Work.
* Client sort keys never reach this layer: services translate them through
  the property-mapping registry first, and repositories only see
  :class:`~library_api.services._shared.property_mapping.SortTerm` values.
* ``paginate`` never clamps: out-of-range pages yield empty items.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from library_api.core.extensions import db
from library_api.services._shared.errors import ConfigurationError
from library_api.services._shared.property_mapping import SortTerm

E = TypeVar("E")  # SQLAlchemy mapped entity type
R = TypeVar("R")


# ------------------------------- Pagination ----------------------------------


@dataclass(frozen=True, slots=True)
class Page(Generic[E]):
    """Result page with navigation metadata.

    :param items: Items in the current page.
    :type items: Sequence[E]
    :param total_count: Items in the full (filtered) source.
    :type total_count: int
    :param page_size: Requested page size.
    :type page_size: int
    :param current_page: 1-based page number that was requested.
    :type current_page: int
    """

    items: Sequence[E]
    total_count: int
    page_size: int
    current_page: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    def map(self, fn: Callable[[E], R]) -> Page[R]:
        """Convert every item with ``fn``, keeping the metadata.

        :param fn: Item converter (e.g. entity → DTO).
        :type fn: Callable[[E], R]
        :returns: New page of converted items.
        :rtype: Page[R]
        """
        return Page(
            items=[fn(item) for item in self.items],
            total_count=self.total_count,
            page_size=self.page_size,
            current_page=self.current_page,
        )


def _check_page_args(page_number: int, page_size: int) -> None:
    if page_number < 1:
        raise ValueError("page_number must be >= 1")
    if page_size < 1:
        raise ValueError("page_size must be >= 1")


def build_page(
    fetch: Callable[[int, int], Sequence[E]],
    total: int,
    page_number: int,
    page_size: int,
) -> Page[E]:
    """Build one page from a known total and a slice fetcher.

    ``fetch(offset, limit)`` is only called when the page overlaps the
    result set, so an arbitrarily large ``page_number`` never reaches the
    backing store as an ``OFFSET``.

    :param fetch: Returns at most ``limit`` items starting at ``offset``.
    :type fetch: Callable[[int, int], Sequence[E]]
    :param total: Number of items in the full result set.
    :type total: int
    :param page_number: 1-based page number (not clamped).
    :type page_number: int
    :param page_size: Page size (>= 1).
    :type page_size: int
    :returns: Requested page; empty items when out of range.
    :rtype: Page[E]
    """
    _check_page_args(page_number, page_size)
    offset = (page_number - 1) * page_size
    items = list(fetch(offset, page_size)) if offset < total else []
    return Page(items=items, total_count=total, page_size=page_size, current_page=page_number)


def paginate(source: Iterable[E], page_number: int, page_size: int) -> Page[E]:
    """Page an in-memory, already filtered and sorted source.

    :param source: Items to page; materialized once to count them.
    :type source: Iterable[E]
    :param page_number: 1-based page number (not clamped).
    :type page_number: int
    :param page_size: Page size (>= 1).
    :type page_size: int
    :returns: Requested page; empty items when out of range.
    :rtype: Page[E]
    """
    _check_page_args(page_number, page_size)
    items = list(source)
    return build_page(
        lambda offset, limit: items[offset : offset + limit],
        len(items),
        page_number,
        page_size,
    )


# ----------------------------- Sorting utilities -----------------------------


def apply_sort_terms(
    stmt: Select[Any],
    model: type[Any],
    terms: Iterable[SortTerm],
    *,
    pk_attr: InstrumentedAttribute[Any] | None,
) -> Select[Any]:
    """Apply translated sort terms as ``ORDER BY`` clauses.

    The model's primary key is always appended as a final ascending
    tiebreaker to stabilize pagination.

    :param stmt: Base selectable.
    :type stmt: :class:`sqlalchemy.sql.Select`
    :param model: Mapped class the term properties belong to.
    :type model: type
    :param terms: Terms produced by the property-mapping registry.
    :type terms: Iterable[SortTerm]
    :param pk_attr: Primary-key attribute used as a tiebreaker.
    :type pk_attr: InstrumentedAttribute | None
    :returns: Modified select with ``ORDER BY`` clauses.
    :rtype: :class:`sqlalchemy.sql.Select`
    :raises ConfigurationError: If a term names a missing column.
    """
    orders: list[Any] = []
    for term in terms:
        col = getattr(model, term.property, None)
        if not isinstance(col, InstrumentedAttribute):
            raise ConfigurationError(
                f"Sort property '{term.property}' is not a column of {model.__name__}"
            )
        orders.append(col.desc() if term.descending else col.asc())

    if orders:
        stmt = stmt.order_by(*orders)

    # Always add PK as a final tiebreaker to stabilize pagination
    if pk_attr is not None:
        stmt = stmt.order_by(pk_attr.asc())

    return stmt


# --------------------------- Pagination execution ----------------------------


def paginate_select(
    session: Session,
    stmt: Select[Any],
    *,
    page_number: int,
    page_size: int,
) -> Page[Any]:
    """Execute a select as one page plus a total count.

    The statement's existing ``ORDER BY`` is stripped for the ``COUNT`` to avoid
    unnecessary sorting overhead.

    :param session: Active SQLAlchemy session.
    :type session: :class:`sqlalchemy.orm.Session`
    :param stmt: Base select to paginate (already filtered/sorted).
    :type stmt: :class:`sqlalchemy.sql.Select`
    :param page_number: 1-based page number (not clamped).
    :type page_number: int
    :param page_size: Page size (>= 1).
    :type page_size: int
    :returns: Page of scalar results.
    :rtype: Page[Any]
    """
    _check_page_args(page_number, page_size)

    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = int(session.execute(count_stmt).scalar_one())

    def fetch(offset: int, limit: int) -> Sequence[Any]:
        return session.execute(stmt.limit(limit).offset(offset)).scalars().all()

    return build_page(fetch, total, page_number, page_size)


# ------------------------------ Base repository ------------------------------


class BaseRepository(Generic[E]):
    """Generic, persistence-only repository for a single aggregate.

    Subclasses MUST define:

    * ``model``: the SQLAlchemy mapped class.

    Subclasses MAY override:

    * ``_default_eagerload`` to attach eager-loading options.

    This class NEVER:

    * opens/commits/rolls back transactions,
    * implements business rules or cross-aggregate coordination.

    Services orchestrate use cases and own transaction boundaries.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """Initialise the repository with an optional SQLAlchemy session.

        When no explicit session is provided the repository falls back to the
        Flask-scoped session exposed by ``library_api.core.extensions``.

        :param session: Session shared across the Unit of Work scope.
        :type session: :class:`sqlalchemy.orm.Session` | None
        """
        self._session: Session | None = session

    # ------------------------------ Session access ---------------------------

    @property
    def session(self) -> Session:
        """Return the active SQLAlchemy session.

        :returns: Active session bound to the current Unit of Work.
        :rtype: :class:`sqlalchemy.orm.Session`
        """
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Extensibility ----------------------------

    def _default_eagerload(self, stmt: Select[Any]) -> Select[Any]:
        """Attach eager-loading options to generic get/list operations.

        :param stmt: Base select.
        :type stmt: :class:`sqlalchemy.sql.Select`
        :returns: Potentially modified select with eager options.
        :rtype: :class:`sqlalchemy.sql.Select`
        """
        return stmt

    def _pk_attr(self) -> InstrumentedAttribute[Any]:
        """Return the model's primary-key attribute (``model.id``)."""
        return cast(InstrumentedAttribute[Any], getattr(self.model, "id"))

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage a new entity for persistence and flush it.

        :param instance: New entity instance.
        :type instance: E
        :returns: The same instance after ``flush()``.
        :rtype: E
        """
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Retrieve a single entity by primary key.

        :param entity_id: Primary-key value.
        :type entity_id: Any
        :returns: Entity or ``None``.
        :rtype: E | None
        """
        stmt = self._default_eagerload(select(self.model).where(self._pk_attr() == entity_id))
        result = self.session.execute(stmt).scalars().first()
        return cast(E | None, result)

    def exists(self, entity_id: Any) -> bool:
        """Check whether an entity with this primary key exists.

        :param entity_id: Primary-key value.
        :type entity_id: Any
        :returns: ``True`` when a row matches, else ``False``.
        :rtype: bool
        """
        pk = self._pk_attr()
        stmt = select(pk).where(pk == entity_id).limit(1)
        return self.session.execute(stmt).scalar() is not None

    def delete(self, instance: E) -> None:
        """Delete an entity and flush changes.

        :param instance: Entity to delete.
        :type instance: E
        """
        self.session.delete(instance)
        self.flush()

    def flush(self) -> None:
        """Flush pending changes to the database without committing."""
        self.session.flush()

    # ------------------------------- Listing ---------------------------------

    def page(
        self,
        stmt: Select[Any],
        terms: Iterable[SortTerm],
        *,
        page_number: int,
        page_size: int,
    ) -> Page[E]:
        """Sort and page a filtered statement over this repository's model.

        :param stmt: Filtered select over ``model``.
        :type stmt: :class:`sqlalchemy.sql.Select`
        :param terms: Translated sort terms.
        :type terms: Iterable[SortTerm]
        :param page_number: 1-based page number.
        :type page_number: int
        :param page_size: Page size.
        :type page_size: int
        :returns: :class:`Page` with items and metadata.
        :rtype: Page[E]
        """
        stmt = self._default_eagerload(stmt)
        stmt = apply_sort_terms(stmt, self.model, terms, pk_attr=self._pk_attr())
        return cast(
            Page[E],
            paginate_select(self.session, stmt, page_number=page_number, page_size=page_size),
        )

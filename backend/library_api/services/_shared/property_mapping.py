"""
Client sort keys → backing-store sort expressions.

Each exposed resource (a DTO type) is paired with the entity it is read from.
For that pair a :class:`PropertyMapping` declares which client-facing sort
keys exist and which entity properties they expand to. ``name`` on an author,
for instance, sorts by ``first_name`` then ``last_name``, and ``age`` sorts by
``date_of_birth`` in the opposite direction.

The registry is populated once at startup and only read afterwards, so it can
be shared across requests without locking.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from library_api.services._shared.errors import ConfigurationError, InvalidSortError

_DESC_SUFFIX = " desc"


@dataclass(frozen=True, slots=True)
class SortTarget:
    """
    One backing-store property a client sort key expands to.

    :param property: Entity attribute name.
    :type property: str
    :param reverse: Invert the requested direction for this property.
    :type reverse: bool
    """

    property: str
    reverse: bool = False


@dataclass(frozen=True, slots=True)
class PropertyMappingValue:
    """
    Ordered, non-empty list of sort targets for one client key.

    :param targets: Targets in the order they should be applied.
    :type targets: tuple[SortTarget, ...]
    :raises ConfigurationError: If ``targets`` is empty.
    """

    targets: tuple[SortTarget, ...]

    def __post_init__(self) -> None:
        if not self.targets:
            raise ConfigurationError("A sort key must expand to at least one property.")

    @classmethod
    def of(cls, *properties: str, reverse: bool = False) -> PropertyMappingValue:
        """Shortcut for keys whose targets share the same ``reverse`` flag."""
        return cls(tuple(SortTarget(p, reverse) for p in properties))


@dataclass(frozen=True, slots=True)
class SortTerm:
    """
    A single translated ``ORDER BY`` term.

    :param property: Entity attribute name.
    :type property: str
    :param descending: Effective direction after applying ``reverse``.
    :type descending: bool
    """

    property: str
    descending: bool = False


class PropertyMapping:
    """
    Case-insensitive table of client sort keys for one (DTO, entity) pair.

    :param entries: Client key → :class:`PropertyMappingValue`.
    :type entries: Mapping[str, PropertyMappingValue]
    :raises ConfigurationError: If two keys differ only by case.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, PropertyMappingValue]) -> None:
        table: dict[str, PropertyMappingValue] = {}
        for key, value in entries.items():
            folded = key.strip().casefold()
            if not folded:
                raise ConfigurationError("Sort keys cannot be blank.")
            if folded in table:
                raise ConfigurationError(f"Duplicate sort key: {key!r}")
            table[folded] = value
        self._entries = table

    def get(self, key: str) -> PropertyMappingValue | None:
        """Return the value for ``key`` (case-insensitive) or ``None``."""
        return self._entries.get(key.strip().casefold())

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None


def parse_sort_clauses(order_by: str) -> Iterator[tuple[str, bool]]:
    """
    Split a client sort expression into ``(key, descending)`` pairs.

    Clauses are comma separated and trimmed. A trailing ``" desc"`` (any case)
    requests descending order. Empty clauses are skipped.

    :param order_by: Raw expression, e.g. ``"genre, name desc"``.
    :type order_by: str
    :returns: Iterator of ``(key, descending)``.
    """
    for raw in order_by.split(","):
        clause = raw.strip()
        if not clause:
            continue
        descending = clause.lower().endswith(_DESC_SUFFIX)
        if descending:
            clause = clause[: -len(_DESC_SUFFIX)].strip()
        yield clause, descending


class PropertyMappingRegistry:
    """
    Holds every sort mapping, keyed by ``(dto_type, entity_type)``.

    Examples
    --------
    >>> registry = PropertyMappingRegistry()
    >>> registry.register(AuthorOut, Author, PropertyMapping({...}))
    >>> registry.is_valid_sort(AuthorOut, Author, "name desc")
    True
    """

    def __init__(self) -> None:
        self._mappings: dict[tuple[type, type], PropertyMapping] = {}

    def register(self, dto_type: type, entity_type: type, mapping: PropertyMapping) -> None:
        """
        Register the mapping for a pair.

        :raises ConfigurationError: If the pair is already registered.
        """
        key = (dto_type, entity_type)
        if key in self._mappings:
            raise ConfigurationError(
                f"Sort mapping already registered for {dto_type.__name__} -> {entity_type.__name__}"
            )
        self._mappings[key] = mapping

    def resolve(self, dto_type: type, entity_type: type) -> PropertyMapping:
        """
        Return the mapping registered for a pair.

        :raises ConfigurationError: If no mapping is registered.
        """
        try:
            return self._mappings[(dto_type, entity_type)]
        except KeyError:
            raise ConfigurationError(
                f"No sort mapping registered for {dto_type.__name__} -> {entity_type.__name__}"
            ) from None

    def is_valid_sort(self, dto_type: type, entity_type: type, order_by: str | None) -> bool:
        """
        Check that every clause of ``order_by`` names a mapped key.

        Blank expressions are invalid. This never raises for malformed client
        input; a missing mapping for the pair still raises
        :class:`ConfigurationError`.

        :returns: ``True`` when the expression can be translated.
        :rtype: bool
        """
        mapping = self.resolve(dto_type, entity_type)
        if order_by is None or not order_by.strip():
            return False
        clauses = list(parse_sort_clauses(order_by))
        if not clauses:
            return False
        return all(key in mapping for key, _ in clauses)

    def translate_sort(self, dto_type: type, entity_type: type, order_by: str) -> list[SortTerm]:
        """
        Expand a validated sort expression into entity sort terms.

        The effective direction of each target is the requested direction
        flipped when the target is marked ``reverse``.

        :returns: Terms in clause order, then declaration order.
        :rtype: list[SortTerm]
        :raises InvalidSortError: If a clause has no mapping entry.
        """
        mapping = self.resolve(dto_type, entity_type)
        terms: list[SortTerm] = []
        for key, descending in parse_sort_clauses(order_by):
            value = mapping.get(key)
            if value is None:
                raise InvalidSortError(key)
            terms.extend(SortTerm(t.property, descending != t.reverse) for t in value.targets)
        return terms

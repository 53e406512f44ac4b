"""
Field selection and projection of output DTOs.

A client may ask for a subset of a resource's fields (``?fields=id,name``).
:class:`FieldSelector` validates such lists and :class:`Projector` reduces a
DTO to an ordered ``dict`` holding only those fields.

Each resource type gets an explicit accessor table (:class:`ResourceFields`),
built once from its dataclass declaration and cached for the process.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from functools import cache
from operator import attrgetter
from typing import Any

from library_api.services._shared.errors import ConfigurationError, UnknownFieldError

ShapedResource = dict[str, Any]

ALL_FIELDS = "*"


def split_fields(fields: str | None) -> Iterator[str]:
    """Yield trimmed, non-empty tokens of a comma-separated field list."""
    if not fields:
        return
    for raw in fields.split(","):
        token = raw.strip()
        if token:
            yield token


def _wants_all(fields: str | None) -> bool:
    tokens = list(split_fields(fields))
    return not tokens or tokens == [ALL_FIELDS]


@dataclass(frozen=True, slots=True)
class ResourceFields:
    """
    Accessor table for one resource type.

    :param resource: Display name used in error messages.
    :type resource: str
    :param id_field: Canonical name of the identifier field.
    :type id_field: str
    :param accessors: Canonical field name → getter, in declaration order.
    :type accessors: Mapping[str, Callable[[Any], Any]]
    """

    resource: str
    id_field: str
    accessors: Mapping[str, Callable[[Any], Any]]

    @classmethod
    def from_dataclass(cls, resource_type: type, *, id_field: str = "id") -> ResourceFields:
        """Build the table from a dataclass' declared fields."""
        if not dataclasses.is_dataclass(resource_type):
            raise ConfigurationError(f"{resource_type.__name__} is not a dataclass")
        names = [f.name for f in dataclasses.fields(resource_type)]
        if id_field not in names:
            raise ConfigurationError(f"{resource_type.__name__} has no '{id_field}' field")
        return cls(
            resource=resource_type.__name__,
            id_field=id_field,
            accessors={name: attrgetter(name) for name in names},
        )

    @property
    def names(self) -> list[str]:
        return list(self.accessors)

    def canonical(self, name: str) -> str | None:
        """Return the declared spelling of ``name`` (case-insensitive), if any."""
        folded = name.casefold()
        for declared in self.accessors:
            if declared.casefold() == folded:
                return declared
        return None


@cache
def resource_fields(resource_type: type) -> ResourceFields:
    """Return the cached accessor table for a DTO type."""
    return ResourceFields.from_dataclass(resource_type)


class FieldSelector:
    """Validate client field lists against a resource's declared fields."""

    def has_properties(self, resource_type: type, fields: str | None) -> bool:
        """
        Check that every requested field exists on ``resource_type``.

        Empty input, or ``"*"`` alone, means all fields and is always valid.
        Matching ignores case and surrounding whitespace; empty tokens are
        skipped. Never raises for malformed client input.

        :param resource_type: Output DTO type.
        :type resource_type: type
        :param fields: Raw comma-separated list from the query string.
        :type fields: str | None
        :returns: ``True`` when every token names a field.
        :rtype: bool
        """
        if _wants_all(fields):
            return True
        table = resource_fields(resource_type)
        return all(table.canonical(token) is not None for token in split_fields(fields))


class Projector:
    """Reduce resources to ordered projections of the requested fields."""

    def shape(
        self, resource: Any, fields: str | None, *, resource_type: type | None = None
    ) -> ShapedResource:
        """
        Project one resource.

        With no field list every declared field is returned in declaration
        order. Otherwise the identifier comes first, followed by the requested
        fields in request order under their canonical names; repeats are kept
        once. A ``Mapping`` (an already shaped resource) is read by key, so
        re-shaping with the same list is a no-op.

        :param resource: DTO instance or a shape-compatible mapping.
        :param fields: Comma-separated field list, validated by the caller.
        :type fields: str | None
        :param resource_type: DTO type; required when ``resource`` is a mapping.
        :type resource_type: type | None
        :returns: Ordered projection.
        :rtype: ShapedResource
        :raises UnknownFieldError: If a field is not declared.
        """
        table = resource_fields(resource_type or type(resource))
        if _wants_all(fields):
            selected = table.names
        else:
            selected = [table.id_field]
            for token in split_fields(fields):
                name = table.canonical(token)
                if name is None:
                    raise UnknownFieldError(token, table.resource)
                if name not in selected:
                    selected.append(name)

        if isinstance(resource, Mapping):
            shaped: ShapedResource = {}
            for name in selected:
                if name not in resource:
                    raise UnknownFieldError(name, table.resource)
                shaped[name] = resource[name]
            return shaped
        return {name: table.accessors[name](resource) for name in selected}

    def shape_all(
        self, resources: Iterable[Any], fields: str | None, *, resource_type: type | None = None
    ) -> list[ShapedResource]:
        """Project every resource, keeping input order."""
        return [self.shape(r, fields, resource_type=resource_type) for r in resources]

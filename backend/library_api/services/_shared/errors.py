"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP. They serve as stable contracts between repositories, the
projection/sorting core and application services.

The translation to HTTP responses (RFC 7807) is handled by
``library_api/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass

# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from repositories or the pure core.
    - The API layer or BaseService will later translate them to APIError.
    """

    pass


class ConfigurationError(Exception):
    """
    Raised for programming errors in static wiring (sort mappings, columns).

    Deliberately *not* a :class:`ServiceError`: a missing mapping is never
    something the client can fix, so it surfaces as a 500.
    """

    pass


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "Author").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str
    """

    entity: str
    key: str

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "Author").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


@dataclass(slots=True)
class InvalidSortError(ServiceError):
    """
    Raised when a sort clause reaches translation without a mapping entry.

    :param clause: Offending client sort clause.
    :type clause: str
    """

    clause: str

    def __str__(self) -> str:
        return f"Unknown sort key: {self.clause}"


@dataclass(slots=True)
class UnknownFieldError(ServiceError):
    """
    Raised when a projection names a field the resource does not declare.

    :param field: Offending field name as requested.
    :type field: str
    :param resource: Resource type name.
    :type resource: str
    """

    field: str
    resource: str

    def __str__(self) -> str:
        return f"Unknown field '{self.field}' on {self.resource}"


class PatchError(ServiceError):
    """Raised when a patch document cannot be applied to its target."""

    pass

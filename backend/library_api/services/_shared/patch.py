"""
JSON Patch documents applied to typed update models.

Only what a flat update model needs is supported: single-segment paths
(``/title``) naming a dataclass field, and the six RFC 6902 operations.
Operations run in order on a frozen dataclass; every step yields a new
instance through :func:`dataclasses.replace`, so a failed document leaves the
caller's value untouched.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from library_api.services._shared.errors import PatchError

T = TypeVar("T")

OPERATIONS = ("add", "replace", "remove", "copy", "move", "test")

_MISSING = object()


@dataclass(frozen=True, slots=True)
class PatchOperation:
    """
    One RFC 6902 operation.

    :param op: Operation name, one of :data:`OPERATIONS`.
    :type op: str
    :param path: Target pointer, e.g. ``"/title"``.
    :type path: str
    :param value: Value for ``add``/``replace``/``test``.
    :type value: Any
    :param from_: Source pointer for ``copy``/``move``.
    :type from_: str | None
    """

    op: str
    path: str
    value: Any = None
    from_: str | None = None


@dataclass(frozen=True, slots=True)
class PatchDocument:
    """Ordered sequence of patch operations."""

    operations: tuple[PatchOperation, ...] = ()

    @classmethod
    def of(cls, operations: Sequence[PatchOperation]) -> PatchDocument:
        return cls(tuple(operations))

    def __len__(self) -> int:
        return len(self.operations)


def _field_for(target: Any, pointer: str | None) -> dataclasses.Field[Any]:
    if not pointer or not pointer.startswith("/"):
        raise PatchError(f"Invalid path: {pointer!r}")
    segment = pointer[1:]
    if not segment or "/" in segment:
        raise PatchError(f"Only single-segment paths are supported: {pointer!r}")
    segment = segment.replace("~1", "/").replace("~0", "~")
    for f in dataclasses.fields(target):
        if f.name.casefold() == segment.casefold():
            return f
    raise PatchError(f"The target location specified by path '{pointer}' was not found")


def _default_of(f: dataclasses.Field[Any]) -> Any:
    if f.default is not dataclasses.MISSING:
        return f.default
    if f.default_factory is not dataclasses.MISSING:
        return f.default_factory()
    return None


def apply_operation(target: T, operation: PatchOperation) -> T:
    """
    Apply a single operation and return the new value.

    ``remove`` resets the field to its declared default (``None`` when the
    field has none); required fields are re-validated by the caller.

    :raises PatchError: On an unknown op or path, or a failed ``test``.
    """
    op = operation.op.lower()
    if op not in OPERATIONS:
        raise PatchError(f"Unsupported operation: {operation.op!r}")

    f = _field_for(target, operation.path)

    if op in ("add", "replace"):
        return dataclasses.replace(target, **{f.name: operation.value})  # type: ignore[type-var]
    if op == "remove":
        return dataclasses.replace(target, **{f.name: _default_of(f)})  # type: ignore[type-var]
    if op == "test":
        current = getattr(target, f.name, _MISSING)
        if current != operation.value:
            raise PatchError(f"Test failed for path '{operation.path}'")
        return target

    source = _field_for(target, operation.from_)
    value = getattr(target, source.name)
    changes = {f.name: value}
    if op == "move" and source.name != f.name:
        changes[source.name] = _default_of(source)
    return dataclasses.replace(target, **changes)  # type: ignore[type-var]


def apply_patch(document: PatchDocument, target: T) -> T:
    """
    Apply every operation of ``document`` to ``target`` in order.

    :param document: Parsed patch document.
    :type document: PatchDocument
    :param target: Frozen dataclass instance (the typed update model).
    :returns: Patched copy of ``target``.
    :raises PatchError: When any operation fails; ``target`` is unchanged.
    """
    if not dataclasses.is_dataclass(target) or isinstance(target, type):
        raise TypeError("Patch target must be a dataclass instance")
    result = target
    for operation in document.operations:
        result = apply_operation(result, operation)
    return result

from __future__ import annotations

from dataclasses import dataclass

import pytest
from library_api.services._shared.errors import PatchError
from library_api.services._shared.patch import (
    PatchDocument,
    PatchOperation,
    apply_operation,
    apply_patch,
)
from library_api.services.books.dto import BookUpdateIn


@dataclass(frozen=True)
class _Draft:
    title: str = "untitled"
    notes: str | None = None


BOOK = BookUpdateIn(title="It", description="A horror novel")


class TestApplyOperation:
    def test_replace_sets_value(self):
        patched = apply_operation(BOOK, PatchOperation("replace", "/title", "Misery"))
        assert patched == BookUpdateIn(title="Misery", description="A horror novel")
        assert BOOK.title == "It"

    def test_path_matching_ignores_case(self):
        patched = apply_operation(BOOK, PatchOperation("add", "/Description", "Clowns"))
        assert patched.description == "Clowns"

    def test_remove_resets_to_default(self):
        assert apply_operation(BOOK, PatchOperation("remove", "/description")).description is None
        draft = apply_operation(_Draft(title="x"), PatchOperation("remove", "/title"))
        assert draft.title == "untitled"

    def test_copy_and_move(self):
        copied = apply_operation(BOOK, PatchOperation("copy", "/description", from_="/title"))
        assert copied == BookUpdateIn(title="It", description="It")

        moved = apply_operation(BOOK, PatchOperation("move", "/title", from_="/description"))
        assert moved == BookUpdateIn(title="A horror novel", description=None)

    def test_test_operation(self):
        assert apply_operation(BOOK, PatchOperation("test", "/title", "It")) is BOOK
        with pytest.raises(PatchError):
            apply_operation(BOOK, PatchOperation("test", "/title", "Carrie"))

    @pytest.mark.parametrize("path", ["/author", "title", "/", "/title/0", ""])
    def test_bad_paths_raise(self, path):
        with pytest.raises(PatchError):
            apply_operation(BOOK, PatchOperation("replace", path, "x"))

    def test_unknown_operation_raises(self):
        with pytest.raises(PatchError):
            apply_operation(BOOK, PatchOperation("increment", "/title", 1))


class TestApplyPatch:
    def test_operations_apply_in_order(self):
        document = PatchDocument.of(
            [
                PatchOperation("replace", "/title", "The Stand"),
                PatchOperation("copy", "/description", from_="/title"),
                PatchOperation("replace", "/title", "The Shining"),
            ]
        )
        assert len(document) == 3
        assert apply_patch(document, BOOK) == BookUpdateIn(
            title="The Shining", description="The Stand"
        )

    def test_failure_leaves_target_untouched(self):
        document = PatchDocument.of(
            [
                PatchOperation("replace", "/title", "Carrie"),
                PatchOperation("replace", "/isbn", "123"),
            ]
        )
        with pytest.raises(PatchError):
            apply_patch(document, BOOK)
        assert BOOK.title == "It"

    def test_empty_document_returns_target(self):
        assert apply_patch(PatchDocument(), BOOK) is BOOK

    def test_target_must_be_dataclass_instance(self):
        with pytest.raises(TypeError):
            apply_patch(PatchDocument(), {"title": "It"})
        with pytest.raises(TypeError):
            apply_patch(PatchDocument(), BookUpdateIn)

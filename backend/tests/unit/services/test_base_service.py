from __future__ import annotations

import pytest
from library_api.core import errors as api_errors
from library_api.models.author import Author
from library_api.services._shared.base import BaseService
from library_api.services._shared.errors import (
    ConflictError,
    InvalidSortError,
    NotFoundError,
    PatchError,
    ServiceError,
    UnknownFieldError,
)
from library_api.services._shared.property_mapping import SortTerm
from library_api.services.authors.dto import AuthorOut
from library_api.services.sort_mappings import build_registry


@pytest.mark.parametrize(
    ("exc", "status", "code"),
    [
        (NotFoundError("Author", "x"), 404, "not_found"),
        (ConflictError("Author", "x"), 409, "conflict"),
        (PatchError("bad path"), 422, "unprocessable_entity"),
        (InvalidSortError("shoe_size"), 400, "invalid_sort"),
        (UnknownFieldError("title", "AuthorOut"), 400, "invalid_fields"),
        (ServiceError("other"), 400, "bad_request"),
    ],
)
def test_translate_exceptions(exc, status, code):
    translated = BaseService.translate_exceptions(exc)

    assert isinstance(translated, api_errors.APIError)
    assert translated.status_code == status
    assert translated.code == code


def test_non_service_errors_pass_through():
    exc = ValueError("boom")
    assert BaseService.translate_exceptions(exc) is exc


class TestSortTerms:
    @pytest.fixture()
    def service(self) -> BaseService:
        return BaseService(registry=build_registry())

    def test_translates_valid_expression(self, service):
        assert service.sort_terms(AuthorOut, Author, "genre desc") == [SortTerm("genre", True)]

    @pytest.mark.parametrize("order_by", ["", "shoe_size"])
    def test_rejects_invalid_expression(self, service, order_by):
        with pytest.raises(InvalidSortError):
            service.sort_terms(AuthorOut, Author, order_by)

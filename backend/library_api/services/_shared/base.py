# library_api/services/_shared/base.py
from __future__ import annotations

from library_api.core import errors as api_errors
from library_api.services._shared.errors import (
    ConflictError,
    InvalidSortError,
    NotFoundError,
    PatchError,
    ServiceError,
    UnknownFieldError,
)
from library_api.services._shared.property_mapping import PropertyMappingRegistry, SortTerm
from library_api.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Translate client sort expressions through the property-mapping registry.
    * Centralize error translation.
    * Keep services thin, orchestration-only, no web/ORM leakage.

    Notes
    -----
    - Services must never touch the global session; always use a Unit of Work.
    - The registry is built once at startup and injected; services only read it.
    """

    def __init__(self, *, registry: PropertyMappingRegistry) -> None:
        """
        Initialize the base service.

        :param registry: Sort-mapping registry shared by the process.
        :type registry: PropertyMappingRegistry
        """
        self.registry = registry

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    def ro_uow(self, *, enforce_db_readonly: bool = True) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :param enforce_db_readonly: Apply `SET TRANSACTION READ ONLY` when supported.
        :type enforce_db_readonly: bool
        :returns: Read-only UoW instance.
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork(enforce_db_readonly=enforce_db_readonly)

    # ----------------------- Validation utilities ---------------------------

    def sort_terms(self, dto_type: type, entity_type: type, order_by: str) -> list[SortTerm]:
        """
        Validate and translate a client sort expression.

        :param dto_type: Exposed resource type.
        :type dto_type: type
        :param entity_type: Backing entity type.
        :type entity_type: type
        :param order_by: Client sort expression.
        :type order_by: str
        :returns: Entity sort terms.
        :rtype: list[SortTerm]
        :raises InvalidSortError: When any clause is not mapped.
        """
        if not self.registry.is_valid_sort(dto_type, entity_type, order_by):
            raise InvalidSortError(order_by)
        return self.registry.translate_sort(dto_type, entity_type, order_by)

    # -------------------------- Error handling ------------------------------

    @staticmethod
    def translate_exceptions(exc: Exception) -> Exception:
        """
        Map domain/service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        if isinstance(exc, NotFoundError):
            # → 404 Not Found
            return api_errors.NotFound(str(exc))

        if isinstance(exc, ConflictError):
            # → 409 Conflict
            return api_errors.Conflict(str(exc))

        if isinstance(exc, PatchError):
            # → 422 Unprocessable Entity
            return api_errors.UnprocessableEntity(str(exc))

        if isinstance(exc, InvalidSortError):
            return api_errors.BadRequest(str(exc), code="invalid_sort")

        if isinstance(exc, UnknownFieldError):
            return api_errors.BadRequest(str(exc), code="invalid_fields")

        # Any other ServiceError subclass → 400 Bad Request
        if isinstance(exc, ServiceError):
            return api_errors.APIError(
                message=str(exc),
                status_code=400,
                code="bad_request",
            )

        # Fallback: return untouched (will bubble up to Flask handler)
        return exc

import pytest
from library_api.models.author import Author
from library_api.uow import (
    SQLAlchemyReadOnlyUnitOfWork as ROuow,
)
from library_api.uow import (
    SQLAlchemyUnitOfWork as RWuow,
)
from sqlalchemy import func, select, text
from tests.factories.author import AuthorFactory


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_blocks_orm_flush_writes(self, app, db):
        """
        Ensure that attempting to flush ORM changes inside the RO UoW raises.
        """
        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            uow.session.add(AuthorFactory.build())
            uow.session.flush()

    def test_blocks_core_dml(self, app, db):
        """
        Ensure that raw SQL DML is blocked inside the RO UoW.
        """
        with ROuow() as uow, pytest.raises(RuntimeError, match="SQL statement blocked"):
            uow.session.execute(text("DELETE FROM authors"))

    def test_allows_reads(self, app, db):
        """
        Read operations should work normally within RO UoW.
        """
        AuthorFactory()

        with ROuow() as uow:
            count = uow.session.execute(select(func.count()).select_from(Author)).scalar_one()
            assert count == 1
            assert uow.authors.exists(uow.session.execute(select(Author.id)).scalar_one())

    def test_disallows_commit(self, app, db):
        """
        RO UoW must reject commit().
        """
        with ROuow() as uow, pytest.raises(RuntimeError, match="does not allow commit"):
            uow.commit()

    def test_guards_are_removed_on_exit(self, app, db):
        """
        Writes are allowed again once the RO scope has ended.
        """
        with ROuow():
            pass

        with RWuow() as uow:
            uow.authors.add(AuthorFactory.build())

        assert db.session.execute(select(func.count()).select_from(Author)).scalar_one() == 1

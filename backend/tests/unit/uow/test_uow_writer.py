import pytest
from library_api.models.author import Author
from library_api.uow import SQLAlchemyUnitOfWork as RWuow
from sqlalchemy import func, select
from tests.factories.author import AuthorFactory


def _count(db) -> int:
    return db.session.execute(select(func.count()).select_from(Author)).scalar_one()


class TestSQLAlchemyUnitOfWork:
    def test_commits_on_success(self, app, db):
        with RWuow() as uow:
            uow.authors.add(AuthorFactory.build())
        db.session.rollback()
        assert _count(db) == 1

    def test_rolls_back_on_error(self, app, db):
        with pytest.raises(ValueError), RWuow() as uow:
            uow.authors.add(AuthorFactory.build())
            raise ValueError("boom")
        assert _count(db) == 0

    def test_repositories_share_the_session(self, app, db):
        with RWuow() as uow:
            assert uow.authors.session is uow.books.session

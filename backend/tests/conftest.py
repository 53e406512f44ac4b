"""Pytest fixtures wiring the application, a fresh database and factories.

Every test gets its own application instance bound to an in-memory SQLite
database, so rows never leak between cases.
"""

from __future__ import annotations

from collections.abc import Generator

import pytest
from flask import Flask
from flask.testing import FlaskClient
from flask_sqlalchemy import SQLAlchemy

from library_api.core.config import TestingConfig
from library_api.core.extensions import SORT_REGISTRY_KEY
from library_api.core.extensions import db as _db
from library_api.factory import create_app
from library_api.services._shared.property_mapping import PropertyMappingRegistry


@pytest.fixture()
def app() -> Generator[Flask, None, None]:
    """Create a Flask application configured for testing.

    Yields
    ------
    flask.Flask
        Application with :class:`TestingConfig` applied and an active
        application context holding a freshly created schema.
    """
    application = create_app(TestingConfig)
    with application.app_context():
        _db.create_all()
        yield application
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def db(app: Flask) -> SQLAlchemy:
    """Return the database extension bound to the testing application."""
    return _db


@pytest.fixture()
def session(db: SQLAlchemy):
    """Return the Flask-scoped session shared by the app and the factories."""
    return db.session


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client bound to the application."""
    return app.test_client()


@pytest.fixture()
def registry(app: Flask) -> PropertyMappingRegistry:
    """Return the sort-mapping registry built at startup."""
    return app.extensions[SORT_REGISTRY_KEY]


# -- Hook up Factory Boy to the Flask-SQLAlchemy session ----------------------
@pytest.fixture(autouse=True)
def _factories_session(request: pytest.FixtureRequest):
    """Wire Factory Boy's session helper when a test uses the database."""
    from tests.factories import SQLAlchemySession

    if "app" in request.fixturenames:
        SQLAlchemySession.set(request.getfixturevalue("session"))
    yield
    SQLAlchemySession.set(None)

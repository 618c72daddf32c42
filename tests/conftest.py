"""Shared fixtures: in-memory SQLite, a TestClient per user, signed-up users."""

import os

# must be set before mealtracker.core.config is imported
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SESSION_SWEEP_ENABLED"] = "false"
os.environ["NUTRITIONIX_APP_ID"] = ""
os.environ["NUTRITIONIX_API_KEY"] = ""
os.environ["DEEPL_API_KEY"] = ""

import pytest
from starlette.testclient import TestClient

from mealtracker import models  # noqa: F401
from mealtracker.db.base import Base
from mealtracker.db.session import SessionLocal, engine
from mealtracker.deps import get_db
from mealtracker.main import create_app
from mealtracker.services.credentials import create_user

from helpers import signup


@pytest.fixture(autouse=True)
def _schema():
    """Fresh tables for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user(db):
    return create_user(db, "alice@example.com", "secret123", "Alice")


@pytest.fixture
def other_user(db):
    return create_user(db, "bob@example.com", "hunter22", "Bob")


@pytest.fixture
def app():
    application = create_app()

    def _get_db():
        session = SessionLocal()
        try:
            yield session
        finally:
            session.close()

    application.dependency_overrides[get_db] = _get_db
    return application


@pytest.fixture
def make_client(app):
    # not entered as a context manager, so the lifespan (sweeper) never starts
    def _make():
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def alice(make_client):
    """Client logged in as a freshly signed-up user."""
    c = make_client()
    assert signup(c).status_code == 201
    return c


@pytest.fixture
def bob(make_client):
    c = make_client()
    assert signup(c, email="bob@example.com", password="hunter22", name="Bob").status_code == 201
    return c

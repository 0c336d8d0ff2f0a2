import os

# database.py refuses to import without a URL
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from unittest.mock import Mock
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from main import app
import app_models  # noqa: F401
import crud


@pytest.fixture
def engine():
    """In-memory SQLite shared by every session in a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def signup_and_login(client, email="driver@example.com", name="Driver", password="s3cret-pass"):
    """Create an account through the API and return (user json, auth headers)."""
    resp = client.post("/api/auth/signup", json={"name": name, "email": email, "password": password})
    assert resp.status_code == 200, resp.text
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    data = resp.json()
    return data["user"], {"Authorization": f"Bearer {data['token']}"}


@pytest.fixture
def auth(client):
    return signup_and_login(client)


@pytest.fixture
def user(db):
    return crud.create_user(db, "Alice", "alice@example.com", "not-a-real-hash")


@pytest.fixture
def other_user(db):
    return crud.create_user(db, "Bob", "bob@example.com", "not-a-real-hash")


@pytest.fixture
def pothole(db):
    return crud.create_pothole(db, "I-695 exit 23", 39.29, -76.61)


@pytest.fixture
def stub_geocoder():
    """Geocoder that always resolves to Baltimore County, MD."""
    geocoder = Mock()
    geocoder.resolve = Mock(return_value={"county": "Baltimore County", "state": "MD"})
    return geocoder


@pytest.fixture
def login(client):
    """Factory for extra accounts: login(email, name) -> (user json, headers)."""
    def _login(email, name="Someone"):
        return signup_and_login(client, email=email, name=name)
    return _login

# tests/conftest.py
import os

# Settings are read at import time by the service modules
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SPOONACULAR_API_KEY", "test-spoonacular-key")
os.environ.setdefault("ANTHROPIC_API_KEY", "test-anthropic-key")
os.environ.setdefault("CRON_SECRET", "test-cron-secret")
os.environ.setdefault("EMAILJS_SERVICE_ID", "service_test")
os.environ.setdefault("EMAILJS_TEMPLATE_ID", "template_test")
os.environ.setdefault("EMAILJS_PUBLIC_KEY", "public_test")
os.environ.setdefault("EMAILJS_PRIVATE_KEY", "private_test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cravings.database import _enable_sqlite_foreign_keys, get_db
from cravings.main import app
from cravings.models import Base


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    Base.metadata.create_all(engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    Base.metadata.drop_all(engine)
    engine.dispose()


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


def register_and_login(client, email="jane@example.com", password="hunter2", name="Jane"):
    resp = client.post("/api/register", json={"email": email, "password": password, "name": name})
    assert resp.status_code == 201
    resp = client.post("/api/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    body = resp.json()
    return {"Authorization": f"Bearer {body['token']}"}, body["user"]


@pytest.fixture
def account(client):
    """(headers, user) for a freshly registered, logged-in user."""
    return register_and_login(client)


@pytest.fixture
def auth(account):
    return account[0]

import pytest
from fastapi.testclient import TestClient

from userapi.core.config import Settings
from userapi.main import create_app


@pytest.fixture()
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        password_hash_rounds=1000,
        log_level="DEBUG",
    )


@pytest.fixture()
def app(settings):
    """A fresh app bound to its own SQLite file."""
    return create_app(settings)


@pytest.fixture()
def client(app):
    # entering the client runs the lifespan hook, which creates the tables
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def make_user(client):
    def _make(username="alice", password="pw1", userrole="admin", **extra):
        payload = {"username": username, "password": password, "userrole": userrole, **extra}
        resp = client.post("/users", json=payload)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make

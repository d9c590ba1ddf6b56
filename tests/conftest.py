import pytest

from expensetracker import create_app
from expensetracker.config import TestingConfig
from expensetracker.extensions import db


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def register(client, name="Alice", email="alice@example.com", password="secret123"):
    resp = client.post("/api/users/register", json={"name": name, "email": email, "password": password})
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


@pytest.fixture
def auth_headers(client):
    token = register(client)["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_headers(client):
    token = register(client, name="Bob", email="bob@example.com")["token"]
    return {"Authorization": f"Bearer {token}"}

"""Shared fixtures: an app on a private in-memory SQLite database plus auth helpers."""
import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-freelance-pm")
os.environ.setdefault("ENVIRONMENT", "test")

from types import SimpleNamespace  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from core.database import Database  # noqa: E402
from core.security import hash_password  # noqa: E402
from main import create_app  # noqa: E402
from models.models import Role, User  # noqa: E402

ADMIN_EMAIL = "owner@freelancepm.io"
ADMIN_PASSWORD = "owner-pass-123"


@pytest.fixture
def db():
    database = Database("sqlite://")
    yield database
    database.dispose()


@pytest.fixture
def app(db):
    return create_app(database=db)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def insert_user(db: Database, email: str, password: str, role: Role = Role.USER, **extra) -> SimpleNamespace:
    with db.session() as session:
        user = User(
            email=email,
            password_hash=hash_password(password) if password else "",
            first_name=extra.pop("first_name", "Test"),
            last_name=extra.pop("last_name", "Person"),
            role=role.value,
            **extra,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return SimpleNamespace(id=user.id, email=user.email, password=password)


def login(client: TestClient, email: str, password: str) -> dict:
    res = client.post("/api/auth/login", json={"email": email, "password": password})
    assert res.status_code == 200, res.text
    return {"Authorization": f"Bearer {res.json()['data']['token']}"}


@pytest.fixture
def admin(client, db):
    return insert_user(db, ADMIN_EMAIL, ADMIN_PASSWORD, Role.ADMIN, first_name="Olive", last_name="Owner")


@pytest.fixture
def admin_headers(client, admin):
    return login(client, admin.email, admin.password)


@pytest.fixture
def make_user(client, db):
    """Create an active account and return it with ready-to-use auth headers."""
    counter = {"n": 0}

    def _make(role: Role = Role.USER, email: str = None, password: str = "member-pass-123"):
        counter["n"] += 1
        email = email or f"member{counter['n']}@freelancepm.io"
        user = insert_user(db, email, password, role)
        user.headers = login(client, email, password)
        return user

    return _make


# ============================================================
# API helpers
# ============================================================
def create_client(client: TestClient, headers: dict, **fields) -> dict:
    payload = {"name": "Acme", "status": "active"}
    payload.update(fields)
    res = client.post("/api/clients/", json=payload, headers=headers)
    assert res.status_code == 201, res.text
    return res.json()["data"]


def create_project(client: TestClient, headers: dict, client_ids: list, **fields) -> dict:
    payload = {"name": "Site Revamp", "client_ids": client_ids}
    payload.update(fields)
    res = client.post("/api/projects/", json=payload, headers=headers)
    assert res.status_code == 201, res.text
    return res.json()["data"]


def assign_clients(client: TestClient, headers: dict, user_id, client_ids: list):
    res = client.put(f"/api/auth/{user_id}/clients", json={"client_ids": client_ids}, headers=headers)
    assert res.status_code == 200, res.text
    return res.json()["data"]

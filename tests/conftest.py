import pytest
from flask import Flask

from config import TestConfig
from extensions import db
from carease.app_factory import create_app
from carease.repositories import build_memory_repositories
from carease.schemas import Doctor, User
from carease.routes.guards import get_repositories, get_sessions
from carease.services import auth_service
from carease.services.session_store import SessionStore


class DictRedis:
    """The three Redis calls the session store makes, kept in a dict."""

    def __init__(self):
        self.data = {}

    def get(self, key):
        return self.data.get(key)

    def setex(self, key, ttl, value):
        self.data[key] = value
        return True

    def delete(self, key):
        return 1 if self.data.pop(key, None) is not None else 0


@pytest.fixture
def repos():
    return build_memory_repositories()


@pytest.fixture
def sessions():
    return SessionStore(DictRedis(), ttl_sec=60)


@pytest.fixture
def app() -> Flask:
    app = create_app(TestConfig, session_client=DictRedis())
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app: Flask):
    return app.test_client()


def add_doctor(repos, doctor_id="d1", name="Dr. One", appointments_enabled=True, **extra):
    return repos.users.add(
        Doctor(
            id=doctor_id,
            email=f"{doctor_id}@carease.com",
            name=name,
            appointments_enabled=appointments_enabled,
            **extra,
        )
    )


def add_user(repos, user_id, role, name=None):
    return repos.users.add(
        User(id=user_id, email=f"{user_id}@carease.com", name=name or user_id.title(), role=role)
    )


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


def signup(client, email, role, name="Test User", password="secret"):
    resp = client.post(
        "/auth/signup",
        json={"email": email, "password": password, "name": name, "role": role},
    )
    assert resp.status_code == 201, resp.get_json()
    body = resp.get_json()
    return body["user"], body["token"]


def signup_admin(email="admin@carease.com", name="Admin"):
    """Admins cannot sign up over HTTP; create one in the app context instead."""
    user, token = auth_service.signup(get_repositories(), get_sessions(), email, "secret", name, "admin")
    return user.to_dict(), token

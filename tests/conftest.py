"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import pytest
from flask import Flask
from flask.testing import FlaskClient

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from config import Config  # noqa: E402
from models import db  # noqa: E402
from models.user import User  # noqa: E402
from security.passwords import PasswordHasher  # noqa: E402
from services import get_auth_service  # noqa: E402

FAST_HASH_METHOD = "pbkdf2:sha256:1000"


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    PASSWORD_HASH_METHOD = FAST_HASH_METHOD
    ADMIN_SELF_REGISTRATION = False
    LOG_LEVEL = "WARNING"


def build_app(**overrides) -> Flask:
    """Create an app with a fresh schema, applying config overrides."""

    config_class = type("OverrideConfig", (TestConfig,), dict(overrides))
    application = create_app(config_class)
    with application.app_context():
        db.create_all()
    return application


@pytest.fixture()
def app() -> Flask:
    """Create a Flask application instance for tests."""

    application = build_app()

    yield application

    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client for the Flask app."""

    return app.test_client()


@pytest.fixture()
def make_user(app: Flask) -> Callable[..., int]:
    """Persist a user directly and return its id."""

    hasher = PasswordHasher(method=FAST_HASH_METHOD)

    def _make_user(
        email: str,
        password: str = "secret1",
        user_type: str = "farmer",
        **fields,
    ) -> int:
        with app.app_context():
            user = User(
                name=fields.pop("name", email.split("@")[0].title()),
                email=email,
                password_hash=hasher.hash(password),
                phone=fields.pop("phone", "09171234567"),
                user_type=user_type,
                **fields,
            )
            db.session.add(user)
            db.session.commit()
            return user.id

    return _make_user


@pytest.fixture()
def auth_headers(app: Flask) -> Callable[[int], dict[str, str]]:
    """Issue a bearer token for a user id and return request headers."""

    def _auth_headers(user_id: int) -> dict[str, str]:
        with app.app_context():
            issued = get_auth_service().token_store.issue(user_id)
        return {"Authorization": f"Bearer {issued.token}"}

    return _auth_headers


@pytest.fixture()
def app_factory() -> Callable[..., Flask]:
    """Build an extra app with config overrides, e.g. ``app_factory(TOKEN_TTL_HOURS=1)``."""

    return build_app

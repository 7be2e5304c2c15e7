"""
Shared fixtures.

Every test gets a fresh app with its own in-memory storage, a fixed test
secret and a cheap bcrypt cost.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient

from storefront.api.app import create_app
from storefront.config import Settings
from storefront.core.models import Role
from storefront.storage import InMemoryMetadataStorage

TEST_SECRET = "test-jwt-secret"
PASSWORD = "secret123"


# =============================================================================
# App
# =============================================================================


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        jwt_secret_key=TEST_SECRET,
        bcrypt_rounds=4,
        sentry_dsn="",
    )


@pytest.fixture
def storage():
    return InMemoryMetadataStorage()


@pytest.fixture
def app(settings, storage):
    return create_app(settings=settings, storage=storage)


@pytest.fixture
def client(app):
    return TestClient(app)


# =============================================================================
# Users and tokens
# =============================================================================


@pytest.fixture
def make_user(app):
    """Create a user straight in the store and return (record, token)."""

    def _make(email: str, role: Role = Role.USER, password: str = PASSWORD, name: str = "Test User"):
        password_hash = app.state.password_hasher.hash(password)
        user = asyncio.run(app.state.users.create(
            name=name,
            email=email,
            password_hash=password_hash,
            phone="12344000",
            address="123 Street",
            answer="Football",
            role=role,
        ))
        return user, app.state.token_issuer.issue(user.id)

    return _make


@pytest.fixture
def regular_user(make_user):
    return make_user("user@example.com")


@pytest.fixture
def admin_user(make_user):
    return make_user("admin@example.com", role=Role.ADMIN, name="Admin")


@pytest.fixture
def user_headers(regular_user):
    # Raw token, no "Bearer " prefix
    return {"Authorization": regular_user[1]}


@pytest.fixture
def admin_headers(admin_user):
    return {"Authorization": admin_user[1]}

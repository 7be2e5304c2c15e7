"""
Tests for the credential store on top of the in-memory document store.
"""

import asyncio

import pytest

from storefront.core.models import Role
from storefront.services.users import CredentialStore, DuplicateEmailError
from storefront.storage import InMemoryMetadataStorage


@pytest.fixture
def users():
    return CredentialStore(InMemoryMetadataStorage())


def create(users, email="jane@example.com", **overrides):
    fields = {
        "name": "Jane Doe",
        "email": email,
        "password_hash": "$2b$10$hashedpasswordexample",
        "phone": "9876543210",
        "address": {"city": "Los Angeles", "zip": "90001"},
        "answer": "green",
    }
    fields.update(overrides)
    return asyncio.run(users.create(**fields))


class TestCredentialStore:
    def test_default_role_is_user(self, users):
        assert create(users).role == Role.USER

    def test_email_unique(self, users):
        create(users)
        with pytest.raises(DuplicateEmailError):
            create(users)

    def test_empty_hash_refused(self, users):
        with pytest.raises(ValueError):
            create(users, password_hash="")

    def test_role_outside_enum_refused(self, users):
        with pytest.raises(ValueError):
            create(users, role=2)

    def test_roundtrip_by_id_and_email(self, users):
        user = create(users)
        assert asyncio.run(users.get_by_id(user.id)).email == "jane@example.com"
        assert asyncio.run(users.get_by_email("jane@example.com")).id == user.id

    def test_find_by_email_and_answer(self, users):
        user = create(users)
        assert asyncio.run(users.find_by_email_and_answer("jane@example.com", "green")).id == user.id
        assert asyncio.run(users.find_by_email_and_answer("jane@example.com", "blue")) is None

    def test_update_keeps_id_and_skips_none(self, users):
        user = create(users)
        updated = asyncio.run(users.update(user.id, name="Janet", phone=None))
        assert updated.id == user.id
        assert updated.name == "Janet"
        assert updated.phone == "9876543210"

    def test_update_cannot_touch_role(self, users):
        user = create(users)
        with pytest.raises(ValueError):
            asyncio.run(users.update(user.id, role=Role.ADMIN))

    def test_update_unknown_user(self, users):
        assert asyncio.run(users.update("user_missing", name="X")) is None

    def test_public_view_hides_credentials(self, users):
        view = create(users).public()
        assert set(view) == {"_id", "name", "email", "phone", "address", "role"}

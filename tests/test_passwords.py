"""
Tests for password hashing.
"""

import bcrypt
import pytest

from storefront.auth.passwords import PasswordHasher, PasswordHashError


@pytest.fixture
def hasher():
    # Cheap cost for speed; the default cost is checked separately
    return PasswordHasher(rounds=4)


class TestPasswordHasher:
    def test_matching_password(self, hasher):
        hashed = hasher.hash("secret123")
        assert hasher.compare("secret123", hashed) is True

    def test_other_password_does_not_match(self, hasher):
        hashed = hasher.hash("secret123")
        assert hasher.compare("secret124", hashed) is False
        assert hasher.compare("Secret123", hashed) is False

    def test_hash_is_not_plaintext(self, hasher):
        hashed = hasher.hash("secret123")
        assert hashed != "secret123"
        assert "secret123" not in hashed

    def test_same_password_hashes_differently(self, hasher):
        assert hasher.hash("secret123") != hasher.hash("secret123")

    def test_default_cost_factor_is_ten(self):
        hashed = PasswordHasher().hash("secret123")
        assert hashed.startswith("$2b$10$")

    def test_compare_malformed_hash_is_false(self, hasher):
        assert hasher.compare("secret123", "not-a-bcrypt-hash") is False

    def test_compare_empty_inputs_is_false(self, hasher):
        hashed = hasher.hash("secret123")
        assert hasher.compare("", hashed) is False
        assert hasher.compare("secret123", "") is False

    def test_hash_failure_raises(self, hasher, monkeypatch):
        def broken_hashpw(password, salt):
            raise ValueError("Hashing failed")

        monkeypatch.setattr(bcrypt, "hashpw", broken_hashpw)

        with pytest.raises(PasswordHashError, match="Hashing failed"):
            hasher.hash("secret123")

    def test_long_password_hashes_and_matches(self, hasher):
        password = "a" * 72 + "X"
        hashed = hasher.hash(password)
        assert hasher.compare(password, hashed) is True

    def test_shared_72_byte_prefix_does_not_match(self, hasher):
        prefix = "p" * 72
        hashed = hasher.hash(prefix + "one")
        assert hasher.compare(prefix + "two", hashed) is False
        assert hasher.compare(prefix, hashed) is False

    def test_multibyte_password_over_limit(self, hasher):
        # 40 characters, 120 bytes in UTF-8
        password = "密" * 40
        assert hasher.compare(password, hasher.hash(password)) is True
        assert hasher.compare("密" * 39, hasher.hash(password)) is False

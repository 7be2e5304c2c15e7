"""
Tests for registration, login, password recovery and profile routes.
"""

import asyncio

import pytest

from storefront.auth.passwords import PasswordHashError

REGISTER = "/api/v1/auth/register"
LOGIN = "/api/v1/auth/login"
FORGOT = "/api/v1/auth/forgot-password"
PROFILE = "/api/v1/auth/profile"


@pytest.fixture
def registration():
    return {
        "name": "John Doe",
        "email": "john@example.com",
        "password": "secret123",
        "phone": "12344000",
        "address": "123 Street",
        "answer": "Football",
    }


# =============================================================================
# Register
# =============================================================================


class TestRegister:
    def test_register_success(self, client, registration):
        res = client.post(REGISTER, json=registration)
        assert res.status_code == 201
        body = res.json()
        assert body["success"] is True
        assert body["message"] == "User registered successfully"
        assert body["user"]["email"] == "john@example.com"
        assert body["user"]["role"] == 0
        # Never echo credentials
        assert "password" not in body["user"]
        assert "password_hash" not in body["user"]
        assert "answer" not in body["user"]

    def test_stored_password_is_hashed(self, client, app, registration):
        client.post(REGISTER, json=registration)
        user = asyncio.run(app.state.users.get_by_email("john@example.com"))
        assert user.password_hash != "secret123"
        assert app.state.password_hasher.compare("secret123", user.password_hash)

    def test_missing_name(self, client, registration):
        registration["name"] = ""
        res = client.post(REGISTER, json=registration)
        assert res.status_code == 400
        assert res.json() == {"error": "Name is required"}

    @pytest.mark.parametrize("field,message", [
        ("email", "Email is required"),
        ("password", "Password is required"),
        ("phone", "Phone number is required"),
        ("address", "Address is required"),
        ("answer", "Answer is required"),
    ])
    def test_missing_field(self, client, registration, field, message):
        del registration[field]
        res = client.post(REGISTER, json=registration)
        assert res.status_code == 400
        assert res.json() == {"message": message}

    def test_invalid_email(self, client, registration):
        registration["email"] = "invalid-email"
        res = client.post(REGISTER, json=registration)
        assert res.status_code == 400
        assert res.json() == {"success": False, "message": "Invalid email"}

    def test_duplicate_email(self, client, registration):
        client.post(REGISTER, json=registration)
        res = client.post(REGISTER, json=registration)
        assert res.status_code == 200
        assert res.json() == {"success": False, "message": "Already registered, please login"}

    def test_hash_failure_fails_registration(self, client, app, registration, monkeypatch):
        def broken_hash(plaintext):
            raise PasswordHashError("Hashing failed")

        monkeypatch.setattr(app.state.password_hasher, "hash", broken_hash)

        res = client.post(REGISTER, json=registration)
        assert res.status_code == 500
        assert res.json()["message"] == "Error in registration"
        assert asyncio.run(app.state.users.get_by_email("john@example.com")) is None

    def test_address_may_be_an_object(self, client, registration):
        registration["address"] = {"city": "Los Angeles", "zip": "90001"}
        res = client.post(REGISTER, json=registration)
        assert res.status_code == 201
        assert res.json()["user"]["address"] == {"city": "Los Angeles", "zip": "90001"}

    def test_long_password(self, client, registration):
        registration["password"] = "x" * 80
        res = client.post(REGISTER, json=registration)
        assert res.status_code == 201

        res = client.post(LOGIN, json={"email": "john@example.com", "password": "x" * 80})
        assert res.status_code == 200
        assert res.json()["success"] is True

        res = client.post(LOGIN, json={"email": "john@example.com", "password": "x" * 72 + "y" * 8})
        assert res.json()["success"] is False


# =============================================================================
# Login
# =============================================================================


class TestLogin:
    def test_register_login_then_user_auth(self, client, registration):
        client.post(REGISTER, json=registration)

        res = client.post(LOGIN, json={"email": "john@example.com", "password": "secret123"})
        assert res.status_code == 200
        body = res.json()
        assert body["success"] is True
        assert body["message"] == "Logged in successfully"
        assert body["token"]
        assert body["user"]["name"] == "John Doe"

        res = client.get("/api/v1/auth/user-auth", headers={"Authorization": body["token"]})
        assert res.status_code == 200
        assert res.json() == {"ok": True}

    def test_wrong_password(self, client, registration):
        client.post(REGISTER, json=registration)

        res = client.post(LOGIN, json={"email": "john@example.com", "password": "wrongpassword"})
        assert res.status_code == 401
        assert res.json()["success"] is False
        assert "invalid password" in res.json()["message"].lower()
        assert "token" not in res.json()

    def test_unknown_email(self, client):
        res = client.post(LOGIN, json={"email": "nobody@example.com", "password": "secret123"})
        assert res.status_code == 404
        assert res.json() == {"success": False, "message": "Email is not registered"}

    def test_missing_credentials(self, client):
        res = client.post(LOGIN, json={"email": "", "password": "secret123"})
        assert res.status_code == 404
        assert res.json() == {"success": False, "message": "Invalid email or password"}

    def test_token_subject_is_user_id(self, client, app, registration):
        created = client.post(REGISTER, json=registration).json()["user"]
        token = client.post(
            LOGIN, json={"email": "john@example.com", "password": "secret123"}
        ).json()["token"]

        assert app.state.token_verifier.verify(token).subject_id == created["_id"]


# =============================================================================
# Forgot password
# =============================================================================


class TestForgotPassword:
    def test_reset_with_correct_answer(self, client, regular_user):
        res = client.post(FORGOT, json={
            "email": "user@example.com",
            "answer": "Football",
            "newPassword": "newpassword123",
        })
        assert res.status_code == 200
        assert res.json() == {"success": True, "message": "Password reset successfully"}

        res = client.post(LOGIN, json={"email": "user@example.com", "password": "newpassword123"})
        assert res.status_code == 200

        res = client.post(LOGIN, json={"email": "user@example.com", "password": "secret123"})
        assert res.status_code == 401

    def test_wrong_answer(self, client, regular_user):
        res = client.post(FORGOT, json={
            "email": "user@example.com",
            "answer": "Basketball",
            "newPassword": "newpassword123",
        })
        assert res.status_code == 404
        assert res.json() == {"success": False, "message": "Wrong email or answer"}

    @pytest.mark.parametrize("field,message", [
        ("email", "Email is required"),
        ("answer", "Answer is required"),
        ("newPassword", "New password is required"),
    ])
    def test_missing_field(self, client, field, message):
        body = {"email": "user@example.com", "answer": "Football", "newPassword": "newpassword123"}
        body[field] = ""
        res = client.post(FORGOT, json=body)
        assert res.status_code == 400
        assert res.json() == {"message": message}


# =============================================================================
# Profile
# =============================================================================


class TestProfile:
    def test_requires_token(self, client):
        res = client.put(PROFILE, json={"name": "New Name"})
        assert res.status_code == 401

    def test_update_keeps_unspecified_fields(self, client, user_headers):
        res = client.put(PROFILE, json={"name": "New Name"}, headers=user_headers)
        assert res.status_code == 200
        body = res.json()
        assert body["message"] == "Profile updated successfully"
        assert body["updatedUser"]["name"] == "New Name"
        assert body["updatedUser"]["phone"] == "12344000"
        assert body["updatedUser"]["email"] == "user@example.com"

    def test_short_password(self, client, user_headers):
        res = client.put(PROFILE, json={"password": "123"}, headers=user_headers)
        assert res.status_code == 400
        assert res.json() == {"error": "Password must be at least 6 characters long"}

    def test_password_change(self, client, user_headers):
        res = client.put(PROFILE, json={"password": "brandnew1"}, headers=user_headers)
        assert res.status_code == 200

        res = client.post(LOGIN, json={"email": "user@example.com", "password": "brandnew1"})
        assert res.status_code == 200

    def test_role_is_not_editable(self, client, app, regular_user, user_headers):
        client.put(PROFILE, json={"name": "Sneaky", "role": 1}, headers=user_headers)
        user = asyncio.run(app.state.users.get_by_id(regular_user[0].id))
        assert user.role == 0

    def test_email_taken_by_someone_else(self, client, user_headers, admin_user):
        res = client.put(PROFILE, json={"email": "admin@example.com"}, headers=user_headers)
        assert res.status_code == 400
        assert res.json()["message"] == "Error while updating profile"

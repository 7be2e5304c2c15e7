# =============================================================================
# Auth API Routes
# =============================================================================
#
# Endpoints (mounted under /api/v1):
#   POST /auth/register          - Create account
#   POST /auth/login             - Get a bearer token
#   POST /auth/forgot-password   - Reset password with the security answer
#   GET  /auth/test              - Admin-only check
#   GET  /auth/user-auth         - Is my token valid?
#   GET  /auth/admin-auth        - Am I an admin?
#   PUT  /auth/profile           - Update my profile
#   GET  /auth/orders            - My orders
#   GET  /auth/all-orders        - All orders (admin)
#   PUT  /auth/order-status/{id} - Change order status (admin)
#   GET  /auth/all-users         - All users (admin)
#
# Responses use the `{success, message, ...}` envelope the client expects.
# Gate failures are always 401 (see storefront.auth.policies).
#
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from storefront.auth.context import AuthContext
from storefront.auth.jwt import TokenIssuer
from storefront.auth.passwords import PasswordHasher
from storefront.auth.policies import get_credential_store, require_admin, require_sign_in
from storefront.core.utils import is_valid_email
from storefront.integrations.sentry import capture_exception
from storefront.services.orders import InvalidOrderStatusError, OrderStore
from storefront.services.users import CredentialStore, DuplicateEmailError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

MIN_PASSWORD_LENGTH = 6


# =============================================================================
# Dependencies
# =============================================================================


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_order_store(request: Request) -> OrderStore:
    return request.app.state.orders


# =============================================================================
# Request Models
# =============================================================================
#
# Every field is optional at the schema level so that missing fields get
# the client-facing messages below instead of a 422.


class RegisterRequest(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""
    phone: str = ""
    address: Any = None
    answer: str = ""


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class ForgotPasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str = ""
    answer: str = ""
    new_password: str = Field(default="", alias="newPassword")


class ProfileUpdateRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    password: str | None = None
    phone: str | None = None
    address: Any = None


class OrderStatusRequest(BaseModel):
    status: str = ""


# =============================================================================
# Helpers
# =============================================================================


def _respond(status_code: int, **body: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body)


def _failure(status_code: int, message: str, error: Exception | str | None = None) -> JSONResponse:
    body: dict[str, Any] = {"success": False, "message": message}
    if error is not None:
        body["error"] = str(error)
    return JSONResponse(status_code=status_code, content=body)


async def _buyer_views(users: CredentialStore, buyer_ids: set[str]) -> dict[str, dict[str, Any]]:
    """Populate buyers the way the order screens show them: id + name."""
    views = {}
    for buyer_id in buyer_ids:
        buyer = await users.get_by_id(buyer_id)
        views[buyer_id] = {"_id": buyer_id, "name": buyer.name if buyer else None}
    return views


# =============================================================================
# Public Endpoints
# =============================================================================


@router.post("/register")
async def register(
    data: RegisterRequest,
    users: CredentialStore = Depends(get_credential_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """
    Create a new account.

    An existing email is reported with 200 and success=false, which is what
    the registration form expects.
    """
    if not data.name:
        return _respond(400, error="Name is required")
    required = [
        (data.email, "Email is required"),
        (data.password, "Password is required"),
        (data.phone, "Phone number is required"),
        (data.address, "Address is required"),
        (data.answer, "Answer is required"),
    ]
    for value, message in required:
        if not value:
            return _respond(400, message=message)
    if not is_valid_email(data.email):
        return _failure(400, "Invalid email")

    try:
        if await users.get_by_email(data.email):
            return _failure(200, "Already registered, please login")

        password_hash = await run_in_threadpool(hasher.hash, data.password)
        user = await users.create(
            name=data.name,
            email=data.email,
            password_hash=password_hash,
            phone=data.phone,
            address=data.address,
            answer=data.answer,
        )
    except DuplicateEmailError:
        return _failure(200, "Already registered, please login")
    except Exception as e:
        capture_exception(e, route="register")
        return _failure(500, "Error in registration", e)

    return _respond(
        201,
        success=True,
        message="User registered successfully",
        user=user.public(),
    )


@router.post("/login")
async def login(
    data: LoginRequest,
    users: CredentialStore = Depends(get_credential_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    """Check credentials and return a 7-day bearer token."""
    if not data.email or not data.password:
        return _failure(404, "Invalid email or password")

    try:
        user = await users.get_by_email(data.email)
        if user is None:
            return _failure(404, "Email is not registered")

        matches = await run_in_threadpool(hasher.compare, data.password, user.password_hash)
        if not matches:
            logger.warning(f"Invalid password for {user.id}")
            return _failure(401, "Invalid Password")

        token = issuer.issue(user.id)
    except Exception as e:
        capture_exception(e, route="login")
        return _failure(500, "Error in login", e)

    logger.info(f"User {user.id} logged in")
    return _respond(
        200,
        success=True,
        message="Logged in successfully",
        user=user.public(),
        token=token,
    )


@router.post("/forgot-password")
async def forgot_password(
    data: ForgotPasswordRequest,
    users: CredentialStore = Depends(get_credential_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """Reset a password after proving identity with the security answer."""
    if not data.email:
        return _respond(400, message="Email is required")
    if not data.answer:
        return _respond(400, message="Answer is required")
    if not data.new_password:
        return _respond(400, message="New password is required")

    try:
        user = await users.find_by_email_and_answer(data.email, data.answer)
        if user is None:
            return _failure(404, "Wrong email or answer")

        password_hash = await run_in_threadpool(hasher.hash, data.new_password)
        await users.update(user.id, password_hash=password_hash)
    except Exception as e:
        capture_exception(e, route="forgot-password")
        return _failure(500, "Something went wrong", e)

    logger.info(f"Password reset for {user.id}")
    return _respond(200, success=True, message="Password reset successfully")


# =============================================================================
# Protected Endpoints
# =============================================================================


@router.get("/test")
async def protected_test(ctx: AuthContext = Depends(require_admin)):
    return {"success": True, "message": "Protected Routes"}


@router.get("/user-auth")
async def user_auth(ctx: AuthContext = Depends(require_sign_in)):
    """Used by the client's private routes to check a stored token."""
    return {"ok": True}


@router.get("/admin-auth")
async def admin_auth(ctx: AuthContext = Depends(require_admin)):
    """Used by the client's admin routes."""
    return {"ok": True}


@router.put("/profile")
async def update_profile(
    data: ProfileUpdateRequest,
    ctx: AuthContext = Depends(require_sign_in),
    users: CredentialStore = Depends(get_credential_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """
    Update the caller's profile.

    Fields left out keep their stored value. Role and recovery answer are
    not editable here.
    """
    if data.password and len(data.password) < MIN_PASSWORD_LENGTH:
        return _respond(400, error="Password must be at least 6 characters long")

    try:
        user = await users.get_by_id(ctx.subject_id)
        if user is None:
            return _failure(400, "Error while updating profile", "User not found")

        password_hash = None
        if data.password:
            password_hash = await run_in_threadpool(hasher.hash, data.password)

        updated = await users.update(
            user.id,
            name=data.name or None,
            email=data.email or None,
            password_hash=password_hash,
            phone=data.phone or None,
            address=data.address or None,
        )
    except Exception as e:
        capture_exception(e, route="profile")
        return _failure(400, "Error while updating profile", e)

    return _respond(
        200,
        success=True,
        message="Profile updated successfully",
        updatedUser=updated.public() if updated else None,
    )


@router.get("/orders")
async def my_orders(
    ctx: AuthContext = Depends(require_sign_in),
    users: CredentialStore = Depends(get_credential_store),
    orders: OrderStore = Depends(get_order_store),
):
    """Orders placed by the caller."""
    try:
        mine = await orders.list_for_buyer(ctx.subject_id)
        buyers = await _buyer_views(users, {ctx.subject_id})
    except Exception as e:
        capture_exception(e, route="orders")
        return _failure(500, "Error while getting orders", e)

    return {
        "success": True,
        "orders": [order.public(buyers[order.buyer]) for order in mine],
    }


# =============================================================================
# Admin Endpoints
# =============================================================================


@router.get("/all-orders")
async def all_orders(
    ctx: AuthContext = Depends(require_admin),
    users: CredentialStore = Depends(get_credential_store),
    orders: OrderStore = Depends(get_order_store),
):
    """Every order, newest first."""
    try:
        everything = await orders.list_all()
        buyers = await _buyer_views(users, {order.buyer for order in everything})
    except Exception as e:
        capture_exception(e, route="all-orders")
        return _failure(500, "Error while getting orders", e)

    return {
        "success": True,
        "orders": [order.public(buyers[order.buyer]) for order in everything],
    }


@router.put("/order-status/{order_id}")
async def order_status(
    order_id: str,
    data: OrderStatusRequest,
    ctx: AuthContext = Depends(require_admin),
    orders: OrderStore = Depends(get_order_store),
):
    """Move an order along its lifecycle. Unknown ids yield updatedOrder=null."""
    try:
        updated = await orders.update_status(order_id, data.status)
    except InvalidOrderStatusError as e:
        return _failure(400, "Invalid order status", e)
    except Exception as e:
        capture_exception(e, route="order-status")
        return _failure(500, "Error while updating order", e)

    logger.info(f"Order {order_id} set to {data.status} by {ctx.subject_id}")
    return {
        "success": True,
        "updatedOrder": updated.public() if updated else None,
    }


@router.get("/all-users")
async def all_users(
    ctx: AuthContext = Depends(require_admin),
    users: CredentialStore = Depends(get_credential_store),
):
    try:
        everyone = await users.list_all()
    except Exception as e:
        capture_exception(e, route="all-users")
        return _failure(500, "Error while getting users", e)

    return {"success": True, "users": [user.public() for user in everyone]}

"""
Policies - the gates in front of protected routes.

Two FastAPI dependencies:

    ctx: AuthContext = Depends(require_sign_in)   # any valid token
    ctx: AuthContext = Depends(require_admin)     # valid token + role 1

Every rejection is a 401 with `{success: false, message, error?}`. The API
does not distinguish "not authenticated", "not allowed" and "no such user"
at the status-code level; clients rely on that, so keep it.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Depends, Request
from fastapi.responses import JSONResponse

from storefront.auth.context import AuthContext
from storefront.auth.jwt import TokenError, TokenVerifier
from storefront.services.users import CredentialStore

logger = logging.getLogger(__name__)

TOKEN_REQUIRED = "Authentication token required"
AUTH_FAILED = "Authentication failed"
USER_NOT_FOUND = "User not found"
UNAUTHORIZED = "UnAuthorized Access"
ADMIN_CHECK_ERROR = "Error in admin middleware"


# =============================================================================
# Rejection
# =============================================================================


class AuthRejected(Exception):
    """A gate refused the request. Always rendered as a 401."""

    status_code = 401

    def __init__(self, message: str, error: Any = None):
        super().__init__(message)
        self.message = message
        self.error = error

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"success": False, "message": self.message}
        if self.error is not None:
            body["error"] = self.error
        return body


async def auth_rejected_handler(request: Request, exc: AuthRejected) -> JSONResponse:
    """Exception handler registered on the app for AuthRejected."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


# =============================================================================
# Collaborators (wired onto app.state by create_app)
# =============================================================================


def get_token_verifier(request: Request) -> TokenVerifier:
    return request.app.state.token_verifier


def get_credential_store(request: Request) -> CredentialStore:
    return request.app.state.users


# =============================================================================
# Auth Gate
# =============================================================================


async def require_sign_in(
    request: Request,
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> AuthContext:
    """
    Verify the bearer token and return the caller's identity.

    The token is the raw value of the Authorization header, without a
    "Bearer " prefix.
    """
    token = request.headers.get("authorization")
    if not token:
        raise AuthRejected(TOKEN_REQUIRED)

    try:
        payload = verifier.verify(token)
    except TokenError as e:
        logger.warning(f"Token rejected on {request.url.path}: {e}")
        raise AuthRejected(AUTH_FAILED, error=str(e))

    return AuthContext.from_token(payload)


# =============================================================================
# Role Gate
# =============================================================================


async def require_admin(
    ctx: AuthContext = Depends(require_sign_in),
    users: CredentialStore = Depends(get_credential_store),
) -> AuthContext:
    """
    Allow only administrators through.

    Exactly one read against the credential store per request.
    """
    try:
        user = await users.get_by_id(ctx.subject_id)
    except Exception as e:
        logger.exception(f"Admin check failed for {ctx.subject_id}")
        raise AuthRejected(ADMIN_CHECK_ERROR, error=str(e))

    if user is None:
        logger.warning(f"Admin check for unknown user {ctx.subject_id}")
        raise AuthRejected(USER_NOT_FOUND)

    if not user.is_admin:
        logger.warning(f"Non-admin user {ctx.subject_id} denied")
        raise AuthRejected(UNAUTHORIZED)

    return ctx.with_user(user)

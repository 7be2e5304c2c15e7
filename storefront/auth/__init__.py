"""
Authentication and authorization.

- PasswordHasher: bcrypt hashing of stored passwords
- TokenIssuer / TokenVerifier: stateless 7-day bearer tokens
- require_sign_in: Auth Gate dependency (valid token)
- require_admin: Role Gate dependency (valid token + administrator)
"""

from storefront.auth.context import AuthContext
from storefront.auth.jwt import (
    TokenError,
    TokenExpiredError,
    TokenInvalidError,
    TokenIssuer,
    TokenPayload,
    TokenVerifier,
)
from storefront.auth.passwords import PasswordHasher, PasswordHashError
from storefront.auth.policies import (
    AuthRejected,
    auth_rejected_handler,
    require_admin,
    require_sign_in,
)
from storefront.auth.routes import router as auth_router

__all__ = [
    # Gates
    "require_sign_in",
    "require_admin",
    "AuthContext",
    "AuthRejected",
    "auth_rejected_handler",
    # Tokens
    "TokenIssuer",
    "TokenVerifier",
    "TokenPayload",
    "TokenError",
    "TokenExpiredError",
    "TokenInvalidError",
    # Passwords
    "PasswordHasher",
    "PasswordHashError",
    # Router
    "auth_router",
]

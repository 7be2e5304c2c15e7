# =============================================================================
# JWT Bearer Tokens
# =============================================================================
#
# Stateless session tokens:
#   - TokenIssuer mints a signed token carrying only the subject id
#   - TokenVerifier checks signature + expiry and decodes the subject
#
# There is no session table and no revocation list. Logout is the client
# discarding its token; a token stays valid until `exp`.
#
# =============================================================================

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import logging

from pydantic import BaseModel
import jwt

from storefront.core.utils import utc_now

logger = logging.getLogger(__name__)

# Claim holding the user id. The client and the rest of the routes read
# `_id`, not the registered `sub` claim.
SUBJECT_CLAIM = "_id"

DEFAULT_EXPIRY = timedelta(days=7)


# =============================================================================
# Models
# =============================================================================

class TokenPayload(BaseModel):
    """Decoded bearer token."""
    subject_id: str
    issued_at: datetime | None = None
    expires_at: datetime


# =============================================================================
# Errors
# =============================================================================

class TokenError(Exception):
    """Base exception for token errors."""
    pass


class TokenExpiredError(TokenError):
    """Token has expired."""
    pass


class TokenInvalidError(TokenError):
    """Token is invalid, malformed, or signed with another secret."""
    pass


# =============================================================================
# Token Creation
# =============================================================================

class TokenIssuer:
    """Creates signed, time-limited bearer tokens."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_in: timedelta = DEFAULT_EXPIRY,
    ):
        if not secret:
            raise ValueError("A signing secret is required")
        self._secret = secret
        self.algorithm = algorithm
        self.expires_in = expires_in

    def issue(self, subject_id: str, now: datetime | None = None) -> str:
        """
        Create a token for `subject_id`.

        Args:
            subject_id: The user id to embed
            now: Issue time (defaults to the current time)
        """
        now = now or utc_now()
        payload = {
            SUBJECT_CLAIM: subject_id,
            "iat": now,
            "exp": now + self.expires_in,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)


# =============================================================================
# Token Validation
# =============================================================================

class TokenVerifier:
    """Validates bearer tokens. Pure computation, no I/O."""

    def __init__(self, secret: str, algorithm: str = "HS256"):
        if not secret:
            raise ValueError("A verification secret is required")
        self._secret = secret
        self.algorithm = algorithm

    def verify(self, token: str) -> TokenPayload:
        """
        Decode and validate a token.

        Returns:
            TokenPayload with the subject id and time claims

        Raises:
            TokenExpiredError: Token has expired
            TokenInvalidError: Bad signature, malformed token or no subject
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError("jwt expired")
        except jwt.InvalidTokenError as e:
            raise TokenInvalidError(str(e) or "invalid token")

        subject_id = payload.get(SUBJECT_CLAIM)
        if not subject_id:
            raise TokenInvalidError(f"Token has no {SUBJECT_CLAIM} claim")

        issued_at = payload.get("iat")
        return TokenPayload(
            subject_id=str(subject_id),
            issued_at=datetime.fromtimestamp(issued_at, tz=timezone.utc) if issued_at else None,
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )

"""
Auth context - who is making the request.

The Auth Gate produces one of these per request; the Role Gate returns the
same context with the stored user attached. Route handlers receive it via
Depends() instead of reading attributes bolted onto the request.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from storefront.auth.jwt import TokenPayload
from storefront.core.models import UserRecord


@dataclass(frozen=True)
class AuthContext:
    """
    Authenticated identity for a request.

    Usage in routes:
        async def my_route(ctx: AuthContext = Depends(require_sign_in)):
            print(f"User {ctx.subject_id}")
    """

    subject_id: str
    issued_at: datetime | None = None
    expires_at: datetime | None = None

    # Only populated once the Role Gate has loaded the record
    user: UserRecord | None = None

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.is_admin

    def with_user(self, user: UserRecord) -> AuthContext:
        return replace(self, user=user)

    @classmethod
    def from_token(cls, payload: TokenPayload) -> AuthContext:
        return cls(
            subject_id=payload.subject_id,
            issued_at=payload.issued_at,
            expires_at=payload.expires_at,
        )

"""
Credential store.

User records on top of MetadataStorage. This is the only place that knows
how a user document is laid out; everything else works with UserRecord.
"""

from __future__ import annotations

import logging
from typing import Any

from storefront.core.models import Role, UserRecord
from storefront.core.utils import generate_id, utc_now
from storefront.storage.base import Collections, MetadataStorage

logger = logging.getLogger(__name__)

# Fields a profile update may touch. id, role and answer are not among them.
UPDATABLE_FIELDS = {"name", "email", "password_hash", "phone", "address"}


class DuplicateEmailError(ValueError):
    """Another account already uses this email."""
    pass


class CredentialStore:
    """Reads and writes user records."""

    def __init__(self, storage: MetadataStorage):
        self.storage = storage

    @staticmethod
    def _to_record(doc: dict[str, Any] | None) -> UserRecord | None:
        return UserRecord.model_validate(doc) if doc else None

    async def create(
        self,
        name: str,
        email: str,
        password_hash: str,
        phone: str,
        address: Any,
        answer: str,
        role: Role = Role.USER,
    ) -> UserRecord:
        """
        Create a user.

        Raises:
            DuplicateEmailError: email already registered
            ValueError: empty password hash
        """
        if not password_hash:
            raise ValueError("Refusing to store a user without a password hash")
        if await self.get_by_email(email):
            raise DuplicateEmailError(f"Email already registered: {email}")

        user = UserRecord(
            id=generate_id("user"),
            name=name,
            email=email,
            password_hash=password_hash,
            phone=phone,
            address=address,
            answer=answer,
            role=role,
        )
        await self.storage.save(Collections.USERS, user.id, user.model_dump(mode="json"))
        logger.info(f"Created user {user.id}")
        return user

    async def get_by_id(self, user_id: str) -> UserRecord | None:
        return self._to_record(await self.storage.get(Collections.USERS, user_id))

    async def get_by_email(self, email: str) -> UserRecord | None:
        docs = await self.storage.query(Collections.USERS, {"email": email}, limit=1)
        return self._to_record(docs[0]) if docs else None

    async def find_by_email_and_answer(self, email: str, answer: str) -> UserRecord | None:
        """Identity proof for password recovery."""
        docs = await self.storage.query(
            Collections.USERS, {"email": email, "answer": answer}, limit=1
        )
        return self._to_record(docs[0]) if docs else None

    async def list_all(self, limit: int = 1000) -> list[UserRecord]:
        docs = await self.storage.query(Collections.USERS, limit=limit)
        return [UserRecord.model_validate(doc) for doc in docs]

    async def update(self, user_id: str, **fields: Any) -> UserRecord | None:
        """
        Update profile fields and return the fresh record.

        Unknown fields are rejected; None values are skipped.
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")

        updates = {k: v for k, v in fields.items() if v is not None}
        if "password_hash" in updates and not updates["password_hash"]:
            raise ValueError("Refusing to store an empty password hash")
        if "email" in updates:
            existing = await self.get_by_email(updates["email"])
            if existing and existing.id != user_id:
                raise DuplicateEmailError(f"Email already registered: {updates['email']}")

        updates["updated_at"] = utc_now().isoformat()
        if not await self.storage.update(Collections.USERS, user_id, updates):
            return None
        return await self.get_by_id(user_id)

    async def delete(self, user_id: str) -> bool:
        return await self.storage.delete(Collections.USERS, user_id)

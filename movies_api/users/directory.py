"""
User directory.

This module provides persistence operations on user records:
- Filtered listing
- Unique lookup by email or id
- Creation, update and removal
"""
from datetime import datetime
from typing import Any, List, Optional
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select

from movies_api.auth.passwords import PasswordHasher
from movies_api.base_service import BaseService
from movies_api.database import SessionFactory
from movies_api.exceptions import Conflict, NotFound
from movies_api.users.models import User
from movies_api.users.schemas import UserCreate, UserRecord, UserUpdate

FILTERABLE_FIELDS = ("id", "email", "role", "first_name", "last_name")


class UserDirectory(BaseService):
    """
    Repository for user records.

    Every operation opens its own session, so a directory instance can be
    shared between concurrent requests.
    """

    def __init__(self, session_factory: SessionFactory, hasher: PasswordHasher):
        super().__init__("users")
        self.session_factory = session_factory
        self.hasher = hasher

    async def _hash_unless_hashed(self, password: str) -> str:
        if self.hasher.is_hashed(password):
            return password
        return await run_in_threadpool(self.hasher.hash, password)

    async def get(self, **filters: Any) -> List[UserRecord]:
        """
        List users matching every given field. None values are ignored.

        Raises:
            ValueError: If a filter names a field that cannot be filtered on
        """
        conditions = []
        for field, value in filters.items():
            if field not in FILTERABLE_FIELDS:
                raise ValueError(f"Cannot filter users by '{field}'")
            if value is not None:
                conditions.append(getattr(User, field) == value)

        async with self.session_factory() as db:
            result = await db.execute(select(User).where(*conditions).order_by(User.id))
            return [UserRecord.model_validate(user) for user in result.scalars().all()]

    async def find_by_email(self, email: str) -> Optional[UserRecord]:
        """Get the user owning an email, or None."""
        async with self.session_factory() as db:
            result = await db.execute(select(User).where(User.email == email))
            user = result.scalars().first()
            return UserRecord.model_validate(user) if user is not None else None

    async def find_by_id(self, user_id: int) -> Optional[UserRecord]:
        """Get a user by ID, or None."""
        async with self.session_factory() as db:
            user = await db.get(User, user_id)
            return UserRecord.model_validate(user) if user is not None else None

    async def create(self, data: UserCreate) -> UserRecord:
        """
        Create a new user.

        The password is hashed unless it already is a bcrypt hash.

        Raises:
            Conflict: If the email is already registered
        """
        if await self.find_by_email(data.email) is not None:
            raise Conflict("User already exists")

        values = data.model_dump(exclude_none=True)
        values["password"] = await self._hash_unless_hashed(data.password)

        async with self.session_factory() as db:
            user = User(**values)
            db.add(user)
            await db.commit()
            await db.refresh(user)
            self.log_event("user.created", {"id": user.id, "email": user.email})
            return UserRecord.model_validate(user)

    async def update(self, user_id: int, data: UserUpdate) -> UserRecord:
        """
        Update the provided fields of a user.

        Raises:
            NotFound: If the user does not exist
            Conflict: If the new email belongs to another user
        """
        changes = data.model_dump(exclude_unset=True)

        async with self.session_factory() as db:
            user = await db.get(User, user_id)
            if user is None:
                raise NotFound("User not found")

            if changes.get("email") is not None:
                result = await db.execute(
                    select(User).where(User.email == changes["email"], User.id != user_id)
                )
                if result.scalars().first() is not None:
                    raise Conflict("Email already registered")

            if changes.get("password") is not None:
                changes["password"] = await self._hash_unless_hashed(changes["password"])

            for field, value in changes.items():
                if value is not None:
                    setattr(user, field, value)
            user.updated_at = datetime.utcnow()

            await db.commit()
            await db.refresh(user)
            self.log_event("user.updated", {"id": user_id, "fields_updated": sorted(changes)})
            return UserRecord.model_validate(user)

    async def remove(self, user_id: int) -> UserRecord:
        """
        Delete a user.

        Raises:
            NotFound: If the user does not exist
        """
        async with self.session_factory() as db:
            user = await db.get(User, user_id)
            if user is None:
                raise NotFound("User not found")
            removed = UserRecord.model_validate(user)
            await db.delete(user)
            await db.commit()
            self.log_event("user.removed", {"id": user_id})
            return removed

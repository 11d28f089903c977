"""
Pydantic models for user requests and responses.

JSON keys are camelCase (firstName, createdAt); attributes stay snake_case.
"""
from datetime import datetime
from typing import Optional

from movies_api.schemas import CamelModel, Email
from movies_api.users.models import Role


class UserOut(CamelModel):
    """User information returned to clients. Never carries the password."""
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Role
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserRecord(UserOut):
    """Full user record as stored, including the password hash."""
    password: str

    def public(self) -> UserOut:
        """Strip the password hash."""
        return UserOut.model_validate(self.model_dump(exclude={"password"}))


class UserCreate(CamelModel):
    """Model for creating a user."""
    email: Email
    password: str
    role: Optional[Role] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class UserUpdate(CamelModel):
    """Model for updating a user. Only provided fields change."""
    email: Optional[Email] = None
    password: Optional[str] = None
    role: Optional[Role] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

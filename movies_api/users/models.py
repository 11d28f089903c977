"""
User models for the Movies API.

This module defines:
- The Role enumeration used by route policies
- The SQLAlchemy User model
"""
import enum
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Enum
from movies_api.database import Base


class Role(str, enum.Enum):
    """Flat set of user roles. ADMIN bypasses explicit role lists."""
    ADMIN = "ADMIN"
    USER = "USER"


class User(Base):
    """User model for authentication and authorization."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)  # bcrypt hash, never plaintext
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    role = Column(Enum(Role, name="role"), nullable=False, default=Role.USER)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

"""Request and response models for the auth endpoints."""
from typing import Optional

from movies_api.schemas import CamelModel, Email
from movies_api.users.schemas import UserOut


class SignUp(CamelModel):
    """Model for user registration."""
    email: Email
    password: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class SignIn(CamelModel):
    """Model for user login."""
    email: str
    password: str


class RefreshTokenRequest(CamelModel):
    """Model for exchanging a refresh token."""
    refresh_token: str


class AuthSession(UserOut):
    """Signed-in user information merged with a fresh token pair."""
    access_token: str
    refresh_token: str

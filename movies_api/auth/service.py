"""
Authentication service.

This module provides the authentication flows:
- Credential validation
- User registration (sign-up)
- User authentication (sign-in)
- Refresh token exchange

Every internal failure is re-signalled as Unauthorized (or Conflict for a
duplicate sign-up) so callers cannot tell which step failed. The unknown
user and wrong password paths are not latency-equalized.
"""
from typing import Optional
from fastapi.concurrency import run_in_threadpool

from movies_api.auth.jwt import TokenClaims, TokenPair, TokenService
from movies_api.auth.passwords import PasswordHasher
from movies_api.auth.schemas import AuthSession, RefreshTokenRequest, SignUp
from movies_api.base_service import BaseService
from movies_api.exceptions import Conflict, Unauthorized
from movies_api.users.directory import UserDirectory
from movies_api.users.schemas import UserCreate, UserRecord

INVALID_REFRESH_TOKEN = "Invalid or expired refresh token"


class AuthService(BaseService):
    """
    Orchestrates the hasher, token service and user directory.
    """

    def __init__(self, users: UserDirectory, tokens: TokenService, hasher: PasswordHasher):
        super().__init__("auth")
        self.users = users
        self.tokens = tokens
        self.hasher = hasher

    @staticmethod
    def claims_for(user: UserRecord) -> TokenClaims:
        """Token payload for a user, without the password hash."""
        return TokenClaims(
            id=user.id,
            email=user.email,
            role=user.role,
            first_name=user.first_name,
            last_name=user.last_name,
        )

    def _open_session(self, user: UserRecord) -> AuthSession:
        tokens = self.tokens.issue_pair(self.claims_for(user))
        return AuthSession(
            **user.public().model_dump(),
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
        )

    async def validate_user(self, email: str, password: str) -> Optional[UserRecord]:
        """
        Check credentials against the directory.

        Args:
            email: Email to look up
            password: Plaintext password

        Returns:
            The user if the password matches, None otherwise
        """
        user = await self.users.find_by_email(email)
        if user is None:
            return None
        if await run_in_threadpool(self.hasher.verify, password, user.password):
            return user
        return None

    async def sign_up(self, new_user: SignUp) -> AuthSession:
        """
        Register a new user and sign a token pair.

        Raises:
            Conflict: If the email is already registered
            Unauthorized: If any later step fails
        """
        try:
            existing = await self.users.find_by_email(new_user.email)
        except Exception as e:
            self.log_error(e, context="Sign up lookup")
            raise Unauthorized() from e

        if existing is not None:
            raise Conflict("User already exists")

        try:
            password = new_user.password
            if not self.hasher.is_hashed(password):
                password = await run_in_threadpool(self.hasher.hash, password)

            created = await self.users.create(UserCreate(
                email=new_user.email,
                password=password,
                first_name=new_user.first_name,
                last_name=new_user.last_name,
            ))
            session = self._open_session(created)
        except Exception as e:
            self.log_error(e, context="Sign up")
            raise Unauthorized() from e

        self.log_event("user.signed_up", {"id": created.id, "email": created.email})
        return session

    async def sign_in(self, email: str, password: str) -> AuthSession:
        """
        Authenticate a user and sign a token pair.

        Raises:
            Unauthorized: On wrong credentials or any internal failure
        """
        try:
            user = await self.validate_user(email, password)
        except Exception as e:
            self.log_error(e, context="Sign in")
            raise Unauthorized() from e

        if user is None:
            self.log_event("user.sign_in.failed", {"email": email})
            raise Unauthorized()

        try:
            session = self._open_session(user)
        except Exception as e:
            self.log_error(e, context="Sign in token signing")
            raise Unauthorized() from e

        self.log_event("user.signed_in", {"id": user.id, "email": user.email})
        return session

    async def refresh_token(self, request: RefreshTokenRequest) -> TokenPair:
        """
        Exchange a refresh token for a new token pair.

        The user is looked up again by the email in the token, so a deleted
        user can no longer refresh and a changed role applies immediately.

        Raises:
            Unauthorized: If the token is invalid or expired, or the user is gone
        """
        try:
            claims = self.tokens.verify(request.refresh_token)
            user = await self.users.find_by_email(claims.email)
            if user is None:
                raise Unauthorized(INVALID_REFRESH_TOKEN)
            tokens = self.tokens.issue_pair(self.claims_for(user))
        except Unauthorized:
            raise
        except Exception as e:
            self.log_error(e, context="Token refresh")
            raise Unauthorized(INVALID_REFRESH_TOKEN) from e

        self.log_event("token.refreshed", {"id": user.id})
        return tokens

"""
JWT token handling for authentication.

This module provides functionality for:
- Creating JWT tokens (access and refresh)
- Validating JWT tokens
- Parsing token lifetimes such as "1d", "15m" or "3600"
"""
import re
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, Union
import jwt
from jwt.exceptions import PyJWTError
from pydantic import BaseModel, ConfigDict, ValidationError

from movies_api.schemas import CamelModel
from movies_api.users.models import Role

ALGORITHM = "HS256"
DEFAULT_ACCESS_TOKEN_TTL = "1d"
# Refresh tokens always live one day, whatever the access token TTL is
REFRESH_TOKEN_TTL = timedelta(days=1)

Duration = Union[str, int, float, timedelta]

_DURATION_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s|m|h|d|w|y)?\s*$", re.IGNORECASE)
_UNIT_SECONDS = {
    "ms": 0.001,
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 60 * 60 * 24,
    "w": 60 * 60 * 24 * 7,
    "y": 60 * 60 * 24 * 365.25,
}


class SigningError(Exception):
    """Raised when a token cannot be signed, e.g. the secret is missing."""


class InvalidTokenError(Exception):
    """Raised when a token has a bad signature, a malformed payload or is expired."""


class TokenClaims(CamelModel):
    """Token payload model."""
    model_config = ConfigDict(extra="ignore")

    id: int
    email: str
    role: Role
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    iat: Optional[int] = None  # Issued at (informational)
    exp: Optional[int] = None  # Expiration time


class TokenPair(CamelModel):
    """Access and refresh token pair."""
    access_token: str
    refresh_token: str


def parse_duration(value: Duration) -> timedelta:
    """
    Parse a token lifetime.

    Args:
        value: timedelta, number of seconds, or a string such as "3600",
            "15m" or "2d"

    Returns:
        The lifetime as a timedelta

    Raises:
        ValueError: If the value cannot be parsed or is not positive
    """
    if isinstance(value, timedelta):
        duration = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        duration = timedelta(seconds=value)
    else:
        match = _DURATION_PATTERN.match(str(value))
        if match is None:
            raise ValueError(f"Invalid duration: {value!r}")
        amount, unit = match.groups()
        duration = timedelta(seconds=float(amount) * _UNIT_SECONDS[(unit or "s").lower()])
    if duration <= timedelta(0):
        raise ValueError(f"Duration must be positive: {value!r}")
    return duration


class TokenService:
    """
    Issues and verifies HMAC-signed JWTs.

    The secret is injected once at startup and never read from the
    environment here.
    """

    def __init__(self, secret: str, access_token_ttl: Duration = DEFAULT_ACCESS_TOKEN_TTL):
        self._secret = secret
        self.access_token_ttl = parse_duration(access_token_ttl)

    def require_secret(self) -> None:
        """Raise SigningError if no signing secret is configured."""
        if not self._secret:
            raise SigningError("JWT secret is not configured")

    def issue(
        self,
        claims: Union[BaseModel, Dict[str, Any]],
        ttl: Optional[Duration] = None
    ) -> str:
        """
        Create a signed JWT.

        Args:
            claims: Payload data to include in the token
            ttl: Token lifetime, defaults to the configured access token TTL.
                A timedelta is used as given; other values go through
                parse_duration

        Returns:
            Encoded JWT token string

        Raises:
            SigningError: If the secret is missing or the payload cannot be signed
        """
        self.require_secret()
        if isinstance(claims, BaseModel):
            to_encode = claims.model_dump(by_alias=True, mode="json", exclude={"iat", "exp"})
        else:
            to_encode = dict(claims)
        issued_at = datetime.now(timezone.utc)
        if ttl is None:
            lifetime = self.access_token_ttl
        elif isinstance(ttl, timedelta):
            # Explicit timedeltas are used as given, negative ones included
            lifetime = ttl
        else:
            lifetime = parse_duration(ttl)
        expires = issued_at + lifetime
        to_encode.update({"iat": issued_at, "exp": expires})
        try:
            return jwt.encode(to_encode, self._secret, algorithm=ALGORITHM)
        except (PyJWTError, TypeError, ValueError) as e:
            raise SigningError(str(e)) from e

    def issue_pair(self, claims: Union[BaseModel, Dict[str, Any]]) -> TokenPair:
        """Create an access token (configured TTL) and a refresh token (one day)."""
        return TokenPair(
            access_token=self.issue(claims),
            refresh_token=self.issue(claims, ttl=REFRESH_TOKEN_TTL),
        )

    def verify(self, token: str) -> TokenClaims:
        """
        Verify a JWT token and return its claims.

        Args:
            token: JWT token string

        Returns:
            Decoded claims

        Raises:
            InvalidTokenError: If the signature is invalid, the payload is
                malformed or the token has expired
        """
        if not self._secret:
            raise InvalidTokenError("JWT secret is not configured")
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp"], "verify_iat": False},
            )
            return TokenClaims.model_validate(payload)
        except (PyJWTError, ValidationError, ValueError, TypeError) as e:
            raise InvalidTokenError(str(e)) from e

"""
Authentication router.

This module provides FastAPI router for authentication endpoints:
- User registration (sign-up)
- User login (sign-in)
- Refresh token exchange

All endpoints are public and answer 200 on success.
"""
from datetime import datetime
from typing import Any, Dict
from fastapi import APIRouter, Depends

from movies_api.auth.jwt import TokenPair
from movies_api.auth.middleware import public
from movies_api.auth.schemas import AuthSession, RefreshTokenRequest, SignIn, SignUp
from movies_api.auth.service import AuthService
from movies_api.base_service import BaseService
from movies_api.dependencies import get_auth_service

# Create router
router = APIRouter(tags=["auth"])

# Create service instance
base_service = BaseService("auth")


@router.post("/sign-up", response_model=AuthSession)
@public
async def sign_up(
    user: SignUp,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Register a new user.

    Args:
        user: Registration data
        auth_service: Authentication service

    Returns:
        User information with access and refresh tokens
    """
    return await auth_service.sign_up(user)


@router.post("/sign-in", response_model=AuthSession)
@public
async def sign_in(
    credentials: SignIn,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Authenticate a user and return tokens.

    Args:
        credentials: Email and password
        auth_service: Authentication service

    Returns:
        User information with access and refresh tokens
    """
    return await auth_service.sign_in(credentials.email, credentials.password)


@router.post("/refresh-token", response_model=TokenPair)
@public
async def refresh_token(
    payload: RefreshTokenRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Exchange a refresh token for a new token pair.

    Args:
        payload: Body carrying the refresh token
        auth_service: Authentication service

    Returns:
        New access and refresh tokens
    """
    return await auth_service.refresh_token(payload)


@router.get("/ping", response_model=Dict[str, Any])
@public
async def ping():
    """
    Health check endpoint for the auth service.

    Returns:
        Dict with status information
    """
    return base_service.service_response(
        message="Auth service is alive",
        data={"timestamp": datetime.utcnow().isoformat()}
    )

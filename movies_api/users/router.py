"""
Users router.

Admin endpoints for user management, plus the current user's profile.
Responses never include the password hash.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status

from movies_api.auth.jwt import TokenClaims
from movies_api.auth.middleware import get_current_user, roles
from movies_api.base_service import BaseService
from movies_api.dependencies import get_user_directory
from movies_api.exceptions import NotFound
from movies_api.users.directory import UserDirectory
from movies_api.users.models import Role
from movies_api.users.schemas import UserCreate, UserOut, UserUpdate

router = APIRouter(tags=["users"])

base_service = BaseService("users")


@router.post("", response_model=UserOut)
@roles(Role.ADMIN)
async def create_user(
    user: UserCreate,
    users: UserDirectory = Depends(get_user_directory)
):
    """Create a user. Already-hashed passwords are stored as given."""
    try:
        created = await users.create(user)
        return created.public()
    except HTTPException:
        raise
    except Exception as e:
        base_service.log_error(e, context="Create user")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create user"
        )


@router.get("", response_model=List[UserOut])
@roles(Role.ADMIN)
async def list_users(
    email: Optional[str] = None,
    role: Optional[Role] = None,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    users: UserDirectory = Depends(get_user_directory)
):
    """List users, optionally filtered by exact field values."""
    try:
        found = await users.get(
            email=email,
            role=role,
            first_name=first_name,
            last_name=last_name,
        )
        return [user.public() for user in found]
    except Exception as e:
        base_service.log_error(e, context="List users")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve users"
        )


@router.get("/me", response_model=UserOut)
async def get_me(
    current_user: TokenClaims = Depends(get_current_user),
    users: UserDirectory = Depends(get_user_directory)
):
    """Profile of the authenticated user."""
    user = await users.find_by_id(current_user.id)
    if user is None:
        raise NotFound("User not found")
    return user.public()


@router.get("/{user_id}", response_model=UserOut)
@roles(Role.ADMIN)
async def get_user(
    user_id: int,
    users: UserDirectory = Depends(get_user_directory)
):
    """Get a user by ID."""
    user = await users.find_by_id(user_id)
    if user is None:
        raise NotFound("User not found")
    return user.public()


@router.patch("/{user_id}", response_model=UserOut)
@roles(Role.ADMIN)
async def update_user(
    user_id: int,
    update_data: UserUpdate,
    users: UserDirectory = Depends(get_user_directory)
):
    """Update the provided fields of a user."""
    try:
        updated = await users.update(user_id, update_data)
        return updated.public()
    except HTTPException:
        raise
    except Exception as e:
        base_service.log_error(e, context="Update user")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update user"
        )


@router.delete("/{user_id}", response_model=UserOut)
@roles(Role.ADMIN)
async def remove_user(
    user_id: int,
    users: UserDirectory = Depends(get_user_directory)
):
    """Delete a user and return the removed record."""
    try:
        removed = await users.remove(user_id)
        return removed.public()
    except HTTPException:
        raise
    except Exception as e:
        base_service.log_error(e, context="Remove user")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to remove user"
        )

"""
Movies router.

Any authenticated user can read the catalogue; changes require ADMIN.
"""
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException, status

from movies_api.auth.middleware import roles
from movies_api.base_service import BaseService
from movies_api.dependencies import get_movie_service, get_movie_sync
from movies_api.exceptions import NotFound
from movies_api.movies.schemas import MovieCreate, MovieOut, MovieUpdate
from movies_api.movies.service import MovieService
from movies_api.movies.sync import MovieSync
from movies_api.users.models import Role

router = APIRouter(tags=["movies"])

base_service = BaseService("movies")


@router.post("", response_model=MovieOut)
@roles(Role.ADMIN)
async def create_movie(
    movie: MovieCreate,
    movies: MovieService = Depends(get_movie_service)
):
    """Create a movie."""
    try:
        return await movies.create(movie)
    except HTTPException:
        raise
    except Exception as e:
        base_service.log_error(e, context="Create movie")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create movie"
        )


@router.get("", response_model=List[MovieOut])
async def list_movies(
    title: Optional[str] = None,
    episode_id: Optional[int] = None,
    director: Optional[str] = None,
    producer: Optional[str] = None,
    release_date: Optional[str] = None,
    movies: MovieService = Depends(get_movie_service)
):
    """List movies, optionally filtered by exact field values."""
    try:
        return await movies.get(
            title=title,
            episode_id=episode_id,
            director=director,
            producer=producer,
            release_date=release_date,
        )
    except Exception as e:
        base_service.log_error(e, context="List movies")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve movies"
        )


@router.post("/sync", response_model=Dict[str, Any])
@roles(Role.ADMIN)
async def sync_movies(sync: MovieSync = Depends(get_movie_sync)):
    """Run the external catalogue synchronization now."""
    try:
        created = await sync.sync()
    except Exception as e:
        base_service.log_error(e, context="Sync movies")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Movie synchronization failed"
        )
    return base_service.service_response(message="Movies synchronized", data={"created": created})


@router.get("/{movie_id}", response_model=MovieOut)
async def get_movie(
    movie_id: int,
    movies: MovieService = Depends(get_movie_service)
):
    """Get a movie by ID."""
    movie = await movies.get_by_id(movie_id)
    if movie is None:
        raise NotFound("Movie not found")
    return movie


@router.patch("/{movie_id}", response_model=MovieOut)
@roles(Role.ADMIN)
async def update_movie(
    movie_id: int,
    update_data: MovieUpdate,
    movies: MovieService = Depends(get_movie_service)
):
    """Update the provided fields of a movie."""
    try:
        return await movies.update(movie_id, update_data)
    except HTTPException:
        raise
    except Exception as e:
        base_service.log_error(e, context="Update movie")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update movie"
        )


@router.delete("/{movie_id}", response_model=MovieOut)
@roles(Role.ADMIN)
async def remove_movie(
    movie_id: int,
    movies: MovieService = Depends(get_movie_service)
):
    """Delete a movie and return the removed record."""
    try:
        return await movies.remove(movie_id)
    except HTTPException:
        raise
    except Exception as e:
        base_service.log_error(e, context="Remove movie")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to remove movie"
        )

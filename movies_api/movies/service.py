"""
Movie service.

This module provides CRUD operations on the movie catalogue.
"""
from datetime import datetime
from typing import Any, Iterable, List, Optional, Set
from sqlalchemy import select

from movies_api.base_service import BaseService
from movies_api.database import SessionFactory
from movies_api.exceptions import Conflict, NotFound
from movies_api.movies.models import Movie
from movies_api.movies.schemas import MovieCreate, MovieOut, MovieUpdate

FILTERABLE_FIELDS = ("id", "title", "episode_id", "director", "producer", "release_date")


class MovieService(BaseService):
    """
    Service for movie catalogue operations.
    """

    def __init__(self, session_factory: SessionFactory):
        super().__init__("movies")
        self.session_factory = session_factory

    async def create(self, data: MovieCreate) -> MovieOut:
        """
        Create a new movie.

        Raises:
            Conflict: If a movie with the same episode_id exists
        """
        if data.episode_id is not None and await self.existing_episode_ids([data.episode_id]):
            raise Conflict("Movie already exists")

        async with self.session_factory() as db:
            movie = Movie(**data.model_dump())
            db.add(movie)
            await db.commit()
            await db.refresh(movie)
            self.log_event("movie.created", {"id": movie.id, "episode_id": movie.episode_id})
            return MovieOut.model_validate(movie)

    async def create_many(self, movies: Iterable[MovieCreate]) -> int:
        """Insert several movies in one transaction and return how many were added."""
        rows = [Movie(**data.model_dump()) for data in movies]
        if not rows:
            return 0
        async with self.session_factory() as db:
            db.add_all(rows)
            await db.commit()
        return len(rows)

    async def get(self, **filters: Any) -> List[MovieOut]:
        """
        List movies matching every given field. None values are ignored.

        Raises:
            ValueError: If a filter names a field that cannot be filtered on
        """
        conditions = []
        for field, value in filters.items():
            if field not in FILTERABLE_FIELDS:
                raise ValueError(f"Cannot filter movies by '{field}'")
            if value is not None:
                conditions.append(getattr(Movie, field) == value)

        async with self.session_factory() as db:
            result = await db.execute(select(Movie).where(*conditions).order_by(Movie.id))
            return [MovieOut.model_validate(movie) for movie in result.scalars().all()]

    async def get_by_id(self, movie_id: int) -> Optional[MovieOut]:
        """Get a movie by ID, or None."""
        async with self.session_factory() as db:
            movie = await db.get(Movie, movie_id)
            return MovieOut.model_validate(movie) if movie is not None else None

    async def existing_episode_ids(self, episode_ids: Iterable[int]) -> Set[int]:
        """Subset of the given episode IDs already stored."""
        episode_ids = list(episode_ids)
        if not episode_ids:
            return set()
        async with self.session_factory() as db:
            result = await db.execute(
                select(Movie.episode_id).where(Movie.episode_id.in_(episode_ids))
            )
            return set(result.scalars().all())

    async def update(self, movie_id: int, data: MovieUpdate) -> MovieOut:
        """
        Update the provided fields of a movie.

        Raises:
            NotFound: If the movie does not exist
            Conflict: If the new episode_id belongs to another movie
        """
        changes = data.model_dump(exclude_unset=True)

        async with self.session_factory() as db:
            movie = await db.get(Movie, movie_id)
            if movie is None:
                raise NotFound("Movie not found")

            if changes.get("episode_id") is not None:
                result = await db.execute(
                    select(Movie).where(
                        Movie.episode_id == changes["episode_id"],
                        Movie.id != movie_id
                    )
                )
                if result.scalars().first() is not None:
                    raise Conflict("Movie already exists")

            for field, value in changes.items():
                if value is not None:
                    setattr(movie, field, value)
            movie.edited = datetime.utcnow()

            await db.commit()
            await db.refresh(movie)
            self.log_event("movie.updated", {"id": movie_id, "fields_updated": sorted(changes)})
            return MovieOut.model_validate(movie)

    async def remove(self, movie_id: int) -> MovieOut:
        """
        Delete a movie.

        Raises:
            NotFound: If the movie does not exist
        """
        async with self.session_factory() as db:
            movie = await db.get(Movie, movie_id)
            if movie is None:
                raise NotFound("Movie not found")
            removed = MovieOut.model_validate(movie)
            await db.delete(movie)
            await db.commit()
            self.log_event("movie.removed", {"id": movie_id})
            return removed

"""
Scheduled movie synchronization.

Fetches the film list from the external films API and inserts the
episodes that are not stored yet. Existing movies are never modified.

Usage:
    sync = MovieSync(movie_service, base_url="https://swapi.dev/api")
    sync.schedule(scheduler, interval_hours=2)
"""
from typing import Any, Dict, List, Optional
import httpx
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from movies_api.base_service import BaseService
from movies_api.movies.schemas import MovieCreate
from movies_api.movies.service import MovieService

SYNC_JOB_ID = "movies-sync"
REQUEST_TIMEOUT = 30.0


class MovieSync(BaseService):
    """Fetch-and-insert job for the movie catalogue."""

    def __init__(
        self,
        movies: MovieService,
        base_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        super().__init__("movies.sync")
        self.movies = movies
        self.base_url = base_url.rstrip("/")
        self.transport = transport

    async def fetch_films(self) -> List[Dict[str, Any]]:
        """GET {base_url}/films and return its results."""
        async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT, transport=self.transport) as client:
            response = await client.get(f"{self.base_url}/films")
            response.raise_for_status()
            return response.json().get("results", [])

    async def sync(self) -> int:
        """
        Insert fetched films whose episode_id is not stored yet.

        Returns:
            Number of movies inserted

        Raises:
            httpx.HTTPError: If the films API cannot be reached or answers an error
        """
        films = [MovieCreate.model_validate(film) for film in await self.fetch_films()]

        # Films without an episode number cannot be matched against stored ones
        candidates: Dict[int, MovieCreate] = {}
        for film in films:
            if film.episode_id is not None:
                candidates.setdefault(film.episode_id, film)

        existing = await self.movies.existing_episode_ids(candidates)
        to_create = [film for episode_id, film in candidates.items() if episode_id not in existing]
        created = await self.movies.create_many(to_create)

        self.log_event("movies.synced", {
            "fetched": len(films),
            "created": created,
            "skipped_without_episode": sum(1 for film in films if film.episode_id is None),
        })
        return created

    async def run(self) -> int:
        """
        Scheduled entry point around sync().

        Failures are logged and swallowed; the next scheduled run retries.

        Returns:
            Number of movies inserted, 0 on failure
        """
        try:
            return await self.sync()
        except Exception as e:
            self.log_error(e, context="Movie sync")
            return 0

    def schedule(self, scheduler: AsyncIOScheduler, interval_hours: int) -> None:
        """Register the sync as a recurring job."""
        scheduler.add_job(
            self.run,
            IntervalTrigger(hours=interval_hours),
            id=SYNC_JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self.log_event("movies.sync.scheduled", {"interval_hours": interval_hours})

"""
Test cases for the movie service, the sync job and the movies endpoints.
"""
import httpx
import pytest
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from movies_api.exceptions import Conflict, NotFound
from movies_api.movies.schemas import MovieCreate, MovieUpdate
from movies_api.movies.service import MovieService
from movies_api.movies.sync import SYNC_JOB_ID, MovieSync
from movies_api.tests.helpers import bearer, create_user, sign_in
from movies_api.users.models import Role

BASE_URL = "https://films.test/api"


def film(episode_id, title=None, **extra):
    data = {
        "title": title or f"Episode {episode_id}",
        "episode_id": episode_id,
        "director": "George Lucas",
        "producer": "Gary Kurtz",
        "release_date": "1977-05-25",
        "characters": [f"{BASE_URL}/people/1/"],
        "planets": [],
        "starships": [],
        "vehicles": [],
        "species": [],
        "url": f"{BASE_URL}/films/{episode_id}/",
        "created": "2014-12-10T14:23:31.880000Z",
    }
    data.update(extra)
    return data


def films_transport(results, calls=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(str(request.url))
        return httpx.Response(200, json={"count": len(results), "results": results})
    return httpx.MockTransport(handler)


@pytest.fixture
def movies(session_factory) -> MovieService:
    return MovieService(session_factory)


# --- Service ---

@pytest.mark.asyncio
async def test_create_and_get(movies):
    created = await movies.create(MovieCreate(**film(4, "A New Hope")))
    assert created.id is not None
    assert created.characters == [f"{BASE_URL}/people/1/"]

    assert (await movies.get_by_id(created.id)).title == "A New Hope"
    assert [movie.id for movie in await movies.get(director="George Lucas")] == [created.id]
    assert await movies.get(title="Missing") == []
    assert await movies.get_by_id(created.id + 100) is None


@pytest.mark.asyncio
async def test_create_duplicate_episode_conflicts(movies):
    await movies.create(MovieCreate(**film(4)))
    with pytest.raises(Conflict):
        await movies.create(MovieCreate(**film(4, "Remake")))


@pytest.mark.asyncio
async def test_update_and_remove(movies):
    created = await movies.create(MovieCreate(**film(5)))
    updated = await movies.update(created.id, MovieUpdate(title="The Empire Strikes Back"))
    assert updated.title == "The Empire Strikes Back"
    assert updated.director == "George Lucas"
    assert updated.edited >= created.edited

    await movies.remove(created.id)
    with pytest.raises(NotFound):
        await movies.remove(created.id)
    with pytest.raises(NotFound):
        await movies.update(created.id, MovieUpdate(title="x"))


# --- Sync job ---

@pytest.mark.asyncio
async def test_sync_inserts_only_missing_episodes(movies):
    await movies.create(MovieCreate(**film(4, "Stored title")))
    calls = []
    sync = MovieSync(movies, BASE_URL + "/", transport=films_transport([film(4, "Fetched title"), film(5), film(6)], calls))

    assert await sync.run() == 2
    assert calls == [f"{BASE_URL}/films"]

    stored = {movie.episode_id: movie.title for movie in await movies.get()}
    assert stored == {4: "Stored title", 5: "Episode 5", 6: "Episode 6"}

    # Second run finds nothing new
    assert await sync.run() == 0
    assert len(await movies.get()) == 3


@pytest.mark.asyncio
async def test_sync_skips_films_without_episode(movies):
    sync = MovieSync(movies, BASE_URL, transport=films_transport([film(None, "Unnumbered"), film(1), film(1, "Duplicate")]))
    assert await sync.run() == 1
    assert [movie.title for movie in await movies.get()] == ["Episode 1"]


@pytest.mark.asyncio
async def test_sync_failure_is_logged_and_swallowed(movies, caplog):
    transport = httpx.MockTransport(lambda request: httpx.Response(503, json={"detail": "down"}))
    sync = MovieSync(movies, BASE_URL, transport=transport)

    assert await sync.run() == 0
    assert "Movie sync" in caplog.text
    assert await movies.get() == []


def test_sync_schedule_registers_interval_job():
    scheduler = AsyncIOScheduler()
    MovieSync(MovieService(session_factory=None), BASE_URL).schedule(scheduler, interval_hours=2)
    job = scheduler.get_job(SYNC_JOB_ID)
    assert job is not None
    assert job.trigger.interval.total_seconds() == 2 * 60 * 60


# --- Endpoints ---

@pytest.fixture
def admin_headers(client):
    create_user(client, "admin@b.com", "admin-secret", role=Role.ADMIN)
    return bearer(sign_in(client, "admin@b.com", "admin-secret")["accessToken"])


@pytest.fixture
def user_headers(client):
    create_user(client, "user@b.com", "user-secret")
    return bearer(sign_in(client, "user@b.com", "user-secret")["accessToken"])


def test_movies_require_authentication(client):
    assert client.get("/movies").status_code == 401


def test_user_can_read_but_not_write(client, admin_headers, user_headers):
    created = client.post("/movies", headers=admin_headers, json=film(4)).json()

    assert client.get("/movies", headers=user_headers).status_code == 200
    response = client.get(f"/movies/{created['id']}", headers=user_headers)
    assert response.status_code == 200
    assert response.json()["episode_id"] == 4

    assert client.post("/movies", headers=user_headers, json=film(5)).status_code == 401
    assert client.patch(f"/movies/{created['id']}", headers=user_headers, json={"title": "x"}).status_code == 401
    assert client.delete(f"/movies/{created['id']}", headers=user_headers).status_code == 401
    assert client.post("/movies/sync", headers=user_headers).status_code == 401


def test_admin_movie_management(client, admin_headers):
    response = client.post("/movies", headers=admin_headers, json=film(4))
    assert response.status_code == 200
    movie_id = response.json()["id"]

    assert client.post("/movies", headers=admin_headers, json=film(4)).status_code == 409

    response = client.get("/movies", headers=admin_headers, params={"episode_id": 4})
    assert [movie["id"] for movie in response.json()] == [movie_id]

    response = client.patch(f"/movies/{movie_id}", headers=admin_headers, json={"title": "A New Hope"})
    assert response.json()["title"] == "A New Hope"

    assert client.delete(f"/movies/{movie_id}", headers=admin_headers).status_code == 200
    assert client.get(f"/movies/{movie_id}", headers=admin_headers).status_code == 404


def test_admin_can_trigger_sync(client, admin_headers):
    movie_service = client.app.state.movie_service
    client.app.state.movie_sync = MovieSync(movie_service, BASE_URL, transport=films_transport([film(1), film(2)]))

    response = client.post("/movies/sync", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"] == {"created": 2}
    assert len(client.get("/movies", headers=admin_headers).json()) == 2


@pytest.mark.asyncio
async def test_sync_raises_on_upstream_failure(movies):
    transport = httpx.MockTransport(lambda request: httpx.Response(503, json={"detail": "down"}))
    with pytest.raises(httpx.HTTPStatusError):
        await MovieSync(movies, BASE_URL, transport=transport).sync()


def test_admin_sync_reports_upstream_failure(client, admin_headers):
    movie_service = client.app.state.movie_service
    transport = httpx.MockTransport(lambda request: httpx.Response(503, json={"detail": "down"}))
    client.app.state.movie_sync = MovieSync(movie_service, BASE_URL, transport=transport)

    response = client.post("/movies/sync", headers=admin_headers)
    assert response.status_code == 502
    assert response.json() == {"detail": "Movie synchronization failed"}
    assert client.get("/movies", headers=admin_headers).json() == []

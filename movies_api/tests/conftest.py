"""Shared pytest fixtures for Movies API tests."""
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from movies_api.auth.jwt import TokenService
from movies_api.auth.passwords import PasswordHasher
from movies_api.config import Settings
from movies_api.database import create_engine, create_session_factory, create_tables
from movies_api.main import create_app
from movies_api.tests.helpers import TEST_SECRET, InMemoryUserDirectory


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        jwt_secret=TEST_SECRET,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        bcrypt_rounds=4,
        movies_sync_enabled=False,
    )


@pytest.fixture
def client(settings):
    """TestClient with the lifespan running (tables created)."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(TEST_SECRET)


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'directory.db'}")
    await create_tables(engine)
    yield create_session_factory(engine)
    await engine.dispose()


@pytest.fixture
def directory() -> InMemoryUserDirectory:
    return InMemoryUserDirectory()

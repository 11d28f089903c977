"""
Application factory for the Movies API.

Builds the FastAPI app from Settings, wires the services into app.state and
applies the access and role guards to every route.
"""
from contextlib import asynccontextmanager
from typing import Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import APIRouter, Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from movies_api.auth.jwt import TokenService
from movies_api.auth.middleware import RouteAccessGuard, authorize, public
from movies_api.auth.passwords import PasswordHasher
from movies_api.auth.router import router as auth_router
from movies_api.auth.service import AuthService
from movies_api.base_service import BaseService, configure_logging
from movies_api.config import Settings
from movies_api.database import create_engine, create_session_factory, create_tables
from movies_api.movies.router import router as movies_router
from movies_api.movies.service import MovieService
from movies_api.movies.sync import MovieSync
from movies_api.users.directory import UserDirectory
from movies_api.users.router import router as users_router

VERSION = "0.1.0"

base_service = BaseService("main")

system_router = APIRouter()


@system_router.get("/", tags=["root"])
@public
async def root():
    """Root endpoint returning API information."""
    return base_service.service_response(
        message="Movies API",
        data={
            "name": "Movies API",
            "version": VERSION,
            "services": ["auth", "users", "movies"],
        }
    )


@system_router.get("/health", tags=["health"])
@public
async def health_check():
    """Overall system health check."""
    return base_service.service_response(
        message="System health",
        data={
            "status": "ok",
            "services": {
                "auth": "online",
                "users": "online",
                "movies": "online"
            }
        }
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI.
    Creates missing tables and runs the movie sync scheduler.
    """
    settings: Settings = app.state.settings
    base_service.log_event("service.startup", {"service": "main"})

    await create_tables(app.state.engine)

    scheduler: Optional[AsyncIOScheduler] = None
    if settings.movies_sync_enabled:
        scheduler = AsyncIOScheduler()
        app.state.movie_sync.schedule(scheduler, settings.movies_sync_interval_hours)
        scheduler.start()

    try:
        yield
    finally:
        if scheduler is not None:
            scheduler.shutdown(wait=False)
        await app.state.engine.dispose()
        base_service.log_event("service.shutdown", {"service": "main"})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Raises:
        SigningError: If no JWT secret is configured
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    tokens = TokenService(settings.jwt_secret, settings.jwt_expiration_time)
    # A missing secret is fatal at startup, never a per-request failure
    tokens.require_secret()

    hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    engine = create_engine(settings.database_url)
    session_factory = create_session_factory(engine)
    user_directory = UserDirectory(session_factory, hasher)
    movie_service = MovieService(session_factory)

    app = FastAPI(
        title="Movies API",
        description="Authenticated users and movies catalogue",
        version=VERSION,
        lifespan=lifespan,
        dependencies=[Depends(authorize)],
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.token_service = tokens
    app.state.access_guard = RouteAccessGuard(tokens)
    app.state.user_directory = user_directory
    app.state.auth_service = AuthService(user_directory, tokens, hasher)
    app.state.movie_service = movie_service
    app.state.movie_sync = MovieSync(movie_service, settings.base_movies_url)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(system_router)
    app.include_router(auth_router, prefix="/auth")
    app.include_router(users_router, prefix="/users")
    app.include_router(movies_router, prefix="/movies")

    return app

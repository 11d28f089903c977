"""FastAPI dependencies resolving services wired in the application factory."""
from fastapi import Request

from movies_api.auth.service import AuthService
from movies_api.movies.service import MovieService
from movies_api.movies.sync import MovieSync
from movies_api.users.directory import UserDirectory


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_user_directory(request: Request) -> UserDirectory:
    return request.app.state.user_directory


def get_movie_service(request: Request) -> MovieService:
    return request.app.state.movie_service


def get_movie_sync(request: Request) -> MovieSync:
    return request.app.state.movie_sync

"""Helpers shared by the Movies API tests."""
import asyncio
from typing import Any, Dict, List, Optional

from fastapi.testclient import TestClient

from movies_api.exceptions import Conflict
from movies_api.users.models import Role
from movies_api.users.schemas import UserCreate, UserRecord

TEST_SECRET = "test-jwt-secret-for-pytest-32chars!"


def create_user(client: TestClient, email: str, password: str, role: Role = Role.USER) -> UserRecord:
    """Insert a user through the app's directory, bypassing the HTTP guards."""
    directory = client.app.state.user_directory
    return client.portal.call(
        directory.create,
        UserCreate(email=email, password=password, role=role),
    )


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def sign_in(client: TestClient, email: str, password: str) -> Dict[str, Any]:
    response = client.post("/auth/sign-in", json={"email": email, "password": password})
    assert response.status_code == 200
    return response.json()


class InMemoryUserDirectory:
    """
    User directory kept in a list, without a unique email constraint.

    Lookups yield to the event loop so concurrent flows interleave the way
    they do against a real database.
    """

    def __init__(self):
        self.records: List[UserRecord] = []
        self.fail_on_create: Optional[Exception] = None

    async def find_by_email(self, email: str) -> Optional[UserRecord]:
        await asyncio.sleep(0)
        return next((user for user in self.records if user.email == email), None)

    async def find_by_id(self, user_id: int) -> Optional[UserRecord]:
        return next((user for user in self.records if user.id == user_id), None)

    async def create(self, data: UserCreate) -> UserRecord:
        await asyncio.sleep(0)
        if self.fail_on_create is not None:
            raise self.fail_on_create
        record = UserRecord(
            id=len(self.records) + 1,
            email=data.email,
            password=data.password,
            first_name=data.first_name,
            last_name=data.last_name,
            role=data.role or Role.USER,
        )
        self.records.append(record)
        return record

    def add(self, record: UserRecord) -> UserRecord:
        if any(user.email == record.email for user in self.records):
            raise Conflict("User already exists")
        self.records.append(record)
        return record

    def set_role(self, user_id: int, role: Role) -> None:
        self.records = [
            user.model_copy(update={"role": role}) if user.id == user_id else user
            for user in self.records
        ]

    def delete(self, user_id: int) -> None:
        self.records = [user for user in self.records if user.id != user_id]



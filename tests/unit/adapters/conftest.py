import uuid
from typing import Dict, List, Optional

import fakeredis
import pytest
from fastapi.testclient import TestClient

from src.core.application import create_application
from src.core.exceptions import DuplicateUserError
from src.domain.entities.user import Role, User
from src.domain.interfaces.repositories import IUserRepository
from src.infrastructure.dependency_injection.auth_dependencies import (
    get_event_dispatcher,
    get_user_repository,
)
from src.infrastructure.redis import get_redis
from src.infrastructure.services.event_publisher import (
    BoundedEventDispatcher,
    InMemoryEventPublisher,
)
from tests.factories.user import PASSWORD, create_fake_user


class InMemoryUserRepository(IUserRepository):
    """Dict-backed user repository for route tests."""

    def __init__(self):
        self.users: Dict[uuid.UUID, User] = {}

    def add(self, user: User) -> User:
        self.users[user.id] = user
        return user

    async def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        return self.users.get(user_id)

    async def get_by_username(self, username: str) -> Optional[User]:
        wanted = username.strip().lower()
        return next((u for u in self.users.values() if u.username == wanted), None)

    async def get_by_username_or_email(self, username: str, email: str) -> List[User]:
        return [
            u
            for u in self.users.values()
            if u.username == username.lower() or u.email == email.lower()
        ]

    async def list_users(self, offset: int = 0, limit: int = 100) -> List[User]:
        ordered = sorted(self.users.values(), key=lambda u: u.created_at)
        return ordered[offset : offset + limit]

    async def save(self, user: User) -> User:
        if await self.get_by_username_or_email(user.username, user.email):
            raise DuplicateUserError("user already exists")
        return self.add(user)


@pytest.fixture
def redis_server():
    return fakeredis.FakeServer()


@pytest.fixture
def redis_view(redis_server):
    """Synchronous view of the Redis data the app writes."""
    return fakeredis.FakeRedis(server=redis_server, decode_responses=True)


@pytest.fixture
def users():
    return InMemoryUserRepository()


@pytest.fixture
def publisher():
    return InMemoryEventPublisher()


@pytest.fixture
def dispatcher(publisher):
    # Never started: dispatched events stay queued where tests can count them.
    return BoundedEventDispatcher(publisher, maxsize=10)


@pytest.fixture
def app(redis_server, users, dispatcher):
    application = create_application()

    async def _redis():
        client = fakeredis.aioredis.FakeRedis(server=redis_server, decode_responses=True)
        try:
            yield client
        finally:
            await client.aclose()

    application.dependency_overrides[get_redis] = _redis
    application.dependency_overrides[get_user_repository] = lambda: users
    application.dependency_overrides[get_event_dispatcher] = lambda: dispatcher
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    # Not used as a context manager: the lifespan (database, broker) stays off.
    return TestClient(app)


@pytest.fixture
def alice(users):
    return users.add(create_fake_user(username="alice", password=PASSWORD))


@pytest.fixture
def admin(users):
    return users.add(create_fake_user(username="root", password=PASSWORD, role=Role.ADMIN))


@pytest.fixture
def login(client):
    def _login(username: str, password: str = PASSWORD) -> dict:
        response = client.post(
            "/api/v1/auth/login", json={"username": username, "password": password}
        )
        assert response.status_code == 200, response.text
        return response.json()["tokens"]

    return _login

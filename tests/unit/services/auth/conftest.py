from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from src.domain.interfaces.repositories import IUserRepository
from src.domain.services.auth.session import SessionRotationManager
from src.domain.services.auth.token import TokenIssuer, TokenValidator
from src.domain.value_objects.identity import UserIdentity
from src.infrastructure.repositories.token_store import (
    RedisAccessTokenBlacklist,
    RedisRefreshTokenStore,
)
from tests.factories.token import AUDIENCE, ISSUER, SECRET
from tests.factories.user import create_fake_user


@pytest.fixture
def blacklist(fake_redis):
    return RedisAccessTokenBlacklist(fake_redis)


@pytest.fixture
def refresh_store(fake_redis):
    return RedisRefreshTokenStore(fake_redis)


@pytest.fixture
def issuer():
    return TokenIssuer(secret_key=SECRET, issuer=ISSUER, audience=AUDIENCE)


@pytest.fixture
def issuer_at():
    """Build an issuer whose clock is shifted by `offset` from now."""

    def _build(offset: timedelta) -> TokenIssuer:
        return TokenIssuer(
            secret_key=SECRET,
            issuer=ISSUER,
            audience=AUDIENCE,
            clock=lambda: datetime.now(timezone.utc) + offset,
        )

    return _build


@pytest.fixture
def validator(blacklist):
    return TokenValidator(blacklist, secret_key=SECRET, issuer=ISSUER, audience=AUDIENCE)


@pytest.fixture
def user():
    return create_fake_user(username="alice")


@pytest.fixture
def identity(user) -> UserIdentity:
    return user.to_identity()


@pytest.fixture
def user_repository(user):
    repo = AsyncMock(spec=IUserRepository)
    repo.get_by_id.return_value = user
    return repo


@pytest.fixture
def session_manager(refresh_store, user_repository, issuer):
    return SessionRotationManager(refresh_store, user_repository, issuer)

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import jwt
import pytest

from src.core.exceptions import ExpiredTokenError, InvalidTokenError, StoreUnavailableError
from src.domain.interfaces.token_management import IAccessTokenBlacklist
from src.domain.services.auth.logout import TokenRevocationService
from src.infrastructure.repositories.token_store import (
    BLACKLIST_KEY_PREFIX,
    REFRESH_TOKEN_KEY_PREFIX,
)


@pytest.fixture
def revocation_service(blacklist, session_manager):
    return TokenRevocationService(blacklist, sessions=session_manager)


@pytest.mark.asyncio
async def test_blacklist_entry_lives_as_long_as_the_token(
    revocation_service, issuer_at, fake_redis, identity
):
    # Arrange: issued 50 minutes ago, so about 10 minutes remain
    issued = issuer_at(timedelta(minutes=-50)).issue_access_token(identity)

    # Act
    await revocation_service.revoke(issued.token)

    # Assert
    key = f"{BLACKLIST_KEY_PREFIX}{issued.jti.value}"
    assert await fake_redis.get(key) == "revoked"
    assert 590 <= await fake_redis.ttl(key) <= 601


@pytest.mark.asyncio
async def test_revoked_token_fails_validation(revocation_service, issuer, validator, identity):
    token = issuer.issue_access_token(identity).token

    await revocation_service.revoke(token)

    assert not (await validator.validate(token)).valid


@pytest.mark.asyncio
async def test_expired_token_cannot_be_revoked(revocation_service, issuer_at, fake_redis, identity):
    token = issuer_at(timedelta(hours=-2)).issue_access_token(identity).token

    with pytest.raises(ExpiredTokenError):
        await revocation_service.revoke(token)

    assert await fake_redis.keys(f"{BLACKLIST_KEY_PREFIX}*") == []


@pytest.mark.asyncio
async def test_token_without_jti_is_invalid(revocation_service):
    exp = datetime.now(timezone.utc) + timedelta(minutes=10)
    token = jwt.encode({"sub": "x", "exp": exp}, "whatever-key", algorithm="HS256")

    with pytest.raises(InvalidTokenError):
        await revocation_service.revoke(token)


@pytest.mark.asyncio
async def test_undecodable_token_is_invalid(revocation_service):
    with pytest.raises(InvalidTokenError):
        await revocation_service.revoke("definitely.not.a-jwt")


@pytest.mark.asyncio
async def test_refresh_token_is_dropped_too(
    revocation_service, session_manager, issuer, fake_redis, identity
):
    pair = await session_manager.start_session(identity)

    await revocation_service.revoke(pair.access_token, refresh_token=pair.refresh_token)

    assert await fake_redis.exists(f"{REFRESH_TOKEN_KEY_PREFIX}{pair.refresh_token}") == 0


@pytest.mark.asyncio
async def test_blacklist_outage_propagates_but_refresh_token_is_still_dropped(
    session_manager, fake_redis, identity
):
    blacklist = AsyncMock(spec=IAccessTokenBlacklist)
    blacklist.add.side_effect = StoreUnavailableError()
    service = TokenRevocationService(blacklist, sessions=session_manager)
    pair = await session_manager.start_session(identity)

    with pytest.raises(StoreUnavailableError):
        await service.revoke(pair.access_token, refresh_token=pair.refresh_token)

    assert await fake_redis.exists(f"{REFRESH_TOKEN_KEY_PREFIX}{pair.refresh_token}") == 0


def test_read_claims_ignores_signature(identity, issuer):
    issued = issuer.issue_access_token(identity)
    tampered = issued.token[:-4] + ("AAAA" if not issued.token.endswith("AAAA") else "BBBB")

    claims = TokenRevocationService.read_claims(tampered)

    assert claims.jti == issued.jti
    assert claims.expires_at == issued.expires_at

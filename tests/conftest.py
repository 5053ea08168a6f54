import os

# Settings are read once at import time, so the test environment must be in
# place before anything from `src` is imported.
os.environ["APP_ENV"] = "test"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-0123456789-abcdefghijklmnop"
os.environ["JWT_ISSUER"] = "tessera-account-service"
os.environ["JWT_AUDIENCE"] = "tessera-clients,tessera-admin"
os.environ["BCRYPT_WORK_FACTOR"] = "4"
os.environ["EVENTS_ENABLED"] = "false"
os.environ["LOG_JSON"] = "false"

import fakeredis
import pytest
import pytest_asyncio

from src.utils.i18n import setup_i18n


@pytest.fixture(scope="session", autouse=True)
def setup_translations():
    setup_i18n()


@pytest_asyncio.fixture
async def fake_redis():
    """A fresh in-memory Redis per test."""
    client = fakeredis.aioredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)
    yield client
    await client.aclose()

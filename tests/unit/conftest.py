from unittest.mock import AsyncMock, MagicMock

import pytest
import redis.asyncio

from kvshortener.dao.memory import KeyValueStoreMemoryDAO


@pytest.fixture
def app_prefix() -> str:
    return 'testapp:test'


@pytest.fixture
def store() -> KeyValueStoreMemoryDAO:
    """Provide an empty in-memory key-value store."""
    return KeyValueStoreMemoryDAO()


@pytest.fixture
def redis_client() -> redis.asyncio.Redis:
    """Mock an asyncio Redis client."""
    client = MagicMock(spec=redis.asyncio.Redis)
    client.connection_pool = MagicMock(
        spec=redis.asyncio.ConnectionPool,
        connection_kwargs={'host': 'redis.test', 'port': 6379, 'db': 0},
    )
    client.get = AsyncMock(return_value=None)
    client.set = AsyncMock(return_value=True)
    client.ping = AsyncMock(return_value=True)
    client.aclose = AsyncMock(return_value=None)
    return client

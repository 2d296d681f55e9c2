"""Data Access Object (DAO) implementation of the key-value store in Redis

Responsibilities:
    - Read and write plain string values;
    - Apply native Redis TTLs when requested;
    - Translate Redis connectivity problems into DataStoreError.

The DAO exposes no transactions or compare-and-swap. The allocator and the
rate limiter only ever issue single GETs and SETs.

Example:
    >>> from kvshortener.dao.redis import KeyValueStoreRedisDAO
    >>> store = KeyValueStoreRedisDAO(redis_host='localhost')
    >>> await store.put('3f9a1c', 'https://example.com/page')
    >>> await store.get('3f9a1c')
    'https://example.com/page'
    >>> await store.get('missing')
    None
"""

from beartype import beartype

from kvshortener.dao.base import KeyValueStoreBaseDAO
from kvshortener.dao.redis.mixins import RedisClientMixin
from kvshortener.dao.redis.helpers import handle_redis_connection_error


class KeyValueStoreRedisDAO(RedisClientMixin, KeyValueStoreBaseDAO):
    """Redis-based key-value store

    Attributes (see RedisClientMixin):
        redis (redis.asyncio.Redis):
            Redis client used to communicate with the Redis datastore.

    Methods:
        get(key: str) -> str | None:
            GET the key. Raises DataStoreError on connectivity issues with Redis.

        put(key: str, value: str, ttl_seconds: int | None = None) -> None:
            SET the key, with EX when a TTL is given.
            Raises DataStoreError on connectivity issues with Redis.
    """

    @handle_redis_connection_error
    @beartype
    async def get(self, key: str) -> str | None:
        return await self.redis.get(key)

    @handle_redis_connection_error
    @beartype
    async def put(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        if ttl_seconds is not None and ttl_seconds <= 0:
            raise ValueError(f'TTL must be a positive number of seconds (given value: {ttl_seconds}).')

        if ttl_seconds is None:
            await self.redis.set(key, value)
        else:
            await self.redis.set(key, value, ex=ttl_seconds)

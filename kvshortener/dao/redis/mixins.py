"""Redis mixin providing shared async client initialization and connectivity checks.

Responsibilities:
    - Initialize an asyncio Redis client
    - Healthcheck Redis client
    - Close Redis connections

Classes:
    - RedisClientMixin: Base mixin to inject Redis client setup, healthcheck & teardown.

Example:
    Typical usage with a DAO implementation:

        >>> class KeyValueStoreRedisDAO(RedisClientMixin, KeyValueStoreBaseDAO):
        ...     pass
        ...
        >>> dao = KeyValueStoreRedisDAO(redis_host='localhost')
        >>> await dao._healthcheck()
        True
"""

import redis
from redis.asyncio import Redis

from kvshortener.dao.exceptions import DataStoreError


class RedisClientMixin:
    """Mixin Redis client setup and health check for Redis-backed DAOs.

    Attributes:
        redis (redis.asyncio.Redis):
            Active asyncio Redis client instance used by subclasses.

    Methods:
        _healthcheck(raise_error: bool = True) -> bool:
            Ping Redis to verify connectivity.
            Optionally raise a DataStoreError if unreachable.

        close() -> None:
            Close the underlying connection pool.
    """

    def __init__(
        self,
        redis_host: str | None = 'localhost',
        redis_port: int | None = 6379,
        redis_db: int | None = 0,
        redis_decode_responses: bool | None = True,
        redis_username: str | None = None,
        redis_password: str | None = None,
        redis_client: Redis | None = None,
    ):
        """Initialize a Redis-based DAO

        The option is given to either use an existing Redis client instance or
        create one via the appropriate Redis connection parameters. The client
        connects lazily; await `_healthcheck()` to verify connectivity up front.

        Args:
            redis_host (str | None):
                Hostname of the Redis server. Defaults to 'localhost'.

            redis_port (int | None):
                Redis server port. Defaults to 6379.

            redis_db (int | None):
                Redis database index. Defaults to 0.

            redis_decode_responses (bool | None):
                If True, decodes Redis responses. Defaults to True.

            redis_username (str | None):
                Username for Redis authentication (if required).

            redis_password (str | None):
                Password for Redis authentication (if required).

            redis_client (redis.asyncio.Redis | None):
                Pre-initialized Redis client. If None, a new client is created.
        """
        if redis_client is None:
            redis_client = Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                decode_responses=redis_decode_responses,
                username=redis_username,
                password=redis_password,
            )

        self.redis = redis_client

    async def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis to healthcheck connectivity

        Args:
            raise_error (bool):
                If True, raises DataStoreError on failure. Defaults to True.

        Returns:
            bool:
                True if Redis is reachable, False otherwise (only if raise_error=False).

        Raises:
            DataStoreError:
                If Redis connection cannot be established and raise_error=True.
        """
        try:
            await self.redis.ping()
        except redis.exceptions.ConnectionError as e:
            if raise_error:
                info = self.redis.connection_pool.connection_kwargs
                redis_host = info.get('host')
                redis_port = info.get('port')
                redis_db = info.get('db')
                raise DataStoreError(
                    f"Can't connect to Redis at {redis_host}:{redis_port}/{redis_db}. Check the provided configuration parameters."
                ) from e
            return False
        else:
            return True

    async def close(self) -> None:
        await self.redis.aclose()

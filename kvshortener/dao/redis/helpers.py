import functools
import redis
from typing import TypeVar, Any
from collections.abc import Callable, Awaitable

from kvshortener.dao.exceptions import DataStoreError


__all__ = []

F = TypeVar('F', bound=Callable[..., Awaitable[Any]])


def handle_redis_connection_error(method: F) -> F:
    """Wrap async Redis-interacting DAO methods to handle connection errors

    Args:
        method (Callable[..., Awaitable[Any]]):
            DAO coroutine method performing Redis operations which may raise
            redis.exceptions.ConnectionError or redis.exceptions.TimeoutError.

    Returns:
        Callable[..., Awaitable[Any]]:
            Wrapped method which raises DataStoreError on connectivity issues with Redis.

    Example:
        >>> @handle_redis_connection_error
        ... async def get(self, key):
        ...     return await self.redis.get(key)
    """

    @functools.wraps(method)
    async def wrapper(self, *args, **kwargs):
        try:
            return await method(self, *args, **kwargs)
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            info = self.redis.connection_pool.connection_kwargs
            redis_host = info.get('host')
            redis_port = info.get('port')
            redis_db = info.get('db')
            raise DataStoreError(f"Can't connect to Redis at {redis_host}:{redis_port}/{redis_db}.") from e

    return wrapper

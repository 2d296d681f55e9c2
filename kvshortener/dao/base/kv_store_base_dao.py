"""Abstract base class for key-value store data access objects (DAOs).

The allocator and the rate limiter only rely on this contract: an
asynchronous map with `get` and `put` (with an optional TTL). Implementations
give no transactional or compare-and-swap guarantees, and callers must not
assume any.

Responsibilities:
    - Provide an interface for reading and writing string values by key.
    - Standardize error handling across data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from kvshortener.dao.redis import KeyValueStoreRedisDAO
        >>> store = KeyValueStoreRedisDAO(redis_host='localhost')

        >>> await store.put('3f9a1c', 'https://example.com/blog/article-123')
        >>> await store.get('3f9a1c')
        'https://example.com/blog/article-123'

        >>> await store.put('rate:203.0.113.7', '[1730000000000]', ttl_seconds=60)
"""

from abc import ABC, abstractmethod


class KeyValueStoreBaseDAO(ABC):
    """Interface for eventually consistent key-value stores.

    Methods:
        get(key: str) -> str | None:
            Return the value stored under key, or None when absent or expired.
            Raises DataStoreError on connection or read failure.

        put(key: str, value: str, ttl_seconds: int | None = None) -> None:
            Store value under key, overwriting any previous value.
            Raises DataStoreError on connection or write failure.

        close() -> None:
            Release connections held by the store.

    Subclassing:
        Datastore-specific implementations (e.g., KeyValueStoreRedisDAO)
        must extend this class and implement `get` and `put`.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Retrieve a value from the data store.

        Args:
            key (str):
                The full store key.

        Returns:
            str | None: The stored value, or None if the key doesn't exist.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    async def put(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        """Store a value in the data store.

        Args:
            key (str):
                The full store key.

            value (str):
                The value to store.

            ttl_seconds (int | None):
                Expire the key after this many seconds. None keeps it forever.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    async def close(self) -> None:
        """Release any resources held by the store. No-op by default."""
        return None

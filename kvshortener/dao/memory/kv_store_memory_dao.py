"""Process-local key-value store

Backs the `memory` backend used for local runs and unit tests. Values live
in a plain dict together with an optional wall-clock expiry; expired keys
are dropped lazily on read, mirroring how Redis hides expired keys.
"""

import time

from kvshortener.dao.base import KeyValueStoreBaseDAO


class KeyValueStoreMemoryDAO(KeyValueStoreBaseDAO):
    """In-memory key-value store with TTL support."""

    def __init__(self, data: dict[str, str] | None = None):
        # Structure: {key: (value, expires_at or None)}
        self._data: dict[str, tuple[str, float | None]] = {k: (v, None) for k, v in (data or {}).items()}

    async def get(self, key: str) -> str | None:
        entry = self._data.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if expires_at is not None and expires_at <= time.time():
            del self._data[key]
            return None
        return value

    async def put(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        if ttl_seconds is not None and ttl_seconds <= 0:
            raise ValueError(f'TTL must be a positive number of seconds (given value: {ttl_seconds}).')

        expires_at = None if ttl_seconds is None else time.time() + ttl_seconds
        self._data[key] = (value, expires_at)

    def ttl(self, key: str) -> float | None:
        """Return seconds until key expires, or None if it never expires or doesn't exist."""
        entry = self._data.get(key)
        if entry is None or entry[1] is None:
            return None
        return entry[1] - time.time()

"""Short key allocation over a shared, non-transactional key space

Responsibilities:
    - Allocate random short keys for new links, retrying on collision;
    - Claim user-chosen custom paths without retrying;
    - Resolve short keys back to their destination URLs.

The store offers no compare-and-swap, so allocation is check-then-write:

    (request 1): GET 3f9a1c  => nil
    (request 2): GET 3f9a1c  => nil
    (request 1): SET 3f9a1c https://one.example
    (request 2): SET 3f9a1c https://two.example   <- request 1's link is lost

The window is narrow (two round-trips on a ~1.7e7 key space) and accepted.
With `verify_after_write` enabled the allocator re-reads the key after
writing and treats a foreign value as a collision, which detects the loser
of such a race in most interleavings but can't prevent the overwrite.

Example:
    >>> allocator = KeyAllocator(store)
    >>> key = await allocator.allocate('https://example.com')
    >>> key
    '3f9a1c'
    >>> (await allocator.resolve(key)).target
    'https://example.com'
    >>> await allocator.claim('my-talk', 'https://example.com/slides')
    'my-talk'
"""

import re
import logging
from collections.abc import Callable

from kvshortener.constants import KEY_PATTERN
from kvshortener.dao.base import KeyValueStoreBaseDAO
from kvshortener.dao.key_schema import KeySchema
from kvshortener.dao.exceptions import ShortLinkNotFoundError
from kvshortener.exceptions import AllocationExhaustedError, InvalidCustomPathError, PathInUseError
from kvshortener.models import ShortLinkModel
from kvshortener.settings import AllocatorSettings
from kvshortener.utils.shortener import generate_key
from kvshortener.services.constants import (
    KEY_ALLOCATED,
    KEY_COLLISION,
    KEY_OVERWRITTEN,
    ALLOCATION_EXHAUSTED,
    CUSTOM_PATH_CLAIMED,
    CUSTOM_PATH_IN_USE,
)


logger = logging.getLogger(__name__)

_KEY_RE = re.compile(KEY_PATTERN)


def is_valid_key(key: str) -> bool:
    """Return True if key only uses lowercase letters, digits and hyphens."""
    return isinstance(key, str) and _KEY_RE.fullmatch(key) is not None


class KeyAllocator:
    """Allocate and resolve short keys in a key-value store

    Attributes:
        store (KeyValueStoreBaseDAO):
            Key-value store holding `<key> -> <target URL>` entries.
        settings (AllocatorSettings):
            Key length, retry budget and verification switch.
        keys (KeySchema):
            Store key naming, optionally prefixed.

    Methods:
        allocate(target: str) -> str:
            Store target under a fresh random key and return the key.
            Raises AllocationExhaustedError when every candidate collides.

        claim(custom_path: str, target: str) -> str:
            Store target under a user-chosen key.
            Raises InvalidCustomPathError or PathInUseError.

        resolve(key: str) -> ShortLinkModel:
            Look up the target of a key.
            Raises ShortLinkNotFoundError when the key is unknown.
    """

    def __init__(
        self,
        store: KeyValueStoreBaseDAO,
        settings: AllocatorSettings | None = None,
        prefix: str | None = None,
        key_factory: Callable[[int], str] = generate_key,
    ):
        self.store = store
        self.settings = settings or AllocatorSettings()
        self.keys = KeySchema(prefix=prefix)
        self._key_factory = key_factory

    async def allocate(self, target: str) -> str:
        """Store target under a random short key

        Candidates are drawn one at a time; each is checked with a single
        GET and claimed with a single SET. At most `settings.max_attempts`
        candidates are tried.

        Args:
            target (str):
                Destination URL.

        Returns:
            str: The allocated short key (without any store prefix).

        Raises:
            AllocationExhaustedError:
                If all candidates within the retry budget were taken.
            DataStoreError:
                If the store is unreachable.
        """
        for attempt in range(1, self.settings.max_attempts + 1):
            candidate = self._key_factory(self.settings.key_length)
            store_key = self.keys.link_key(candidate)

            if await self.store.get(store_key) is not None:
                logger.info(
                    'Short key %s already taken, retrying.',
                    candidate,
                    extra={'key': candidate, 'attempt': attempt, 'event': KEY_COLLISION},
                )
                continue

            await self.store.put(store_key, target)

            if self.settings.verify_after_write and await self.store.get(store_key) != target:
                logger.warning(
                    'Short key %s was overwritten by a concurrent allocation, retrying.',
                    candidate,
                    extra={'key': candidate, 'attempt': attempt, 'event': KEY_OVERWRITTEN},
                )
                continue

            logger.info('Allocated short key %s.', candidate, extra={'key': candidate, 'attempt': attempt, 'event': KEY_ALLOCATED})
            return candidate

        logger.error(
            'Short key allocation exhausted its retry budget.',
            extra={'attempts': self.settings.max_attempts, 'event': ALLOCATION_EXHAUSTED},
        )
        raise AllocationExhaustedError(f'No free short key found after {self.settings.max_attempts} attempts.')

    async def claim(self, custom_path: str, target: str) -> str:
        """Store target under a user-chosen key

        A taken path is reported instead of retried, because any other key
        would silently ignore what the user asked for.

        Raises:
            InvalidCustomPathError:
                If custom_path doesn't match [0-9a-z-]+.
            PathInUseError:
                If custom_path is already mapped. The existing value is kept.
            DataStoreError:
                If the store is unreachable.
        """
        if not is_valid_key(custom_path):
            raise InvalidCustomPathError(f"Custom path {custom_path!r} may only contain lowercase letters, digits and '-'.")

        store_key = self.keys.link_key(custom_path)
        if await self.store.get(store_key) is not None:
            logger.info('Custom path %s is already in use.', custom_path, extra={'key': custom_path, 'event': CUSTOM_PATH_IN_USE})
            raise PathInUseError(f"The custom path '{custom_path}' is already in use.")

        await self.store.put(store_key, target)
        logger.info('Claimed custom path %s.', custom_path, extra={'key': custom_path, 'event': CUSTOM_PATH_CLAIMED})
        return custom_path

    async def resolve(self, key: str) -> ShortLinkModel:
        target = await self.store.get(self.keys.link_key(key))
        if target is None:
            raise ShortLinkNotFoundError(f"Short link with key '{key}' not found.")
        return ShortLinkModel(key=key, target=target)

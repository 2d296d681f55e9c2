"""Sliding-window rate limiter on top of a key-value store

Each client identity owns one record, `rate:<identity>`, holding the JSON
array of epoch-millisecond timestamps of its admitted requests. A request is
admitted while fewer than `max_requests` timestamps fall inside the trailing
`window_ms`. Denied requests are not recorded, so hammering a limited
endpoint neither grows the record nor pushes the denial further out.

NOTE: admission is a read-modify-write without transactions. Two concurrent
      requests of the same identity can both read N timestamps and both
      write N+1, so the limit is approximate under contention:

      (request 1): GET rate:203.0.113.7   => [..9 timestamps..]
      (request 2): GET rate:203.0.113.7   => [..9 timestamps..]
      (request 1): SET rate:203.0.113.7 [..10..] EX 60   -> admitted
      (request 2): SET rate:203.0.113.7 [..10..] EX 60   -> admitted (11th)

      `recheck_before_commit` re-reads once before the SET, which narrows
      the window but doesn't close it.

Example:
    >>> limiter = RateLimiter(store)
    >>> decision = await limiter.admit('203.0.113.7')
    >>> decision.allowed
    True
    >>> decision.remaining
    9
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum

from kvshortener.dao.base import KeyValueStoreBaseDAO
from kvshortener.dao.key_schema import KeySchema
from kvshortener.models import RateWindowModel
from kvshortener.settings import RateLimiterSettings
from kvshortener.utils import runtime
from kvshortener.services.constants import RATE_LIMITED, RATE_RECORD_CORRUPT


logger = logging.getLogger(__name__)


class Admission(StrEnum):
    ALLOWED = 'allowed'
    DENIED = 'denied'


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a single admission check.

    Attributes:
        admission (Admission):
            ALLOWED or DENIED.
        identity (str):
            Identity the decision applies to.
        remaining (int):
            Requests still admissible in the current window.
        retry_after_ms (int):
            Milliseconds until the next request would be admitted (0 when allowed).
    """

    admission: Admission
    identity: str
    remaining: int = 0
    retry_after_ms: int = 0

    @property
    def allowed(self) -> bool:
        return self.admission is Admission.ALLOWED

    @property
    def retry_after_seconds(self) -> int:
        """Whole seconds for a Retry-After header, rounded up."""
        return -(-self.retry_after_ms // 1000)


def client_identity(headers: Mapping[str, str] | None, settings: RateLimiterSettings | None = None) -> str:
    """Derive the rate-limit identity of a request

    Uses the trusted client address header (case-insensitive). Requests
    without it all share the placeholder identity and therefore one bucket.

    Example:
        >>> client_identity({'cf-connecting-ip': '203.0.113.7'})
        '203.0.113.7'
        >>> client_identity({})
        'unknown'
    """
    settings = settings or RateLimiterSettings()
    wanted = settings.identity_header.lower()
    for name, value in (headers or {}).items():
        if name.lower() == wanted and value and value.strip():
            return value.strip()
    return settings.unknown_identity


class RateLimiter:
    """Admit or deny requests per identity within a sliding window

    Attributes:
        store (KeyValueStoreBaseDAO):
            Key-value store holding the rate records.
        settings (RateLimiterSettings):
            Window length, request budget and identity derivation.
        keys (KeySchema):
            Store key naming, optionally prefixed.
    """

    def __init__(self, store: KeyValueStoreBaseDAO, settings: RateLimiterSettings | None = None, prefix: str | None = None):
        self.store = store
        self.settings = settings or RateLimiterSettings()
        self.keys = KeySchema(prefix=prefix)

    async def admit(self, identity: str, now_ms: int | None = None) -> RateLimitDecision:
        """Admit or deny one request of identity

        Args:
            identity (str):
                Client identity, see `client_identity()`.
            now_ms (int | None):
                Request time in epoch milliseconds. Defaults to the wall clock.

        Returns:
            RateLimitDecision: ALLOWED (timestamp recorded) or DENIED (nothing written).

        Raises:
            DataStoreError:
                If the store is unreachable.
        """
        now_ms = runtime.now_ms() if now_ms is None else now_ms
        store_key = self.keys.rate_key(identity)

        window = await self._read(identity, store_key, now_ms)
        if len(window) >= self.settings.max_requests:
            return self._deny(window, now_ms)

        if self.settings.recheck_before_commit:
            window = await self._read(identity, store_key, now_ms)
            if len(window) >= self.settings.max_requests:
                return self._deny(window, now_ms)

        window = window.appended(now_ms)
        await self.store.put(store_key, window.to_json(), ttl_seconds=self.settings.ttl_seconds)

        return RateLimitDecision(
            admission=Admission.ALLOWED,
            identity=identity,
            remaining=self.settings.max_requests - len(window),
        )

    async def _read(self, identity: str, store_key: str, now_ms: int) -> RateWindowModel:
        raw = await self.store.get(store_key)
        try:
            window = RateWindowModel.from_json(identity, raw)
        except ValueError:
            # An unreadable record is replaced on the next admitted request
            logger.warning(
                'Discarding malformed rate record.',
                extra={'identity': identity, 'storeKey': store_key, 'event': RATE_RECORD_CORRUPT},
            )
            window = RateWindowModel(identity)
        return window.pruned(now_ms, self.settings.window_ms)

    def _deny(self, window: RateWindowModel, now_ms: int) -> RateLimitDecision:
        # The request becomes admissible once enough of the oldest entries leave the window
        ordered = sorted(window.timestamps)
        release_at = ordered[len(ordered) - self.settings.max_requests] + self.settings.window_ms
        retry_after_ms = max(1, release_at - now_ms)

        logger.info(
            'Rate limit exceeded.',
            extra={'identity': window.identity, 'requests': len(window), 'retryAfterMs': retry_after_ms, 'event': RATE_LIMITED},
        )
        return RateLimitDecision(
            admission=Admission.DENIED,
            identity=window.identity,
            remaining=0,
            retry_after_ms=retry_after_ms,
        )

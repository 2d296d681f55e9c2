import json
from dataclasses import dataclass, field


@dataclass(frozen=True)
class RateWindowModel:
    """Request timestamps recorded for a single client identity.

    Attributes:
        identity (str):
            Client address, or the shared placeholder identity.
        timestamps (tuple[int, ...]):
            Epoch-millisecond timestamps of admitted requests, oldest first.

    Example:
        >>> window = RateWindowModel('203.0.113.7', (1_000, 2_000))
        >>> window.pruned(now_ms=61_500, window_ms=60_000).timestamps
        (2000,)
    """

    identity: str
    timestamps: tuple[int, ...] = field(default_factory=tuple)

    @classmethod
    def from_json(cls, identity: str, raw: str | None) -> 'RateWindowModel':
        """Decode a stored JSON array of integers.

        Raises:
            ValueError: If the stored value isn't a JSON array of integers.
        """
        if raw is None:
            return cls(identity)

        data = json.loads(raw)
        if not isinstance(data, list) or not all(isinstance(ts, int) and not isinstance(ts, bool) for ts in data):
            raise ValueError(f'Rate window for {identity!r} is not a JSON array of integers.')
        return cls(identity, tuple(data))

    def to_json(self) -> str:
        return json.dumps(list(self.timestamps))

    def pruned(self, now_ms: int, window_ms: int) -> 'RateWindowModel':
        """Drop every timestamp at least `window_ms` old."""
        return RateWindowModel(self.identity, tuple(ts for ts in self.timestamps if now_ms - ts < window_ms))

    def appended(self, now_ms: int) -> 'RateWindowModel':
        return RateWindowModel(self.identity, self.timestamps + (now_ms,))

    def __len__(self) -> int:
        return len(self.timestamps)

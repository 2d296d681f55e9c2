"""Explicit settings objects for the allocator, rate limiter and renderer

Every tunable constant lives here instead of inside the components, so tests
and deployments can pass edge values directly. Settings are loaded from the
`settings` section of a function's AppConfig document:

    {
        "rate_limiter": {"window_ms": 60000, "max_requests": 10},
        "renderer": {"cell_size_px": 10}
    }

Missing keys keep their defaults; unknown keys or values of the wrong type
raise BadConfigurationError.
"""

import dataclasses
from dataclasses import dataclass
from typing import Any, Self

from kvshortener.constants import Defaults
from kvshortener.exceptions import BadConfigurationError


class _FromMappingMixin:
    @classmethod
    def from_mapping(cls, data: dict[str, Any] | None) -> Self:
        """Build settings from a plain dict, validating keys and value types."""
        data = data or {}
        if not isinstance(data, dict):
            raise BadConfigurationError(f'{cls.__name__} must be a JSON object (given type: {type(data).__name__}).')
        fields = {f.name: f for f in dataclasses.fields(cls)}

        unknown = sorted(set(data) - set(fields))
        if unknown:
            raise BadConfigurationError(f'Unknown {cls.__name__} keys: {", ".join(unknown)}')

        for name, value in data.items():
            expected = type(getattr(cls(), name))
            # ints are acceptable wherever floats are expected
            ok = isinstance(value, expected) or (expected is float and isinstance(value, int))
            if not ok or (expected is not bool and isinstance(value, bool)):
                raise BadConfigurationError(
                    f'{cls.__name__}.{name} must be of type {expected.__name__} (given type: {type(value).__name__}).'
                )
        return cls(**data)


@dataclass(frozen=True)
class AllocatorSettings(_FromMappingMixin):
    key_length: int = Defaults.KEY_LENGTH
    max_attempts: int = Defaults.MAX_ALLOCATION_ATTEMPTS
    # Re-read each freshly written key and treat a foreign value as a collision
    verify_after_write: bool = False

    def __post_init__(self):
        if not 1 <= self.key_length <= 32:
            raise BadConfigurationError(f'key_length must be between 1 and 32 (given value: {self.key_length}).')
        if self.max_attempts < 1:
            raise BadConfigurationError(f'max_attempts must be positive (given value: {self.max_attempts}).')


@dataclass(frozen=True)
class RateLimiterSettings(_FromMappingMixin):
    window_ms: int = Defaults.RATE_WINDOW_MS
    max_requests: int = Defaults.RATE_MAX_REQUESTS
    identity_header: str = Defaults.RATE_IDENTITY_HEADER
    unknown_identity: str = Defaults.RATE_UNKNOWN_IDENTITY
    # Re-read the window once right before committing the new timestamp
    recheck_before_commit: bool = False

    def __post_init__(self):
        if self.window_ms < 1000:
            raise BadConfigurationError(f'window_ms must be at least 1000 (given value: {self.window_ms}).')
        if self.max_requests < 1:
            raise BadConfigurationError(f'max_requests must be positive (given value: {self.max_requests}).')

    @property
    def ttl_seconds(self) -> int:
        """Store-level expiry for rate records, the window rounded up to whole seconds."""
        return -(-self.window_ms // 1000)


@dataclass(frozen=True)
class RendererSettings(_FromMappingMixin):
    error_correction: str = Defaults.ERROR_CORRECTION
    cell_size_px: int = Defaults.CELL_SIZE_PX
    margin_cells: int = Defaults.MARGIN_CELLS
    font_size_px: int = Defaults.FONT_SIZE_PX
    min_font_size_px: int = Defaults.MIN_FONT_SIZE_PX
    caption_padding_px: int = Defaults.CAPTION_PADDING_PX
    glyph_width_ratio: float = Defaults.GLYPH_WIDTH_RATIO
    caption_max_width_ratio: float = Defaults.CAPTION_MAX_WIDTH_RATIO

    def __post_init__(self):
        if self.error_correction not in {'L', 'M', 'Q', 'H'}:
            raise BadConfigurationError(f'Unknown error correction level {self.error_correction!r}.')
        if self.cell_size_px < 1 or self.margin_cells < 0:
            raise BadConfigurationError('cell_size_px must be positive and margin_cells non-negative.')
        if not 1 <= self.min_font_size_px <= self.font_size_px:
            raise BadConfigurationError(
                f'Font bounds must satisfy 1 <= min_font_size_px <= font_size_px '
                f'(given values: {self.min_font_size_px}, {self.font_size_px}).'
            )

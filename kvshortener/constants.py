from enum import StrEnum


class TTL:
    """TTL durations in seconds."""

    # Browser/CDN cache lifetime for rendered code images (1 year in seconds)
    ONE_YEAR = 31_536_000  # 60 * 60 * 24 * 365


class Defaults:
    """Default tuning values for the allocator, rate limiter and renderer."""

    KEY_LENGTH = 6  # Characters taken from a random UUID hex string
    MAX_ALLOCATION_ATTEMPTS = 10  # Candidate keys tried before giving up

    RATE_WINDOW_MS = 60_000  # Sliding window length (1 minute)
    RATE_MAX_REQUESTS = 10  # Requests admitted per identity per window
    RATE_IDENTITY_HEADER = 'CF-Connecting-IP'
    RATE_UNKNOWN_IDENTITY = 'unknown'

    ERROR_CORRECTION = 'H'  # ~30% recovery, tolerates the caption occlusion
    CELL_SIZE_PX = 10
    MARGIN_CELLS = 4
    FONT_SIZE_PX = 32
    MIN_FONT_SIZE_PX = 12
    CAPTION_PADDING_PX = 4
    GLYPH_WIDTH_RATIO = 0.6  # Average glyph advance as a fraction of the em size
    CAPTION_MAX_WIDTH_RATIO = 0.6  # Caption box may take this share of the image side


# Custom path / short key alphabet
KEY_PATTERN = r'^[0-9a-z-]+$'


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'

class KVShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:kvshortener_error'


class ConfigurationError(KVShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'


class AllocatorError(KVShortenerError):
    """Base exception for short key allocation errors."""

    error_code = 'allocator:allocator_error'


class AllocationExhaustedError(AllocatorError):
    """Raised when every candidate key within the retry budget collided."""

    error_code = 'allocator:allocation_exhausted_error'


class PathInUseError(AllocatorError):
    """Raised when a user-chosen custom path is already mapped to a URL."""

    error_code = 'allocator:path_in_use_error'


class InvalidCustomPathError(AllocatorError):
    """Raised when a custom path contains characters outside [0-9a-z-]."""

    error_code = 'allocator:invalid_custom_path_error'


class RendererError(KVShortenerError):
    """Base exception for code image rendering errors."""

    error_code = 'renderer:renderer_error'


class EncodingFailedError(RendererError):
    """Raised when a payload can't be encoded at the requested error-correction level."""

    error_code = 'renderer:encoding_failed_error'

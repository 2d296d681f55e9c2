from kvshortener.exceptions import KVShortenerError


class DAOError(KVShortenerError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class ShortLinkNotFoundError(DAOError):
    """Raised when a short key isn't mapped to any URL in the data store."""

    error_code = 'dao:short_link_not_found_error'


class DataStoreError(DAOError):
    """Raised when the data store encounters an error.

    Examples include connection issues, timeouts, and out-of-memory failures.
    """

    error_code = 'dao:data_store_error'

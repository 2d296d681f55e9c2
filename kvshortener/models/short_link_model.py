from dataclasses import dataclass


@dataclass(frozen=True)
class ShortLinkModel:
    """Represent a shortened URL mapping.

    Attributes:
        key (str):
            The short identifier, either 6 generated characters or a custom
            path matching [0-9a-z-]+.
        target (str):
            The destination URL that the short key redirects to.

    Example:
        >>> link = ShortLinkModel(key='3f9a1c', target='https://example.com/article/123')
        >>> link.key
        '3f9a1c'
        >>> link.target
        'https://example.com/article/123'
    """

    key: str
    target: str

"""Short key generation utility

This module provides a helper function for generating random short keys
from a version 4 UUID.

Functions:
    generate_key(length=6):
        Generate a random lowercase hex token suitable for use as a URL slug.

Example:
    >>> from kvshortener.utils import generate_key
    >>> generate_key()
    '3f9a1c'
"""

import uuid


def generate_key(length: int = 6) -> str:
    """Generate a random short key for a new link.

    The key is the first `length` characters of a random UUID rendered as
    lowercase hex, so every character is in [0-9a-f].

    Args:
        length (int, optional):
            Number of characters in the key (1 to 32). Defaults to 6.

    Returns:
        str: A random lowercase hex token.

    NOTE:
        - Keys are NOT unique by construction. 6 hex characters give ~1.7e7
          combinations, so callers must check the store and retry on collision.
        - uuid4() draws from os.urandom, so keys are not predictable.
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if not 1 <= length <= 32:
        raise ValueError(f'Length must be between 1 and 32 (given value: {length}).')

    return uuid.uuid4().hex[:length]

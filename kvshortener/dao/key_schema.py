import functools
from collections.abc import Callable


__all__ = ['KeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class KeySchema:
    """Provide standardized store keys for short links and rate windows.

    Without a prefix the layout is the bare one shared with other deployments
    of the shortener: `<key>` for links and `rate:<identity>` for rate windows.
    A prefix such as "kvshortener:prod" namespaces every key.
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def link_key(self, short_key: str) -> str:
        return short_key

    @prefix_key
    def rate_key(self, identity: str) -> str:
        return f'rate:{identity}'

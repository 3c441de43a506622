import re
import functools
from collections.abc import Callable


__all__ = ['RedisKeySchema']  # hide internal helpers (prefix_key, escape_glob) from imports


# Characters with a special meaning in Redis glob-style MATCH patterns
GLOB_SPECIAL_CHARS = re.compile(r'([\\*?\[\]])')


def escape_glob(text: str) -> str:
    return GLOB_SPECIAL_CHARS.sub(r'\\\1', text)


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for storing URL mappings.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "sealedshortener:prod" or "sealedshortener:dev".
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def namespace(self) -> str:
        return 'links:'

    @prefix_key
    def link_key(self, key: str) -> str:
        return f'links:{key}'

    def link_pattern(self, key_prefix: str = '') -> str:
        """Return a SCAN MATCH pattern for every link key starting with key_prefix."""
        return escape_glob(self.namespace() + key_prefix) + '*'

    def strip(self, redis_key: str) -> str:
        """Recover the store key from its namespaced Redis key."""
        namespace = self.namespace()
        if not redis_key.startswith(namespace):
            raise ValueError(f"Redis key '{redis_key}' is outside of namespace '{namespace}'.")
        return redis_key[len(namespace) :]

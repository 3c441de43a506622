import inspect
import functools
from typing import TypeVar, Any
from collections.abc import Callable

import redis

from sealedshortener.dao.exceptions import DataStoreError


__all__ = ['handle_redis_connection_error', 'redis_location']

F = TypeVar('F', bound=Callable[..., Any])


def redis_location(dao: Any) -> str:
    info = dao.redis.connection_pool.connection_kwargs
    return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"


def _translate(dao: Any, error: redis.exceptions.RedisError) -> DataStoreError:
    if isinstance(error, redis.exceptions.ConnectionError):
        return DataStoreError(f"Can't connect to Redis at {redis_location(dao)}.")
    return DataStoreError(f'Redis at {redis_location(dao)} failed: {error}')


def handle_redis_connection_error[F](method: F) -> F:
    """Wrap Redis-interacting DAO methods to handle Redis errors

    Generator methods are wrapped as generators, so errors raised while the
    caller consumes them are translated as well.

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations which may raise redis.exceptions.RedisError.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on connectivity or server issues with Redis.

    Example:
        >>> @handle_redis_connection_error
        ... def get_value(self, key):
        ...     return self.redis.get(key)
    """

    if inspect.isgeneratorfunction(method):

        @functools.wraps(method)
        def generator_wrapper(self, *args, **kwargs):
            try:
                yield from method(self, *args, **kwargs)
            except redis.exceptions.RedisError as e:
                raise _translate(self, e) from e

        return generator_wrapper

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except redis.exceptions.RedisError as e:
            raise _translate(self, e) from e

    return wrapper

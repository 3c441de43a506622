"""Redis connection mixin for the URL mapping store.

Responsibilities:
    - Build (or adopt) a text-decoding Redis client
    - PING Redis once at construction, so an unreachable store fails at startup
    - Report whether Redis persists writes to its append-only file (AOF),
      which durable writes (WAITAOF) depend on

Classes:
    - RedisClientMixin: Base mixin injecting the Redis client, key schema and startup checks.

Example:
    >>> class KeyValueRedisDAO(RedisClientMixin, KeyValueBaseDAO):
    ...     pass
    ...
    >>> dao = KeyValueRedisDAO(redis_host='localhost', prefix='sealedshortener:local')
    >>> dao._aof_enabled()
    True
"""

import logging
from typing import Optional

import redis

from sealedshortener.dao.exceptions import DataStoreError
from sealedshortener.dao.redis.helpers import handle_redis_connection_error, redis_location
from sealedshortener.dao.redis.redis_key_schema import RedisKeySchema


logger = logging.getLogger(__name__)


class RedisClientMixin:
    """Shared Redis plumbing for Redis-backed DAOs.

    Attributes:
        redis (redis.Redis):
            Client whose responses are decoded to str (keys and sealed values are ASCII).

        keys (RedisKeySchema):
            Namespaced key names, e.g. '<app>:<env>:links:<shortcode>'.
    """

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
    ):
        """Connect to Redis and verify it answers

        Args:
            redis_host, redis_port, redis_db, redis_username, redis_password:
                Connection parameters, used only when redis_client is None.
                Port and db may be given as strings (as read from the environment).

            redis_client (Optional[redis.Redis]):
                Ready-made client (tests, shared pools). Must decode responses.

            prefix (Optional[str]):
                Key namespace, normally '<APP_NAME>:<APP_ENV>'.

        Raises:
            DataStoreError:
                If Redis doesn't answer the startup PING.
        """
        if redis_client is None:
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                decode_responses=True,
                username=redis_username,
                password=redis_password,
            )
        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)

        self._healthcheck()

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis

        Returns:
            bool: True if Redis answered, False if not (only when raise_error=False).

        Raises:
            DataStoreError: If Redis is unreachable and raise_error=True.
        """
        try:
            self.redis.ping()
        except redis.exceptions.ConnectionError as e:
            if not raise_error:
                return False
            raise DataStoreError(
                f"Can't connect to Redis at {redis_location(self)}. Check the provided configuration parameters."
            ) from e
        return True

    @handle_redis_connection_error
    def _aof_enabled(self) -> bool | None:
        """Tell whether Redis runs with `appendonly yes`

        Returns:
            bool | None:
                AOF status from INFO persistence, or None when INFO is not
                permitted for this user (managed Redis, restrictive ACLs).

        Raises:
            DataStoreError: If Redis is unreachable.
        """
        try:
            persistence = self.redis.info('persistence')
        except redis.exceptions.ResponseError:
            logger.warning('Unable to read Redis persistence status.', exc_info=True, extra={'redis': redis_location(self)})
            return None
        return bool(int(persistence.get('aof_enabled', 0)))

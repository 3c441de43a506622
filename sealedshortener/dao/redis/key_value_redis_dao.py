"""Data Access Object (DAO) implementation for the URL mapping store in Redis

This module provides a Redis-based implementation of KeyValueBaseDAO, the
durable key-value store beneath the URL mapping service.

Responsibilities:
    - Write values durably (acknowledged only after the AOF fsync);
    - Write values create-only (SET NX) for unique short codes;
    - Retrieve values by exact key;
    - Lazily scan values by key prefix;
    - Raise appropriate DAO exceptions on Redis failures.

Classes:
    KeyValueRedisDAO:
        DAO for storing and retrieving encrypted URL mappings in a Redis datastore.

Example:
    >>> from sealedshortener.dao.redis import KeyValueRedisDAO

    >>> dao = KeyValueRedisDAO(prefix="app:dev")

    >>> dao.insert("abc123", "bm9uY2UuLi5jaXBoZXJ0ZXh0")
    <KeyValueRedisDAO>

    >>> dao.get("abc123")
    'bm9uY2UuLi5jaXBoZXJ0ZXh0'

    >>> list(dao.scan())
    [('abc123', 'bm9uY2UuLi5jaXBoZXJ0ZXh0')]

NOTE:
    Durable writes rely on WAITAOF, which requires Redis >= 7.2 running with
    `appendonly yes`. Deployments without AOF must disable fsync (fsync=False),
    in which case a write is acknowledged once Redis holds it in memory.
"""

from collections.abc import Iterator
from typing import Optional

from beartype import beartype

from sealedshortener.constants import ENV, Defaults
from sealedshortener.dao.base import KeyValueBaseDAO
from sealedshortener.dao.redis.mixins import RedisClientMixin
from sealedshortener.dao.redis.helpers import handle_redis_connection_error, redis_location
from sealedshortener.dao.exceptions import DataStoreError, KeyAlreadyExistsError


class KeyValueRedisDAO(RedisClientMixin, KeyValueBaseDAO):
    """Redis-based Data Access Object (DAO) for the URL mapping store

    This class implements the KeyValueBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Attributes:
        fsync (bool):
            If True, every write waits for the local AOF fsync before returning.
        fsync_timeout_ms (int):
            Maximum time to wait for the AOF fsync acknowledgement.
        scan_count (int):
            COUNT hint passed to each SCAN call (batch size of a prefix scan).

    Methods:
        put(key: str, value: str, **kwargs) -> KeyValueRedisDAO:
            Insert or overwrite a value durably.
            Raises DataStoreError on connectivity issues or a missing fsync acknowledgement.

        insert(key: str, value: str, **kwargs) -> KeyValueRedisDAO:
            Insert a value durably, only if its key is absent.
            Raises KeyAlreadyExistsError when the key exists.
            Raises DataStoreError on connectivity issues or a missing fsync acknowledgement.

        get(key: str, **kwargs) -> str | None:
            Retrieve a value by exact key, None when absent.
            Raises DataStoreError on connectivity issues with Redis.

        scan(prefix: str = '', **kwargs) -> Iterator[tuple[str, str]]:
            Lazily yield (key, value) pairs whose key starts with prefix.
            Raises DataStoreError on connectivity issues with Redis.
    """

    def __init__(
        self,
        *args,
        fsync: Optional[bool] = Defaults.REDIS_FSYNC,
        fsync_timeout_ms: Optional[int] = Defaults.REDIS_FSYNC_TIMEOUT_MS,
        scan_count: Optional[int] = Defaults.REDIS_SCAN_COUNT,
        **kwargs,
    ):
        """Initialize the DAO (see RedisClientMixin for connection arguments)

        Args:
            fsync (Optional[bool]):
                Wait for the local AOF fsync after every write. Defaults to True.

            fsync_timeout_ms (Optional[int]):
                WAITAOF timeout in milliseconds. Defaults to 1000.

            scan_count (Optional[int]):
                SCAN COUNT hint. Defaults to 500.

        Raises:
            DataStoreError:
                If Redis healthcheck fails (connectivity issues), or fsync is
                requested while Redis runs without the append-only file.
        """
        super().__init__(*args, **kwargs)
        self.fsync = bool(fsync)
        self.fsync_timeout_ms = int(fsync_timeout_ms)
        self.scan_count = int(scan_count)

        if self.fsync and self._aof_enabled() is False:
            raise DataStoreError(
                f"Redis at {redis_location(self)} runs with appendonly disabled, so writes can't be fsynced. "
                f"Enable AOF or set {ENV.Redis.FSYNC}=false."
            )

    @handle_redis_connection_error
    @beartype
    def put(self, key: str, value: str, **kwargs) -> 'KeyValueRedisDAO':
        """Insert or overwrite a value in Redis and wait for it to be durable

        Args:
            key (str):
                Store key (e.g. a short code).
            value (str):
                Value to store (e.g. a base64 encoded ciphertext).
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            KeyValueRedisDAO: self (for method chaining)

        Raises:
            DataStoreError:
                If a Redis issue occurs or the write isn't fsynced in time.

        Example:
            >>> dao.put('abc123', 'bm9uY2UuLi4=')
            <KeyValueRedisDAO>
        """
        results = self._durable_write(key, value, nx=False)
        self._check_fsync(key, results)
        return self

    @handle_redis_connection_error
    @beartype
    def insert(self, key: str, value: str, **kwargs) -> 'KeyValueRedisDAO':
        """Insert a value into Redis only if the key is absent and wait for it to be durable

        SET NX is atomic, so two concurrent inserts of the same key can never both
        succeed.

        Args:
            key (str):
                Store key (e.g. a short code).
            value (str):
                Value to store (e.g. a base64 encoded ciphertext).
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            KeyValueRedisDAO: self (for method chaining)

        Raises:
            KeyAlreadyExistsError:
                If the key already exists.
            DataStoreError:
                If a Redis issue occurs or the write isn't fsynced in time.

        Example:
            >>> dao.insert('abc123', 'bm9uY2UuLi4=')
            <KeyValueRedisDAO>
        """
        results = self._durable_write(key, value, nx=True)
        if not results[0]:
            raise KeyAlreadyExistsError(f"Key '{key}' already exists.")
        self._check_fsync(key, results)
        return self

    @handle_redis_connection_error
    @beartype
    def get(self, key: str, **kwargs) -> str | None:
        """Retrieve a stored value by its key

        Args:
            key (str):
                Store key (e.g. a short code).
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            str | None:
                The stored value, or None if the key doesn't exist.

        Raises:
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.get('abc123')
            'bm9uY2UuLi4='
        """
        return self.redis.get(self.keys.link_key(key))

    @handle_redis_connection_error
    def scan(self, prefix: str = '', **kwargs) -> Iterator[tuple[str, str]]:
        """Lazily enumerate stored entries whose key starts with prefix

        Walks the keyspace with SCAN (non-blocking for the server) and loads each
        batch of values with a single MGET. SCAN may report a key more than once,
        so keys already yielded are skipped. Keys which vanish between SCAN and
        MGET are skipped as well.

        Args:
            prefix (str):
                Key prefix to match. Defaults to '' (every entry).
            **kwargs:
                Optional keyword arguments (for future use).

        Yields:
            tuple[str, str]:
                (key, value) pairs, in Redis' hash-table order.

        Raises:
            DataStoreError:
                If Redis connectivity issues occur while iterating.

        Example:
            >>> list(dao.scan('abc'))
            [('abc123', 'bm9uY2UuLi4=')]
        """
        if not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        pattern = self.keys.link_pattern(prefix)
        seen: set[str] = set()
        cursor = 0
        while True:
            cursor, redis_keys = self.redis.scan(cursor=cursor, match=pattern, count=self.scan_count)
            batch = [redis_key for redis_key in dict.fromkeys(redis_keys) if redis_key not in seen]
            seen.update(batch)

            if batch:
                for redis_key, value in zip(batch, self.redis.mget(batch)):
                    if value is not None:
                        yield self.keys.strip(redis_key), value

            if int(cursor) == 0:
                break

    def _durable_write(self, key: str, value: str, nx: bool) -> list:
        # NOTE: WAITAOF only covers writes issued on its own connection, hence
        #       the SET and WAITAOF share one (non-transactional) pipeline.
        #       WAITAOF can't run inside MULTI/EXEC.
        with self.redis.pipeline(transaction=False) as pipe:
            pipe.set(self.keys.link_key(key), value, nx=nx)
            if self.fsync:
                pipe.waitaof(1, 0, self.fsync_timeout_ms)
            return pipe.execute()

    def _check_fsync(self, key: str, results: list) -> None:
        if not self.fsync:
            return

        acked_local, _ = results[-1]
        if acked_local < 1:
            raise DataStoreError(f"Write of key '{key}' wasn't fsynced to the AOF within {self.fsync_timeout_ms} ms.")

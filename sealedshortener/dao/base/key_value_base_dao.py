"""Abstract base class for key-value data access objects (DAOs).

This class establishes a consistent contract for the store beneath the URL
mapping service, regardless of the underlying storage mechanism.

Responsibilities:
    - Provide durable writes (overwriting and create-only).
    - Provide exact-match lookups and lazy prefix scans.
    - Standardize error handling across data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from sealedshortener.dao.redis import KeyValueRedisDAO

        >>> dao = KeyValueRedisDAO(...)

        >>> dao.insert('abc123', 'bm9uY2UuLi5jaXBoZXJ0ZXh0')
        <KeyValueRedisDAO>

        >>> dao.get('abc123')
        'bm9uY2UuLi5jaXBoZXJ0ZXh0'

        >>> list(dao.scan('abc'))
        [('abc123', 'bm9uY2UuLi5jaXBoZXJ0ZXh0')]

NOTE:
    - Mappings are immutable once written. The DAO does not provide an
      interface to delete entries.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator


class KeyValueBaseDAO(ABC):
    """Interface for key-value data access objects (DAOs).

    Methods:
        put(key: str, value: str, **kwargs) -> KeyValueBaseDAO:
            Insert or overwrite a value. Returns only after the write is durable.
            Raises DataStoreError on connection, write or flush failure.

        insert(key: str, value: str, **kwargs) -> KeyValueBaseDAO:
            Atomically insert a value only if the key is absent.
            Returns only after the write is durable.
            Raises KeyAlreadyExistsError if the key already exists.
            Raises DataStoreError on connection, write or flush failure.

        get(key: str, **kwargs) -> str | None:
            Retrieve a value by exact key. Returns None if not found.
            Raises DataStoreError on connection or read failure.

        scan(prefix: str = '', **kwargs) -> Iterator[tuple[str, str]]:
            Lazily yield every (key, value) pair whose key starts with prefix.
            Raises DataStoreError (while iterating) on connection or read failure.

    Subclassing:
        Datastore-specific implementations (e.g., KeyValueRedisDAO) must extend
        this class and implement all abstract methods.
    """

    @abstractmethod
    def put(self, key: str, value: str, **kwargs) -> 'KeyValueBaseDAO':
        """Insert or overwrite a value and flush it durably.

        Args:
            key (str):
                Key to write.

            value (str):
                Value to store under key.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            KeyValueBaseDAO: self (for method chaining)

        Raises:
            DataStoreError:
                If there is an error in the data store or the write isn't durable.
        """
        pass

    @abstractmethod
    def insert(self, key: str, value: str, **kwargs) -> 'KeyValueBaseDAO':
        """Insert a value only if its key doesn't exist yet and flush it durably.

        Args:
            key (str):
                Key to write.

            value (str):
                Value to store under key.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            KeyValueBaseDAO: self (for method chaining)

        Raises:
            KeyAlreadyExistsError:
                If the key is already present. The stored value is left untouched.

            DataStoreError:
                If there is an error in the data store or the write isn't durable.
        """
        pass

    @abstractmethod
    def get(self, key: str, **kwargs) -> str | None:
        """Retrieve a value by its exact key.

        Args:
            key (str):
                Key to look up.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            str | None: The stored value if found, otherwise None.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def scan(self, prefix: str = '', **kwargs) -> Iterator[tuple[str, str]]:
        """Lazily enumerate entries whose key starts with prefix.

        The returned iterator is finite and meant to be consumed once. Each key
        is yielded at most once. An empty prefix enumerates the whole store.

        Args:
            prefix (str):
                Key prefix to match. Defaults to '' (every entry).

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            Iterator[tuple[str, str]]: (key, value) pairs in unspecified order.

        Raises:
            DataStoreError:
                If there is an error in the data store while iterating.
        """
        pass

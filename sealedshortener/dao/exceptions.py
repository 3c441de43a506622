"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues,
        failed durability acknowledgement, corrupted values, etc.).

    KeyAlreadyExistsError:
        Raised when a create-only write targets a key which already exists.

Example:
    >>> from sealedshortener.dao.exceptions import DataStoreError
    >>> raise DataStoreError("Can't connect to Redis at localhost:6379/0.")
    Traceback (most recent call last):
        ...
    sealedshortener.dao.exceptions.DataStoreError: Can't connect to Redis at localhost:6379/0.
"""

from sealedshortener.exceptions import SealedShortenerError


class DAOError(SealedShortenerError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, unacknowledged fsync, corrupted values, etc.
    """

    error_code = 'dao:data_store_error'


class KeyAlreadyExistsError(DAOError):
    """Exception raised when attempting to insert a key that already exists in the data store."""

    error_code = 'dao:key_already_exists'

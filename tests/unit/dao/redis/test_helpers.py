"""Unit tests for handle_redis_connection_error decorator.

This test suite verifies that the decorator translates Redis failures
into DataStoreError for plain and generator DAO methods alike.

Test coverage includes:
    1. Normal function execution
       - Ensures wrapped methods and generators return their results.
    2. Error handling
       - Ensures Redis connection errors are converted into DataStoreError.
       - Ensures other Redis server errors keep their message.
       - Ensures errors raised while consuming a generator are converted.
    3. Function metadata preservation
       - Confirms functools.wraps preserves the original function's name and docstring.
"""

from unittest.mock import MagicMock

import pytest
import redis

from sealedshortener.dao.redis.helpers import handle_redis_connection_error
from sealedshortener.dao.exceptions import DataStoreError


class DummyDAO:
    def __init__(self):
        self.redis = MagicMock()
        self.redis.connection_pool.connection_kwargs = {
            'host': 'localhost',
            'port': 6379,
            'db': 0,
        }

    @handle_redis_connection_error
    def ping(self):
        return 'OK'

    @handle_redis_connection_error
    def fail(self, error):
        raise error

    @handle_redis_connection_error
    def entries(self, fail_after=None):
        for i in range(3):
            if i == fail_after:
                raise redis.exceptions.ConnectionError('Connection reset')
            yield i


# -------------------------------
# 1. Normal execution
# -------------------------------


def test_decorator_allows_normal_execution():
    """Ensure the wrapped function executes normally when no error occurs."""
    assert DummyDAO().ping() == 'OK'


def test_decorator_keeps_generators_lazy():
    """Ensure wrapped generator methods still yield their items."""
    assert list(DummyDAO().entries()) == [0, 1, 2]


# -------------------------------
# 2. Error handling
# -------------------------------


def test_decorator_transforms_redis_connection_error():
    """Ensure Redis ConnectionError is caught and re-raised as DataStoreError."""
    with pytest.raises(DataStoreError, match="Can't connect to Redis at localhost:6379/0."):
        DummyDAO().fail(redis.exceptions.ConnectionError('Cannot connect'))


def test_decorator_transforms_redis_response_error():
    """Ensure other Redis errors become DataStoreError with their reason."""
    with pytest.raises(DataStoreError, match='Redis at localhost:6379/0 failed: OOM command not allowed'):
        DummyDAO().fail(redis.exceptions.ResponseError('OOM command not allowed'))


def test_decorator_ignores_non_redis_errors():
    with pytest.raises(ValueError):
        DummyDAO().fail(ValueError('not a Redis problem'))


def test_decorator_transforms_errors_during_iteration():
    """Ensure errors raised mid-iteration are converted after earlier items were yielded."""
    entries = DummyDAO().entries(fail_after=1)

    assert next(entries) == 0
    with pytest.raises(DataStoreError, match="Can't connect to Redis"):
        next(entries)


# -------------------------------
# 3. Function metadata preservation
# -------------------------------


def test_decorator_preserves_function_metadata():
    """Ensure function name and docstring are preserved via functools.wraps."""

    @handle_redis_connection_error
    def sample_function():
        """This is a sample docstring."""
        return 'OK'

    assert sample_function.__name__ == 'sample_function'
    assert 'sample docstring' in sample_function.__doc__

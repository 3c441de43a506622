"""Unit tests for the KeyValueRedisDAO

Test coverage includes:

1. Initialization and configuration
   - Ensures storage options are stored and default sensibly.
   - Ensures durable writes are refused at startup when Redis runs without AOF.

2. Durable writes (put)
   - Validates SET and WAITAOF share one non-transactional pipeline.
   - Confirms writes without fsync skip WAITAOF.
   - Confirms an unacknowledged fsync raises DataStoreError.
   - Confirms Redis connection and server errors raise DataStoreError.

3. Create-only writes (insert)
   - Validates SET NX is used.
   - Confirms existing keys raise KeyAlreadyExistsError.
   - Ensures invalid types raise TypeError or BeartypeCallHintParamViolation.

4. Retrieval behavior
   - Ensures existing keys return their value and missing keys return None.

5. Prefix scans
   - Ensures scans are lazy, batched with MGET and namespace-stripped.
   - Confirms duplicate SCAN results and vanished keys are skipped.
   - Confirms Redis errors raised while iterating become DataStoreError.
"""

import re
from unittest.mock import call

import pytest
import redis
from beartype.roar import BeartypeCallHintParamViolation

from sealedshortener.dao.exceptions import DataStoreError, KeyAlreadyExistsError
from sealedshortener.dao.redis import KeyValueRedisDAO


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def dao(redis_client, app_prefix):
    """Create a KeyValueRedisDAO instance with a mocked Redis client."""
    return KeyValueRedisDAO(redis_client=redis_client, prefix=app_prefix)


@pytest.fixture
def dao_without_fsync(redis_client, app_prefix):
    return KeyValueRedisDAO(redis_client=redis_client, prefix=app_prefix, fsync=False)


# -------------------------------
# 1. Initialization and configuration
# -------------------------------


def test_initialize_with_defaults(dao, redis_client):
    """Ensure fsync is on by default and Redis is pinged on construction."""
    assert dao.fsync is True
    assert dao.fsync_timeout_ms == 1000
    assert dao.scan_count == 500
    redis_client.ping.assert_called_once()


def test_initialize_with_storage_options(redis_client):
    """Ensure storage options are coerced and stored."""
    dao = KeyValueRedisDAO(redis_client=redis_client, fsync=False, fsync_timeout_ms='250', scan_count='10')

    assert dao.fsync is False
    assert dao.fsync_timeout_ms == 250
    assert dao.scan_count == 10


def test_initialize_with_aof_disabled(redis_client, app_prefix):
    """Ensure fsync against a Redis without appendonly fails at construction."""
    redis_client.info.return_value = {'aof_enabled': 0}

    with pytest.raises(DataStoreError, match='appendonly disabled.*REDIS_FSYNC=false'):
        KeyValueRedisDAO(redis_client=redis_client, prefix=app_prefix)


def test_initialize_with_aof_disabled_without_fsync(redis_client):
    redis_client.info.return_value = {'aof_enabled': 0}

    dao = KeyValueRedisDAO(redis_client=redis_client, fsync=False)

    assert dao.fsync is False
    redis_client.info.assert_not_called()


def test_initialize_with_unknown_aof_status(redis_client):
    """Ensure an unreadable persistence status defers the check to WAITAOF."""
    redis_client.info.side_effect = redis.exceptions.NoPermissionError('NOPERM')

    assert KeyValueRedisDAO(redis_client=redis_client).fsync is True


# -------------------------------
# 2. Durable writes (put)
# -------------------------------


def test_put_waits_for_aof_fsync(dao, redis_client):
    """Ensure put() pipelines SET and WAITAOF on one connection."""
    redis_client.execute.return_value = [True, [1, 0]]

    assert dao.put('abc123', 'c2VhbGVk') is dao

    redis_client.pipeline.assert_called_once_with(transaction=False)
    redis_client.set.assert_called_once_with('testapp:test:links:abc123', 'c2VhbGVk', nx=False)
    redis_client.waitaof.assert_called_once_with(1, 0, 1000)


def test_put_without_fsync(dao_without_fsync, redis_client):
    """Ensure put() skips WAITAOF when fsync is disabled."""
    redis_client.execute.return_value = [True]

    dao_without_fsync.put('abc123', 'c2VhbGVk')

    redis_client.set.assert_called_once_with('testapp:test:links:abc123', 'c2VhbGVk', nx=False)
    redis_client.waitaof.assert_not_called()


def test_put_with_unacknowledged_fsync(dao, redis_client):
    """Ensure a write which isn't fsynced in time raises DataStoreError."""
    redis_client.execute.return_value = [True, [0, 0]]

    with pytest.raises(DataStoreError, match=re.escape("Write of key 'abc123' wasn't fsynced to the AOF within 1000 ms.")):
        dao.put('abc123', 'c2VhbGVk')


def test_put_with_redis_connection_error(dao, redis_client):
    """Ensure Redis connection errors during put raise DataStoreError."""
    redis_client.execute.side_effect = redis.exceptions.ConnectionError('Connection error')

    with pytest.raises(DataStoreError, match="Can't connect to Redis at redis.test:6379/0."):
        dao.put('abc123', 'c2VhbGVk')


def test_put_with_aof_disabled(dao, redis_client):
    """Ensure a WAITAOF rejection (appendonly disabled) raises DataStoreError."""
    redis_client.execute.side_effect = redis.exceptions.ResponseError(
        'WAITAOF cannot be used when numlocal is set but appendonly is disabled.'
    )

    with pytest.raises(DataStoreError, match='appendonly is disabled'):
        dao.put('abc123', 'c2VhbGVk')


# -------------------------------
# 3. Create-only writes (insert)
# -------------------------------


def test_insert_uses_set_nx(dao, redis_client):
    """Ensure insert() writes with SET NX and waits for the fsync."""
    redis_client.execute.return_value = [True, [1, 0]]

    assert dao.insert('abc123', 'c2VhbGVk') is dao

    redis_client.set.assert_called_once_with('testapp:test:links:abc123', 'c2VhbGVk', nx=True)
    redis_client.waitaof.assert_called_once_with(1, 0, 1000)


def test_insert_existing_key(dao, redis_client):
    """Ensure inserting an existing key raises KeyAlreadyExistsError."""
    redis_client.execute.return_value = [None, [1, 0]]

    with pytest.raises(KeyAlreadyExistsError, match=re.escape("Key 'abc123' already exists.")):
        dao.insert('abc123', 'c2VhbGVk')


def test_insert_existing_key_without_fsync(dao_without_fsync, redis_client):
    redis_client.execute.return_value = [None]

    with pytest.raises(KeyAlreadyExistsError):
        dao_without_fsync.insert('abc123', 'c2VhbGVk')


@pytest.mark.parametrize('key, value', [(123, 'c2VhbGVk'), ('abc123', b'c2VhbGVk'), (None, None)])
def test_insert_with_invalid_types(dao, key, value):
    """Ensure inserting invalid types raises TypeError or Beartype error."""
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        dao.insert(key, value)


# -------------------------------
# 4. Retrieval behavior
# -------------------------------


def test_get_existing_key(dao, redis_client):
    redis_client.get.return_value = 'c2VhbGVk'

    assert dao.get('abc123') == 'c2VhbGVk'
    redis_client.get.assert_called_once_with('testapp:test:links:abc123')


def test_get_missing_key(dao, redis_client):
    redis_client.get.return_value = None

    assert dao.get('missing') is None


def test_get_with_redis_connection_error(dao, redis_client):
    redis_client.get.side_effect = redis.exceptions.ConnectionError('Connection error')

    with pytest.raises(DataStoreError, match="Can't connect to Redis at redis.test:6379/0."):
        dao.get('abc123')


def test_get_with_invalid_type(dao):
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        dao.get(123)


# -------------------------------
# 5. Prefix scans
# -------------------------------


def test_scan_is_lazy(dao, redis_client):
    """Ensure nothing is sent to Redis until the scan is consumed."""
    dao.scan('')

    redis_client.scan.assert_not_called()


def test_scan_whole_store(dao, redis_client):
    """Ensure an empty prefix walks every link key and strips the namespace."""
    redis_client.scan.side_effect = [
        (17, ['testapp:test:links:abc', 'testapp:test:links:abd']),
        (0, ['testapp:test:links:xyz']),
    ]
    redis_client.mget.side_effect = [['v1', 'v2'], ['v3']]

    entries = list(dao.scan(''))

    assert entries == [('abc', 'v1'), ('abd', 'v2'), ('xyz', 'v3')]
    redis_client.scan.assert_has_calls(
        [
            call(cursor=0, match='testapp:test:links:*', count=500),
            call(cursor=17, match='testapp:test:links:*', count=500),
        ]
    )
    redis_client.mget.assert_has_calls([call(['testapp:test:links:abc', 'testapp:test:links:abd']), call(['testapp:test:links:xyz'])])


def test_scan_with_prefix(dao, redis_client):
    redis_client.scan.return_value = (0, ['testapp:test:links:my-link'])
    redis_client.mget.return_value = ['v1']

    assert list(dao.scan('my-')) == [('my-link', 'v1')]
    redis_client.scan.assert_called_once_with(cursor=0, match='testapp:test:links:my-*', count=500)


def test_scan_skips_duplicate_keys(dao, redis_client):
    """Ensure a key reported twice by SCAN is yielded once."""
    redis_client.scan.side_effect = [
        (3, ['testapp:test:links:abc']),
        (0, ['testapp:test:links:abc', 'testapp:test:links:xyz']),
    ]
    redis_client.mget.side_effect = [['v1'], ['v2']]

    assert list(dao.scan()) == [('abc', 'v1'), ('xyz', 'v2')]
    redis_client.mget.assert_called_with(['testapp:test:links:xyz'])


def test_scan_skips_vanished_keys(dao, redis_client):
    redis_client.scan.return_value = (0, ['testapp:test:links:abc', 'testapp:test:links:gone'])
    redis_client.mget.return_value = ['v1', None]

    assert list(dao.scan()) == [('abc', 'v1')]


def test_scan_empty_store(dao, redis_client):
    redis_client.scan.return_value = (0, [])

    assert list(dao.scan()) == []
    redis_client.mget.assert_not_called()


def test_scan_with_redis_connection_error(dao, redis_client):
    """Ensure Redis errors raised while iterating become DataStoreError."""
    redis_client.scan.side_effect = redis.exceptions.ConnectionError('Connection error')
    entries = dao.scan()

    with pytest.raises(DataStoreError, match="Can't connect to Redis at redis.test:6379/0."):
        next(entries)


def test_scan_with_invalid_prefix_type(dao):
    with pytest.raises(TypeError):
        list(dao.scan(None))

from sealedshortener.dao.redis.redis_key_schema import RedisKeySchema
from sealedshortener.dao.redis.key_value_redis_dao import KeyValueRedisDAO
from sealedshortener.dao.redis.mixins import RedisClientMixin


__all__ = [
    'RedisKeySchema',
    'KeyValueRedisDAO',
    'RedisClientMixin',
]

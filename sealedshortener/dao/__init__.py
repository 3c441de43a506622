from sealedshortener.dao.base import KeyValueBaseDAO
from sealedshortener.dao.redis import KeyValueRedisDAO


__all__ = [
    'KeyValueBaseDAO',
    'KeyValueRedisDAO',
]

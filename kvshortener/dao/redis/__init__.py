from kvshortener.dao.redis.mixins import RedisClientMixin
from kvshortener.dao.redis.kv_store_redis_dao import KeyValueStoreRedisDAO


__all__ = [
    'RedisClientMixin',
    'KeyValueStoreRedisDAO',
]

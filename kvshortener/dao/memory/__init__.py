from kvshortener.dao.memory.kv_store_memory_dao import KeyValueStoreMemoryDAO


__all__ = ['KeyValueStoreMemoryDAO']

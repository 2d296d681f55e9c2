from kvshortener.dao.base.kv_store_base_dao import KeyValueStoreBaseDAO


__all__ = ['KeyValueStoreBaseDAO']

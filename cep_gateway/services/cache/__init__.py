from .store import CacheStore, MemoryCacheStore, RedisCacheStore, create_cache_store

__all__ = ["CacheStore", "MemoryCacheStore", "RedisCacheStore", "create_cache_store"]

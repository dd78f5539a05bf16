"""
地址结果缓存

- MemoryCacheStore: 进程内 TTL 缓存（单实例部署）
- RedisCacheStore: Redis 缓存（多实例共享），Redis 异常时降级为未命中
- create_cache_store: 按配置选择后端

只缓存成功结果，不缓存失败。写入后的值不可变，同一个 key 不需要读-改-写协调。
"""

from __future__ import annotations

import json
import time
from typing import Callable, Protocol

import redis.asyncio as aioredis
from pydantic import ValidationError
from redis.exceptions import RedisError

from cep_gateway.config import Config, config
from cep_gateway.core.exceptions import ConfigurationError
from cep_gateway.core.logger import logger
from cep_gateway.models.address import AddressRecord

REDIS_KEY_PREFIX = "cep:address:"


class CacheStore(Protocol):
    """缓存后端接口，key 为归一化后的 CEP"""

    async def get(self, key: str) -> AddressRecord | None: ...

    async def set(self, key: str, value: AddressRecord, ttl: float) -> None: ...

    async def close(self) -> None: ...


class MemoryCacheStore:
    """进程内 TTL 缓存"""

    def __init__(
        self,
        max_entries: int = 10000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: dict[str, tuple[AddressRecord, float]] = {}
        self._max_entries = max_entries
        self._clock = clock

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> AddressRecord | None:
        cached = self._entries.get(key)
        if cached is None:
            return None
        value, expires_at = cached
        if self._clock() < expires_at:
            return value
        self._entries.pop(key, None)
        return None

    async def set(self, key: str, value: AddressRecord, ttl: float) -> None:
        if ttl <= 0:
            raise ValueError("ttl 必须大于 0")
        # 防止缓存无限膨胀
        if key not in self._entries and len(self._entries) >= self._max_entries:
            self._purge_expired()
            if len(self._entries) >= self._max_entries:
                logger.debug("内存缓存已满 ({} 条)，清空", len(self._entries))
                self._entries.clear()
        self._entries[key] = (value, self._clock() + ttl)

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [k for k, (_, expires_at) in self._entries.items() if expires_at <= now]
        for k in expired:
            del self._entries[k]

    async def close(self) -> None:
        self._entries.clear()


class RedisCacheStore:
    """Redis 缓存，值为 AddressRecord 的 JSON，过期由 Redis 负责"""

    def __init__(self, redis: aioredis.Redis, key_prefix: str = REDIS_KEY_PREFIX) -> None:
        self._redis = redis
        self._key_prefix = key_prefix

    def _key(self, key: str) -> str:
        return f"{self._key_prefix}{key}"

    async def get(self, key: str) -> AddressRecord | None:
        try:
            raw = await self._redis.get(self._key(key))
        except RedisError as e:
            logger.warning("[WARN] Redis 读取失败，按未命中处理: {}", e)
            return None
        if not raw:
            return None
        try:
            return AddressRecord.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning("Redis 缓存数据损坏，忽略: key={}, error={}", key, e)
            return None

    async def set(self, key: str, value: AddressRecord, ttl: float) -> None:
        if ttl <= 0:
            raise ValueError("ttl 必须大于 0")
        try:
            await self._redis.set(
                self._key(key),
                json.dumps(value.to_dict(), ensure_ascii=False),
                px=max(1, int(ttl * 1000)),
            )
        except RedisError as e:
            logger.warning("[WARN] Redis 写入失败，跳过缓存: {}", e)

    async def close(self) -> None:
        # 客户端由 redis_client 模块统一关闭
        return None


async def create_cache_store(settings: Config | None = None) -> CacheStore:
    """
    按配置创建缓存后端

    Redis 不可用时降级为内存缓存（仅在单实例环境下安全）。
    """
    settings = settings or config
    if settings.cache_backend == "memory":
        return MemoryCacheStore(max_entries=settings.cache_max_entries)
    if settings.cache_backend == "redis":
        from cep_gateway.clients.redis_client import get_redis_client

        redis = await get_redis_client(require_redis=False, redis_url=settings.redis_url)
        if redis is None:
            logger.warning("[WARN] Redis 不可用，缓存降级为内存模式（仅在单实例环境下安全）")
            return MemoryCacheStore(max_entries=settings.cache_max_entries)
        return RedisCacheStore(redis)
    raise ConfigurationError(f"不支持的缓存后端: {settings.cache_backend}")

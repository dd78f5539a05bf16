"""
全局 Redis 客户端

仅在 CEP_CACHE_BACKEND=redis 时使用；连接失败时由调用方决定是否降级。
"""

from __future__ import annotations

import asyncio

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from cep_gateway.config import config
from cep_gateway.core.exceptions import ConfigurationError
from cep_gateway.core.logger import logger

_redis_lock = asyncio.Lock()
_redis_client: aioredis.Redis | None = None


async def get_redis_client(
    require_redis: bool = False,
    redis_url: str | None = None,
) -> aioredis.Redis | None:
    """
    获取全局 Redis 客户端（首次调用时建立连接并 PING）

    Args:
        require_redis: 为 True 时 Redis 不可用直接抛出异常，否则返回 None
        redis_url: 连接地址，默认使用 REDIS_URL

    Returns:
        Redis 客户端，或 None（不可用且 require_redis=False）
    """
    global _redis_client
    if _redis_client is not None:
        return _redis_client

    async with _redis_lock:
        if _redis_client is not None:
            return _redis_client

        redis_url = redis_url or config.redis_url
        if not redis_url:
            if require_redis:
                raise ConfigurationError("未配置 REDIS_URL")
            logger.warning("[WARN] 未配置 REDIS_URL，Redis 不可用")
            return None

        client = aioredis.from_url(redis_url, decode_responses=True)
        try:
            await client.ping()
        except RedisError as e:
            await client.aclose()
            if require_redis:
                raise
            logger.warning("[WARN] Redis 连接失败: {}", e)
            return None

        _redis_client = client
        logger.info("[OK] Redis 客户端已连接")
        return _redis_client


async def close_redis_client() -> None:
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
        logger.info("Redis 客户端已关闭")

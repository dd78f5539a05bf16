"""
全局HTTP客户端池管理
避免每次查询都创建新的AsyncClient

所有 Provider 共享一个默认客户端，复用 keep-alive 连接；单次调用的超时上限由
FailoverResolver 控制，这里的 httpx.Timeout 只是传输层兜底。
"""

from __future__ import annotations

import asyncio

import httpx

from cep_gateway.config import config
from cep_gateway.core.logger import logger

# 模块级锁，避免类属性延迟初始化的竞态条件
_default_client_lock = asyncio.Lock()

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "cep-gateway/0.1",
}


def _default_timeout() -> httpx.Timeout:
    return httpx.Timeout(
        connect=config.http_connect_timeout,
        read=config.http_read_timeout,
        write=config.http_write_timeout,
        pool=config.http_pool_timeout,
    )


def _default_limits() -> httpx.Limits:
    return httpx.Limits(
        max_connections=config.http_max_connections,
        max_keepalive_connections=config.http_keepalive_connections,
        keepalive_expiry=config.http_keepalive_expiry,
    )


class HTTPClientPool:
    """
    全局HTTP客户端池

    管理可重用的httpx.AsyncClient实例,避免频繁创建/销毁连接
    """

    _default_client: httpx.AsyncClient | None = None

    @classmethod
    async def get_default_client_async(cls) -> httpx.AsyncClient:
        """
        获取默认的HTTP客户端（异步线程安全版本）
        """
        if cls._default_client is not None and not cls._default_client.is_closed:
            return cls._default_client

        async with _default_client_lock:
            # 双重检查，避免重复创建
            if cls._default_client is None or cls._default_client.is_closed:
                cls._default_client = httpx.AsyncClient(
                    headers=DEFAULT_HEADERS,
                    timeout=_default_timeout(),
                    limits=_default_limits(),
                    follow_redirects=True,
                )
                logger.info(
                    f"全局HTTP客户端池已初始化: "
                    f"max_connections={config.http_max_connections}, "
                    f"keepalive={config.http_keepalive_connections}, "
                    f"keepalive_expiry={config.http_keepalive_expiry}s"
                )
        return cls._default_client

    @classmethod
    async def close(cls) -> None:
        """关闭默认客户端"""
        if cls._default_client is not None:
            await cls._default_client.aclose()
            cls._default_client = None
            logger.info("默认HTTP客户端已关闭")


async def close_http_clients() -> None:
    """关闭HTTP客户端的便捷函数"""
    await HTTPClientPool.close()

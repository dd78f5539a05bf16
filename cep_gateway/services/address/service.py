"""
地址查询服务

缓存旁路（cache-aside）:
1. 归一化 CEP，查询缓存，命中直接返回（不调用任何 Provider）
2. 未命中时交给 FailoverResolver
3. 成功结果写入缓存；失败原样抛出，不缓存
"""

from __future__ import annotations

from cep_gateway.config import Config, config
from cep_gateway.core.logger import logger
from cep_gateway.core.tracing import log_execution
from cep_gateway.models.address import AddressRecord
from cep_gateway.services.cache.store import CacheStore, create_cache_store
from cep_gateway.services.orchestration.failover_resolver import FailoverResolver
from cep_gateway.services.provider.registry import build_providers
from cep_gateway.utils.zip_code import require_normalized_zip_code


class AddressService:
    """地址查询服务"""

    def __init__(self, resolver: FailoverResolver, cache: CacheStore, cache_ttl: float) -> None:
        if cache_ttl <= 0:
            raise ValueError("cache_ttl 必须大于 0")
        self.resolver = resolver
        self.cache = cache
        self.cache_ttl = cache_ttl

    async def find_address(self, zip_code: str) -> AddressRecord:
        """
        查询地址

        Raises:
            AggregateFailureError: 所有 Provider 均失败
            InvalidZipCodeError: 归一化后不是 8 位数字
        """
        cep = require_normalized_zip_code(zip_code)

        async with log_execution(type(self).__name__, "find_address", zip_code=cep) as span:
            cached = await self.cache.get(cep)
            if cached is not None:
                logger.info("缓存命中: zipCode={}", cep)
                span["cache"] = "hit"
                span["output"] = cached.to_dict()
                return cached

            address = await self.resolver.resolve(cep)
            await self.cache.set(cep, address, self.cache_ttl)
            logger.info("地址已缓存: zipCode={}, ttl={}s", cep, self.cache_ttl)
            span["cache"] = "miss"
            span["output"] = address.to_dict()
            return address

    async def close(self) -> None:
        await self.cache.close()


async def create_address_service(settings: Config | None = None) -> AddressService:
    """按配置构建默认服务（Provider 共享全局 HTTP 客户端池）"""
    settings = settings or config
    settings.validate()

    providers = build_providers(settings.cep_providers)
    resolver = FailoverResolver(providers, provider_timeout=settings.cep_provider_timeout)
    cache = await create_cache_store(settings)
    logger.info(
        "AddressService 已初始化: providers={}, cache={}, ttl={}s",
        [p.name for p in providers],
        type(cache).__name__,
        settings.cache_ttl_seconds,
    )
    return AddressService(resolver, cache, settings.cache_ttl_seconds)

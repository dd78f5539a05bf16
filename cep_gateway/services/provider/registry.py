"""
Provider 注册表：按配置中的名称构建适配器列表
"""

from __future__ import annotations

import httpx

from cep_gateway.core.exceptions import ConfigurationError
from cep_gateway.services.provider.awesomeapi import AwesomeApiAdapter
from cep_gateway.services.provider.base import ProviderAdapter
from cep_gateway.services.provider.brasilapi import BrasilApiAdapter
from cep_gateway.services.provider.viacep import ViaCepAdapter

PROVIDER_REGISTRY: dict[str, type[ProviderAdapter]] = {
    ViaCepAdapter.name: ViaCepAdapter,
    BrasilApiAdapter.name: BrasilApiAdapter,
    AwesomeApiAdapter.name: AwesomeApiAdapter,
}


def build_providers(
    names: list[str],
    client: httpx.AsyncClient | None = None,
) -> list[ProviderAdapter]:
    """
    按顺序构建适配器，顺序即轮转顺序

    Raises:
        ConfigurationError: 名称列表为空、包含未知名称或重复名称
    """
    if not names:
        raise ConfigurationError("至少需要配置一个 Provider")

    providers: list[ProviderAdapter] = []
    seen: set[str] = set()
    for raw_name in names:
        name = raw_name.strip().lower()
        adapter_cls = PROVIDER_REGISTRY.get(name)
        if adapter_cls is None:
            raise ConfigurationError(
                f"未知的 Provider: {raw_name}，可选: {', '.join(sorted(PROVIDER_REGISTRY))}"
            )
        if name in seen:
            raise ConfigurationError(f"Provider 重复配置: {raw_name}")
        seen.add(name)
        providers.append(adapter_cls(client=client))
    return providers

"""
Provider 模块

- ProviderAdapter: 适配器基类
- ViaCepAdapter / BrasilApiAdapter / AwesomeApiAdapter: 具体实现
- build_providers: 按名称构建适配器列表
"""

from .awesomeapi import AwesomeApiAdapter
from .base import ProviderAdapter
from .brasilapi import BrasilApiAdapter
from .registry import PROVIDER_REGISTRY, build_providers
from .viacep import ViaCepAdapter

__all__ = [
    "ProviderAdapter",
    "ViaCepAdapter",
    "BrasilApiAdapter",
    "AwesomeApiAdapter",
    "PROVIDER_REGISTRY",
    "build_providers",
]

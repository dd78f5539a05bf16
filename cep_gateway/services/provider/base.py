"""
Provider 适配器基类

每个适配器负责:
- 拼接自己的查询 URL
- 发起一次 GET（不做内部重试，重试/切换由 FailoverResolver 负责）
- 把响应字段映射为标准 AddressRecord

传输层错误（超时、连接失败、HTTP 状态码）原样抛出，由 ErrorClassifier 统一分类；
只有适配器自己能识别的情况（响应体中的"未找到"标记、无法解析的响应）才在这里直接
抛出已分类的 ProviderError。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx

from cep_gateway.clients.http_client import HTTPClientPool
from cep_gateway.core.exceptions import AddressNotFoundError, ProviderResponseError
from cep_gateway.core.logger import logger
from cep_gateway.models.address import AddressRecord


class ProviderAdapter(ABC):
    """地址查询 Provider 适配器"""

    name: str = "base"
    display_name: str = "Base"
    base_url: str = ""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
    ) -> None:
        self._client = client
        if base_url:
            self.base_url = base_url
        self.base_url = self.base_url.rstrip("/")

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client
        return await HTTPClientPool.get_default_client_async()

    @abstractmethod
    def build_url(self, zip_code: str) -> str:
        """返回该 Provider 的查询 URL"""

    @abstractmethod
    def normalize(self, data: dict[str, Any], zip_code: str) -> AddressRecord:
        """把 Provider 响应映射为 AddressRecord"""

    def is_not_found(self, data: dict[str, Any]) -> bool:
        """响应体中的"未找到"标记（HTTP 200 但无结果），默认没有"""
        return False

    async def fetch(self, zip_code: str) -> AddressRecord:
        """
        查询一次地址

        Raises:
            httpx.HTTPStatusError / httpx.TransportError: 原始传输层错误
            AddressNotFoundError: 响应体标记为未找到
            ProviderResponseError: 响应体无法解析
        """
        client = await self._get_client()
        url = self.build_url(zip_code)
        logger.debug("[{}] GET {}", self.name, url)

        response = await client.get(url)
        response.raise_for_status()

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderResponseError(
                self.name, f"Invalid JSON response from {self.display_name}", zip_code
            ) from e

        if not isinstance(data, dict):
            raise ProviderResponseError(
                self.name, f"Unexpected response shape from {self.display_name}", zip_code
            )

        if self.is_not_found(data):
            raise AddressNotFoundError(self.name, zip_code)

        return self.normalize(data, zip_code)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.base_url!r})"

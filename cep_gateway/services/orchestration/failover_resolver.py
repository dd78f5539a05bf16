"""
故障转移解析器

按共享的轮转游标选择起始 Provider，依次尝试全部 Provider:
- 成功: 游标前进一位，返回结果
- 失败: 分类、记录，游标前进一位，尝试下一个
- 全部失败: 汇总后抛出 AggregateFailureError

约束:
- 单次查询内的尝试严格串行，每个 Provider 最多尝试一次，共 N 次，不提前退出
- 游标在解析器实例内共享，每次尝试（无论成败）前进一位，取值始终在 [0, N)
- 每次 Provider 调用都受超时限制；调用方取消时，进行中的 Provider 调用一并取消
"""

from __future__ import annotations

import asyncio
import threading
from typing import Sequence

from cep_gateway.core.enums import ErrorKind
from cep_gateway.core.error_utils import extract_error_message
from cep_gateway.core.exceptions import ConfigurationError
from cep_gateway.core.logger import logger
from cep_gateway.models.address import AddressRecord
from cep_gateway.models.failure import ProviderFailure
from cep_gateway.services.orchestration.error_classifier import ErrorClassifier
from cep_gateway.services.orchestration.failure_aggregator import FailureAggregator
from cep_gateway.services.provider.base import ProviderAdapter
from cep_gateway.utils.zip_code import require_normalized_zip_code

DEFAULT_PROVIDER_TIMEOUT = 5.0


class RotationCursor:
    """
    轮转游标

    读-改-写在锁内完成，多个并发查询（或多线程）同时推进时不会丢失更新。
    """

    def __init__(self, size: int) -> None:
        if size <= 0:
            raise ValueError("size 必须大于 0")
        self._size = size
        self._index = 0
        self._lock = threading.Lock()

    @property
    def size(self) -> int:
        return self._size

    def current(self) -> int:
        with self._lock:
            return self._index

    def advance(self) -> int:
        """前进一位，返回前进后的位置"""
        with self._lock:
            self._index = (self._index + 1) % self._size
            return self._index


class FailoverResolver:
    """多 Provider 故障转移解析器"""

    def __init__(
        self,
        providers: Sequence[ProviderAdapter],
        *,
        provider_timeout: float = DEFAULT_PROVIDER_TIMEOUT,
        classifier: type[ErrorClassifier] = ErrorClassifier,
        aggregator: type[FailureAggregator] = FailureAggregator,
    ) -> None:
        if not providers:
            raise ConfigurationError("FailoverResolver 至少需要一个 Provider")
        if provider_timeout <= 0:
            raise ConfigurationError("provider_timeout 必须大于 0")

        self._providers: tuple[ProviderAdapter, ...] = tuple(providers)
        self._cursor = RotationCursor(len(self._providers))
        self._provider_timeout = provider_timeout
        self._classifier = classifier
        self._aggregator = aggregator

    @property
    def providers(self) -> tuple[ProviderAdapter, ...]:
        return self._providers

    @property
    def rotation_index(self) -> int:
        return self._cursor.current()

    async def resolve(self, zip_code: str) -> AddressRecord:
        """
        解析 CEP

        Raises:
            AggregateFailureError: 所有 Provider 均失败
            InvalidZipCodeError: 归一化后不是 8 位数字
        """
        cep = require_normalized_zip_code(zip_code)
        total = len(self._providers)
        # 每次查询只读取一次起点，之后按 (start + k) mod N 走完一圈，
        # 并发查询同时推进游标时本次查询也不会重复同一个 Provider
        start = self._cursor.current()
        failures: list[ProviderFailure] = []

        for attempt in range(total):
            position = (start + attempt) % total
            provider = self._providers[position]
            logger.debug(
                "[{}] 尝试 Provider {} ({}/{}, position={})",
                cep,
                provider.name,
                attempt + 1,
                total,
                position,
            )
            try:
                address = await self._fetch(provider, cep)
            except Exception as e:
                self._cursor.advance()
                failure = self._record_failure(provider, e)
                failures.append(failure)
                logger.warning(
                    "[{}] Provider {} 失败: kind={}, message={}",
                    cep,
                    provider.name,
                    failure.kind.value,
                    failure.raw_message,
                )
                continue

            self._cursor.advance()
            logger.debug("[{}] Provider {} 成功", cep, provider.name)
            return address

        aggregate = self._aggregator.aggregate(cep, failures)
        logger.error(
            "[{}] 所有 Provider 均失败: kind={}, providers={}",
            cep,
            aggregate.kind.value,
            aggregate.providers,
        )
        raise aggregate

    async def _fetch(self, provider: ProviderAdapter, cep: str) -> AddressRecord:
        # wait_for 在外层被取消时会同时取消内部的 Provider 调用
        return await asyncio.wait_for(provider.fetch(cep), timeout=self._provider_timeout)

    def _record_failure(self, provider: ProviderAdapter, error: Exception) -> ProviderFailure:
        kind: ErrorKind = self._classifier.classify(error)
        return ProviderFailure(
            provider_name=provider.name,
            kind=kind,
            raw_message=extract_error_message(error),
        )

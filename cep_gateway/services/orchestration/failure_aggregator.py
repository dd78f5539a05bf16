"""
失败汇总器

所有 Provider 都失败后，把按尝试顺序排列的失败记录汇总成唯一一个对调用方可见的错误。
只处理"全部同类"的情况，其余一律归为 MIXED，不做更细的推断。
"""

from __future__ import annotations

from typing import Sequence

from cep_gateway.core.enums import AggregateKind, ErrorKind
from cep_gateway.core.exceptions import AggregateFailureError
from cep_gateway.models.failure import ProviderFailure

# 顺序敏感：全部相同时才命中
UNIFORM_RULES: tuple[tuple[ErrorKind, AggregateKind], ...] = (
    (ErrorKind.NOT_FOUND, AggregateKind.NOT_FOUND),
    (ErrorKind.TIMEOUT, AggregateKind.ALL_TIMED_OUT),
    (ErrorKind.NETWORK_UNREACHABLE, AggregateKind.ALL_UNREACHABLE),
    (ErrorKind.RATE_LIMITED, AggregateKind.ALL_RATE_LIMITED),
)


class FailureAggregator:
    """失败汇总器 - 纯逻辑，无副作用"""

    @staticmethod
    def determine_kind(failures: Sequence[ProviderFailure]) -> AggregateKind:
        if not failures:
            raise ValueError("failures 不能为空")
        for error_kind, aggregate_kind in UNIFORM_RULES:
            if all(f.kind is error_kind for f in failures):
                return aggregate_kind
        return AggregateKind.MIXED

    @classmethod
    def aggregate(
        cls,
        zip_code: str,
        failures: Sequence[ProviderFailure],
    ) -> AggregateFailureError:
        """
        生成汇总错误（只构造，不抛出）

        Args:
            zip_code: 归一化后的 CEP
            failures: 覆盖所有已尝试 Provider 的失败记录，按尝试顺序排列

        Raises:
            ValueError: failures 为空
        """
        kind = cls.determine_kind(failures)
        return AggregateFailureError(kind=kind, zip_code=zip_code, failures=list(failures))

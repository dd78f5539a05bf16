"""
错误类型枚举定义

- ErrorKind: 单个 Provider 失败的分类（由 ErrorClassifier 产生）
- AggregateKind: 所有 Provider 均失败后的汇总分类（由 FailureAggregator 产生）
"""

from enum import Enum


class ErrorKind(str, Enum):
    """单次 Provider 调用的失败类型"""

    NOT_FOUND = "not_found"  # 明确返回"地址不存在"
    TIMEOUT = "timeout"  # 传输层超时
    UNAVAILABLE = "unavailable"  # Provider 侧错误（5xx）
    RATE_LIMITED = "rate_limited"  # 429 / 请求过多
    NETWORK_UNREACHABLE = "network_unreachable"  # 连接被拒绝、DNS 失败等
    UNKNOWN = "unknown"


class AggregateKind(str, Enum):
    """全部 Provider 失败后的汇总类型"""

    NOT_FOUND = "not_found"
    ALL_TIMED_OUT = "all_timed_out"
    ALL_UNREACHABLE = "all_unreachable"
    ALL_RATE_LIMITED = "all_rate_limited"
    MIXED = "mixed"


# 汇总类型 -> 单次失败类型（嵌套调用时保留原始分类）
AGGREGATE_TO_ERROR_KIND: dict[AggregateKind, ErrorKind] = {
    AggregateKind.NOT_FOUND: ErrorKind.NOT_FOUND,
    AggregateKind.ALL_TIMED_OUT: ErrorKind.TIMEOUT,
    AggregateKind.ALL_UNREACHABLE: ErrorKind.NETWORK_UNREACHABLE,
    AggregateKind.ALL_RATE_LIMITED: ErrorKind.RATE_LIMITED,
    AggregateKind.MIXED: ErrorKind.UNKNOWN,
}


__all__ = ["ErrorKind", "AggregateKind", "AGGREGATE_TO_ERROR_KIND"]

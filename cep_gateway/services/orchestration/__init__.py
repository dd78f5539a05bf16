"""
Orchestration 模块

提供查询编排相关的组件：
- FailoverResolver: 故障转移解析器，按轮转顺序依次尝试 Provider
- ErrorClassifier: 错误分类器，负责错误分类（纯逻辑，无副作用）
- FailureAggregator: 失败汇总器，把全部失败汇总为一个错误
"""

from .error_classifier import ErrorClassifier, classify_error
from .failover_resolver import FailoverResolver, RotationCursor
from .failure_aggregator import FailureAggregator

__all__ = [
    "FailoverResolver",
    "RotationCursor",
    "ErrorClassifier",
    "FailureAggregator",
    "classify_error",
]

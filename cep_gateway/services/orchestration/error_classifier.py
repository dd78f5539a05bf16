"""
错误分类器

把各 Provider 五花八门的失败信号（HTTP 状态码、传输层错误码、错误消息）归入固定的
ErrorKind。纯逻辑，无副作用。

规则按优先级依次匹配，第一条命中即返回:
1. 未找到（404 / "not found" / "cep não encontrado"） -> NOT_FOUND
2. 超时（超时错误码 / "timeout"）                     -> TIMEOUT
3. 限流（429 / "rate limit" / "too many requests"）   -> RATE_LIMITED
4. 连接失败（连接拒绝、DNS、重置、不可达 / "network"） -> NETWORK_UNREACHABLE
5. Provider 侧错误（5xx）                              -> UNAVAILABLE
6. 其他                                               -> UNKNOWN

已经分类过的 ClassifiedError（如嵌套调用重新抛出）直接保留原分类。
"""

from __future__ import annotations

import asyncio
import errno
import socket
from dataclasses import dataclass
from typing import Callable

import httpx

from cep_gateway.core.enums import ErrorKind
from cep_gateway.core.error_utils import extract_error_message
from cep_gateway.core.exceptions import ClassifiedError

NOT_FOUND_PHRASES = ("not found", "cep não encontrado")
TIMEOUT_PHRASES = ("timeout",)
RATE_LIMIT_PHRASES = ("rate limit", "too many requests")
NETWORK_PHRASES = ("network",)

TIMEOUT_CODES = frozenset({"ETIMEDOUT", "ECONNABORTED"})
NETWORK_CODES = frozenset(
    {"ECONNREFUSED", "ENOTFOUND", "ECONNRESET", "ENETUNREACH", "EHOSTUNREACH"}
)

# 最多沿 __cause__/__context__ 追溯的层数
_MAX_CAUSE_DEPTH = 8


@dataclass(frozen=True)
class RawErrorSignal:
    """从原始异常中提取出的信号，仅在分类器内部使用"""

    status_code: int | None
    code: str | None
    message: str


def _status_code_of(error: BaseException) -> int | None:
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code
    return None


def _code_from_type(error: BaseException) -> str | None:
    if isinstance(error, (httpx.TimeoutException, asyncio.TimeoutError, TimeoutError)):
        return "ETIMEDOUT"
    if isinstance(error, socket.gaierror):
        return "ENOTFOUND"
    if isinstance(error, (httpx.ConnectError, ConnectionRefusedError)):
        return "ECONNREFUSED"
    if isinstance(
        error,
        (httpx.ReadError, httpx.WriteError, httpx.RemoteProtocolError, ConnectionResetError),
    ):
        return "ECONNRESET"
    return None


def _transport_code_of(error: BaseException) -> str | None:
    """
    提取传输层错误码

    httpx 会把底层 OSError 作为 __cause__ 链保留，优先使用链上可识别的 errno 名称；
    无法识别的 errno（如 EPIPE、ENETDOWN）不参与判断，按 httpx 异常类型回退。
    """
    fallback: str | None = None
    current: BaseException | None = error
    seen: set[int] = set()
    depth = 0
    while current is not None and id(current) not in seen and depth < _MAX_CAUSE_DEPTH:
        seen.add(id(current))
        if isinstance(current, socket.gaierror):
            return "ENOTFOUND"
        if isinstance(current, OSError) and current.errno in errno.errorcode:
            name = errno.errorcode[current.errno]
            if name in TIMEOUT_CODES or name in NETWORK_CODES:
                return name
        if fallback is None:
            fallback = _code_from_type(current)
        current = current.__cause__ or current.__context__
        depth += 1
    return fallback


def extract_signal(error: BaseException) -> RawErrorSignal:
    status_code = _status_code_of(error)
    return RawErrorSignal(
        status_code=status_code,
        code=_transport_code_of(error),
        message=extract_error_message(error).lower(),
    )


def _contains_any(message: str, phrases: tuple[str, ...]) -> bool:
    return any(phrase in message for phrase in phrases)


def _is_not_found(signal: RawErrorSignal) -> bool:
    return signal.status_code == 404 or _contains_any(signal.message, NOT_FOUND_PHRASES)


def _is_timeout(signal: RawErrorSignal) -> bool:
    return signal.code in TIMEOUT_CODES or _contains_any(signal.message, TIMEOUT_PHRASES)


def _is_rate_limited(signal: RawErrorSignal) -> bool:
    return signal.status_code == 429 or _contains_any(signal.message, RATE_LIMIT_PHRASES)


def _is_network_error(signal: RawErrorSignal) -> bool:
    return signal.code in NETWORK_CODES or _contains_any(signal.message, NETWORK_PHRASES)


def _is_provider_error(signal: RawErrorSignal) -> bool:
    return signal.status_code is not None and 500 <= signal.status_code < 600


# 顺序敏感：第一条命中的规则生效
CLASSIFICATION_RULES: tuple[tuple[ErrorKind, Callable[[RawErrorSignal], bool]], ...] = (
    (ErrorKind.NOT_FOUND, _is_not_found),
    (ErrorKind.TIMEOUT, _is_timeout),
    (ErrorKind.RATE_LIMITED, _is_rate_limited),
    (ErrorKind.NETWORK_UNREACHABLE, _is_network_error),
    (ErrorKind.UNAVAILABLE, _is_provider_error),
)


class ErrorClassifier:
    """错误分类器 - 纯分类，无副作用"""

    @staticmethod
    def classify_signal(signal: RawErrorSignal) -> ErrorKind:
        for kind, matches in CLASSIFICATION_RULES:
            if matches(signal):
                return kind
        return ErrorKind.UNKNOWN

    @classmethod
    def classify(cls, error: BaseException) -> ErrorKind:
        """把原始异常映射为 ErrorKind"""
        if isinstance(error, ClassifiedError):
            return error.error_kind
        return cls.classify_signal(extract_signal(error))


def classify_error(error: BaseException) -> ErrorKind:
    """便捷函数"""
    return ErrorClassifier.classify(error)

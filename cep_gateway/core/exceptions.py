"""
统一异常定义

- ClassifiedError 是唯一带分类标签的异常基类，下游只看 error_kind，不再检查传输层字段
- AggregateFailureError 是调用方唯一能看到的失败结果，HTTP 状态码只在 API 层转换
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from cep_gateway.core.enums import AGGREGATE_TO_ERROR_KIND, AggregateKind, ErrorKind

if TYPE_CHECKING:
    from cep_gateway.models.failure import ProviderFailure


class CepGatewayError(Exception):
    """所有业务异常的基类"""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ConfigurationError(CepGatewayError):
    """配置缺失或非法"""


class InvalidZipCodeError(CepGatewayError):
    """CEP 格式非法（不属于 Provider 失败分类）"""

    def __init__(self, zip_code: str, detail: str | None = None) -> None:
        self.zip_code = zip_code
        self.detail = detail or f"The provided zip code is invalid: {zip_code}"
        super().__init__("Invalid zip code format", zip_code=zip_code)

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "detail": self.detail, "zipCode": self.zip_code}


class ClassifiedError(CepGatewayError):
    """已完成分类的失败，ErrorClassifier 遇到时直接保留其分类；子类未覆盖时为 UNKNOWN"""

    @property
    def error_kind(self) -> ErrorKind:
        return ErrorKind.UNKNOWN


class ProviderError(ClassifiedError):
    """Provider 适配器在边界处已能确定类型的失败"""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, provider: str, message: str, zip_code: str | None = None) -> None:
        super().__init__(message, provider=provider, zip_code=zip_code)
        self.provider = provider
        self.zip_code = zip_code

    @property
    def error_kind(self) -> ErrorKind:
        return self.kind


class AddressNotFoundError(ProviderError):
    """Provider 响应体中带有"未找到"标记"""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, provider: str, zip_code: str) -> None:
        super().__init__(
            provider,
            f"Address not found for the provided zip code: {zip_code}",
            zip_code=zip_code,
        )


class ProviderResponseError(ProviderError):
    """Provider 返回了无法解析的响应体"""

    kind = ErrorKind.UNKNOWN


# 汇总类型 -> (message, detail 模板)
_AGGREGATE_MESSAGES: dict[AggregateKind, tuple[str, str]] = {
    AggregateKind.NOT_FOUND: (
        "Address not found",
        "No provider could find address for zipCode: {zip_code}",
    ),
    AggregateKind.ALL_TIMED_OUT: (
        "All providers timed out",
        "Services are slow or unavailable. Please try again later",
    ),
    AggregateKind.ALL_UNREACHABLE: (
        "All providers are unreachable",
        "Network connectivity issues. Please try again in a few moments",
    ),
    AggregateKind.ALL_RATE_LIMITED: (
        "Rate limit exceeded on all providers",
        "Too many requests. Please try again later",
    ),
    AggregateKind.MIXED: (
        "Unable to fetch address from any provider",
        "Multiple different errors occurred",
    ),
}


class AggregateFailureError(ClassifiedError):
    """
    所有 Provider 均失败后的汇总错误

    Attributes:
        kind: 汇总类型
        zip_code: 归一化后的 CEP
        providers: 按尝试顺序排列的 Provider 名称
        failures: 按尝试顺序排列的单次失败记录
    """

    def __init__(
        self,
        kind: AggregateKind,
        zip_code: str,
        failures: list[ProviderFailure],
    ) -> None:
        message, detail = _AGGREGATE_MESSAGES[kind]
        super().__init__(message, kind=kind.value, zip_code=zip_code)
        self.kind = kind
        self.zip_code = zip_code
        self.detail = detail.format(zip_code=zip_code)
        self.failures = list(failures)
        self.providers = [f.provider_name for f in self.failures]

    @property
    def error_kind(self) -> ErrorKind:
        return AGGREGATE_TO_ERROR_KIND[self.kind]

    def to_dict(self) -> dict[str, Any]:
        """调用方可见的失败结构，failures 仅在 MIXED 时输出"""
        payload: dict[str, Any] = {
            "kind": self.kind.value,
            "message": self.message,
            "detail": self.detail,
            "zipCode": self.zip_code,
            "providers": list(self.providers),
        }
        if self.kind is AggregateKind.MIXED:
            payload["failures"] = [f.to_dict() for f in self.failures]
        return payload

    def __repr__(self) -> str:
        return (
            f"AggregateFailureError(kind={self.kind.value}, "
            f"zip_code={self.zip_code}, providers={self.providers})"
        )

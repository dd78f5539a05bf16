"""
地址相关的数据模型
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cep_gateway.utils.zip_code import normalize_zip_code


class AddressRecord(BaseModel):
    """标准化地址，无论来自哪个 Provider 都使用同一结构"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    zip_code: str = Field(..., alias="zipCode", description="CEP（仅数字）")
    state: str = Field("", description="州缩写，如 SP")
    city: str = Field("", description="城市")
    neighborhood: str = Field("", description="街区")
    street: str = Field("", description="街道")

    @field_validator("zip_code", mode="before")
    @classmethod
    def _normalize_zip_code(cls, value: Any) -> str:
        return normalize_zip_code(value)

    @field_validator("state", "city", "neighborhood", "street", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        # Provider 可能返回 null
        if value is None:
            return ""
        return str(value).strip()

    def to_dict(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)


class ErrorResponse(BaseModel):
    """API 错误响应（用于 OpenAPI 文档）"""

    kind: str | None = None
    message: str
    detail: str | None = None
    zipCode: str | None = None
    providers: list[str] | None = None
    failures: list[dict[str, Any]] | None = None

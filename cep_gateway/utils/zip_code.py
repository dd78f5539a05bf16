"""
CEP 工具函数
"""

import re

from cep_gateway.core.exceptions import InvalidZipCodeError

ZIP_CODE_LENGTH = 8

_NON_DIGITS = re.compile(r"\D", re.ASCII)
_ZIP_CODE_PATTERN = re.compile(r"\d{8}", re.ASCII)


def normalize_zip_code(zip_code: str | None) -> str:
    """去除所有非数字字符，如 "01310-100" -> "01310100" """
    return _NON_DIGITS.sub("", str(zip_code or ""))


def is_valid_zip_code(zip_code: str | None) -> bool:
    """严格校验：必须恰好是 8 位 ASCII 数字"""
    return bool(zip_code) and _ZIP_CODE_PATTERN.fullmatch(zip_code) is not None


def validate_zip_code(zip_code: str) -> str:
    """
    边界层校验，失败时抛出 InvalidZipCodeError

    Returns:
        原样返回合法的 CEP
    """
    if len(zip_code) != ZIP_CODE_LENGTH:
        raise InvalidZipCodeError(zip_code, "zipCode parameter must be exactly 8 digits")
    if not is_valid_zip_code(zip_code):
        raise InvalidZipCodeError(zip_code, "zipCode parameter must contain only numbers")
    return zip_code


def require_normalized_zip_code(zip_code: str | None) -> str:
    """核心层的防御性归一化：去除非数字后仍不足 8 位则拒绝"""
    cep = normalize_zip_code(zip_code)
    if len(cep) != ZIP_CODE_LENGTH:
        raise InvalidZipCodeError(str(zip_code or ""))
    return cep


def format_zip_code(zip_code: str) -> str:
    """格式化为 XXXXX-XXX，非法输入原样返回"""
    cep = normalize_zip_code(zip_code)
    if len(cep) == ZIP_CODE_LENGTH:
        return f"{cep[:5]}-{cep[5:]}"
    return zip_code

"""
应用配置 - 从环境变量读取

使用方式:
    from cep_gateway.config import config

    config.cep_providers
    config.cache_ttl_seconds
"""

from __future__ import annotations

import os

from cep_gateway.core.exceptions import ConfigurationError

DEFAULT_PROVIDERS = "viacep,brasilapi,awesomeapi"

SUPPORTED_CACHE_BACKENDS = ("memory", "redis")


def _parse_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip().lower() for item in value.split(",") if item.strip()]


class Config:
    """
    业务配置

    ENVIRONMENT / LOG_LEVEL 由 core/logger.py 读取，HOST / PORT 由 gunicorn_conf.py 读取
    """

    def __init__(self) -> None:
        # HTTP 客户端（连接池共享）
        self.http_connect_timeout = float(os.getenv("HTTP_CONNECT_TIMEOUT", "5.0"))
        self.http_read_timeout = float(os.getenv("HTTP_READ_TIMEOUT", "10.0"))
        self.http_write_timeout = float(os.getenv("HTTP_WRITE_TIMEOUT", "10.0"))
        self.http_pool_timeout = float(os.getenv("HTTP_POOL_TIMEOUT", "5.0"))
        self.http_max_connections = int(os.getenv("HTTP_MAX_CONNECTIONS", "100"))
        self.http_keepalive_connections = int(os.getenv("HTTP_KEEPALIVE_CONNECTIONS", "20"))
        self.http_keepalive_expiry = float(os.getenv("HTTP_KEEPALIVE_EXPIRY", "30.0"))

        # Provider 列表（顺序即轮转顺序）
        self.cep_providers = _parse_list(os.getenv("CEP_PROVIDERS", DEFAULT_PROVIDERS))
        # 单次 Provider 调用的超时上限（秒）
        self.cep_provider_timeout = float(os.getenv("CEP_PROVIDER_TIMEOUT", "5.0"))

        # 结果缓存
        self.cache_backend = os.getenv("CEP_CACHE_BACKEND", "memory").strip().lower()
        self.cache_ttl_seconds = float(os.getenv("CEP_CACHE_TTL_SECONDS", "3600"))
        self.cache_max_entries = int(os.getenv("CEP_CACHE_MAX_ENTRIES", "10000"))
        self.redis_url = os.getenv("REDIS_URL")

    def validate(self) -> None:
        """
        校验配置，发现问题时抛出 ConfigurationError

        在构建服务时调用，而不是在 import 时调用，避免测试环境因缺少配置无法导入。
        """
        if not self.cep_providers:
            raise ConfigurationError("CEP_PROVIDERS 不能为空")
        if self.cep_provider_timeout <= 0:
            raise ConfigurationError("CEP_PROVIDER_TIMEOUT 必须大于 0")
        if self.cache_ttl_seconds <= 0:
            raise ConfigurationError("CEP_CACHE_TTL_SECONDS 必须大于 0")
        if self.cache_max_entries <= 0:
            raise ConfigurationError("CEP_CACHE_MAX_ENTRIES 必须大于 0")
        if self.cache_backend not in SUPPORTED_CACHE_BACKENDS:
            raise ConfigurationError(
                f"不支持的缓存后端: {self.cache_backend}，可选: {', '.join(SUPPORTED_CACHE_BACKENDS)}"
            )
        if self.cache_backend == "redis" and not self.redis_url:
            raise ConfigurationError("CEP_CACHE_BACKEND=redis 时必须配置 REDIS_URL")


config = Config()

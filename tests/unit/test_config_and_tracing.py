"""
配置与执行日志包装器测试
"""

import pytest

from cep_gateway.config.settings import Config
from cep_gateway.core.exceptions import ConfigurationError
from cep_gateway.core.tracing import log_execution


class TestConfig:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("CEP_PROVIDERS", "CEP_CACHE_BACKEND", "CEP_CACHE_TTL_SECONDS", "CEP_PROVIDER_TIMEOUT"):
            monkeypatch.delenv(name, raising=False)

        settings = Config()

        assert settings.cep_providers == ["viacep", "brasilapi", "awesomeapi"]
        assert settings.cache_backend == "memory"
        assert settings.cache_ttl_seconds == 3600
        assert settings.cep_provider_timeout == 5.0
        settings.validate()

    def test_provider_list_is_parsed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CEP_PROVIDERS", " ViaCEP , brasilapi,, ")
        assert Config().cep_providers == ["viacep", "brasilapi"]

    @pytest.mark.parametrize(
        "attr,value",
        [
            ("cep_providers", []),
            ("cep_provider_timeout", 0),
            ("cache_ttl_seconds", -1),
            ("cache_max_entries", 0),
            ("cache_backend", "memcached"),
        ],
    )
    def test_validate_rejects(self, attr: str, value: object) -> None:
        settings = Config()
        setattr(settings, attr, value)
        with pytest.raises(ConfigurationError):
            settings.validate()

    def test_redis_backend_requires_url(self) -> None:
        settings = Config()
        settings.cache_backend = "redis"
        settings.redis_url = None
        with pytest.raises(ConfigurationError):
            settings.validate()

    def test_process_settings_are_read_by_their_owners(self) -> None:
        settings = Config()
        for attr in ("environment", "log_level", "host", "port", "is_production"):
            assert not hasattr(settings, attr)


class TestLogExecution:
    @pytest.mark.asyncio
    async def test_yields_writable_payload(self) -> None:
        async with log_execution("Origin", "action", zip_code="01310100") as span:
            span["output"] = {"ok": True}
        assert span == {"zip_code": "01310100", "output": {"ok": True}}

    @pytest.mark.asyncio
    async def test_reraises_errors(self) -> None:
        with pytest.raises(RuntimeError, match="boom"):
            async with log_execution("Origin", "action"):
                raise RuntimeError("boom")

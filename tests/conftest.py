"""Pytest configuration and fixtures."""

import os

# 必须在导入 cep_gateway 之前设置，避免测试时写日志文件
os.environ.setdefault("LOG_DISABLE_FILE", "true")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import Any  # noqa: E402

import pytest  # noqa: E402

from cep_gateway.core.exceptions import AddressNotFoundError  # noqa: E402
from cep_gateway.models.address import AddressRecord  # noqa: E402


class FakeProvider:
    """按预设结果返回的 Provider，记录每次调用"""

    def __init__(self, name: str, outcome: Any = None) -> None:
        self.name = name
        self.outcome = outcome
        self.calls: list[str] = []

    async def fetch(self, zip_code: str) -> AddressRecord:
        self.calls.append(zip_code)
        outcome = self.outcome
        if callable(outcome) and not isinstance(outcome, AddressRecord):
            outcome = await outcome(zip_code)
        if isinstance(outcome, BaseException):
            raise outcome
        if outcome is None:
            raise AddressNotFoundError(self.name, zip_code)
        return outcome


class FakeClock:
    """可手动推进的单调时钟"""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def paulista() -> AddressRecord:
    return AddressRecord(
        zip_code="01310100",
        state="SP",
        city="São Paulo",
        neighborhood="Bela Vista",
        street="Avenida Paulista",
    )


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_provider() -> type[FakeProvider]:
    return FakeProvider

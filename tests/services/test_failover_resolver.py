"""
FailoverResolver 测试

覆盖轮转、故障转移、汇总、超时、取消与并发。
"""

import asyncio
from typing import Any

import httpx
import pytest

from cep_gateway.core.enums import AggregateKind
from cep_gateway.core.exceptions import (
    AggregateFailureError,
    ConfigurationError,
    InvalidZipCodeError,
)
from cep_gateway.models.address import AddressRecord
from cep_gateway.services.orchestration.failover_resolver import FailoverResolver, RotationCursor


def _server_error(status_code: int = 503) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://provider.example/cep")
    response = httpx.Response(status_code, request=request)
    return httpx.HTTPStatusError(f"HTTP {status_code}", request=request, response=response)


class TestRotationCursor:
    def test_advance_wraps(self) -> None:
        cursor = RotationCursor(3)
        assert [cursor.advance() for _ in range(4)] == [1, 2, 0, 1]
        assert cursor.current() == 1

    def test_size_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            RotationCursor(0)


class TestConstruction:
    def test_requires_providers(self) -> None:
        with pytest.raises(ConfigurationError):
            FailoverResolver([])

    def test_requires_positive_timeout(self, make_provider: Any) -> None:
        with pytest.raises(ConfigurationError):
            FailoverResolver([make_provider("p1")], provider_timeout=0)

    def test_starts_at_zero(self, make_provider: Any) -> None:
        resolver = FailoverResolver([make_provider("p1"), make_provider("p2")])
        assert resolver.rotation_index == 0


class TestResolve:
    @pytest.mark.asyncio
    async def test_first_provider_success(self, make_provider: Any, paulista: AddressRecord) -> None:
        p1 = make_provider("p1", paulista)
        p2 = make_provider("p2", paulista)
        resolver = FailoverResolver([p1, p2])

        result = await resolver.resolve("01310100")

        assert result.to_dict() == {
            "zipCode": "01310100",
            "state": "SP",
            "city": "São Paulo",
            "neighborhood": "Bela Vista",
            "street": "Avenida Paulista",
        }
        assert p1.calls == ["01310100"]
        assert p2.calls == []
        assert resolver.rotation_index == 1

    @pytest.mark.asyncio
    async def test_fails_over_to_next_provider(self, make_provider: Any, paulista: AddressRecord) -> None:
        p1 = make_provider("p1", _server_error())
        p2 = make_provider("p2", paulista)
        p3 = make_provider("p3", paulista)
        resolver = FailoverResolver([p1, p2, p3])

        result = await resolver.resolve("01310100")

        assert result == paulista
        assert len(p1.calls) == 1
        assert len(p2.calls) == 1
        assert p3.calls == []
        assert resolver.rotation_index == 2

    @pytest.mark.asyncio
    async def test_not_found_does_not_stop_the_loop(self, make_provider: Any, paulista: AddressRecord) -> None:
        p1 = make_provider("p1")
        p2 = make_provider("p2")
        p3 = make_provider("p3", paulista)
        resolver = FailoverResolver([p1, p2, p3])

        assert await resolver.resolve("01310100") == paulista
        assert [len(p.calls) for p in (p1, p2, p3)] == [1, 1, 1]

    @pytest.mark.asyncio
    async def test_rotation_is_shared_across_lookups(self, make_provider: Any, paulista: AddressRecord) -> None:
        providers = [make_provider(f"p{i}", paulista) for i in range(1, 4)]
        resolver = FailoverResolver(providers)

        indexes = []
        for _ in range(4):
            await resolver.resolve("01310100")
            indexes.append(resolver.rotation_index)

        assert indexes == [1, 2, 0, 1]
        assert [len(p.calls) for p in providers] == [2, 1, 1]

    @pytest.mark.asyncio
    async def test_zip_code_is_normalized_before_use(self, make_provider: Any, paulista: AddressRecord) -> None:
        p1 = make_provider("p1", paulista)
        resolver = FailoverResolver([p1])

        await resolver.resolve("01310-100")

        assert p1.calls == ["01310100"]

    @pytest.mark.asyncio
    async def test_invalid_zip_code_touches_no_provider(self, make_provider: Any) -> None:
        p1 = make_provider("p1")
        resolver = FailoverResolver([p1])

        with pytest.raises(InvalidZipCodeError):
            await resolver.resolve("abc")
        assert p1.calls == []
        assert resolver.rotation_index == 0


class TestAllProvidersFail:
    @pytest.mark.asyncio
    async def test_all_not_found(self, make_provider: Any) -> None:
        p1 = make_provider("p1")
        p2 = make_provider("p2")
        resolver = FailoverResolver([p1, p2])

        with pytest.raises(AggregateFailureError) as exc_info:
            await resolver.resolve("00000000")

        error = exc_info.value
        assert error.kind is AggregateKind.NOT_FOUND
        assert error.zip_code == "00000000"
        assert error.providers == ["p1", "p2"]
        assert len(p1.calls) == 1
        assert len(p2.calls) == 1
        # 两次尝试，游标回到起点
        assert resolver.rotation_index == 0

    @pytest.mark.asyncio
    async def test_mixed_keeps_attempt_order(self, make_provider: Any) -> None:
        p1 = make_provider("p1", httpx.ReadTimeout("read timed out"))
        p2 = make_provider("p2")
        resolver = FailoverResolver([p1, p2])

        with pytest.raises(AggregateFailureError) as exc_info:
            await resolver.resolve("01310100")

        payload = exc_info.value.to_dict()
        assert payload["kind"] == "mixed"
        assert [(f["provider"], f["kind"]) for f in payload["failures"]] == [
            ("p1", "timeout"),
            ("p2", "not_found"),
        ]

    @pytest.mark.asyncio
    async def test_attempts_start_from_rotation_index(
        self, make_provider: Any, paulista: AddressRecord
    ) -> None:
        p1 = make_provider("p1", paulista)
        p2 = make_provider("p2", paulista)
        p3 = make_provider("p3", paulista)
        resolver = FailoverResolver([p1, p2, p3])
        await resolver.resolve("01310100")

        for provider in (p1, p2, p3):
            provider.outcome = _server_error(500)

        with pytest.raises(AggregateFailureError) as exc_info:
            await resolver.resolve("01310100")

        assert exc_info.value.providers == ["p2", "p3", "p1"]
        assert resolver.rotation_index == 1

    @pytest.mark.asyncio
    async def test_all_rate_limited(self, make_provider: Any) -> None:
        resolver = FailoverResolver(
            [make_provider("p1", _server_error(429)), make_provider("p2", _server_error(429))]
        )
        with pytest.raises(AggregateFailureError) as exc_info:
            await resolver.resolve("01310100")
        assert exc_info.value.kind is AggregateKind.ALL_RATE_LIMITED

    @pytest.mark.asyncio
    async def test_all_unreachable(self, make_provider: Any) -> None:
        resolver = FailoverResolver(
            [
                make_provider("p1", httpx.ConnectError("All connection attempts failed")),
                make_provider("p2", httpx.ConnectError("All connection attempts failed")),
            ]
        )
        with pytest.raises(AggregateFailureError) as exc_info:
            await resolver.resolve("01310100")
        assert exc_info.value.kind is AggregateKind.ALL_UNREACHABLE


class TestTimeoutAndCancellation:
    @pytest.mark.asyncio
    async def test_slow_provider_is_timed_out(self, make_provider: Any, paulista: AddressRecord) -> None:
        async def stall(_zip_code: str) -> AddressRecord:
            await asyncio.sleep(5)
            return paulista

        p1 = make_provider("p1", stall)
        p2 = make_provider("p2", paulista)
        resolver = FailoverResolver([p1, p2], provider_timeout=0.01)

        assert await resolver.resolve("01310100") == paulista
        assert resolver.rotation_index == 0

    @pytest.mark.asyncio
    async def test_all_timed_out(self, make_provider: Any) -> None:
        async def stall(_zip_code: str) -> AddressRecord:
            await asyncio.sleep(5)
            raise AssertionError("unreachable")

        resolver = FailoverResolver(
            [make_provider("p1", stall), make_provider("p2", stall)], provider_timeout=0.01
        )

        with pytest.raises(AggregateFailureError) as exc_info:
            await resolver.resolve("01310100")
        assert exc_info.value.kind is AggregateKind.ALL_TIMED_OUT

    @pytest.mark.asyncio
    async def test_cancellation_cancels_in_flight_call(self, make_provider: Any) -> None:
        started = asyncio.Event()
        cancelled = asyncio.Event()

        async def hang(_zip_code: str) -> AddressRecord:
            started.set()
            try:
                await asyncio.sleep(60)
            except asyncio.CancelledError:
                cancelled.set()
                raise
            raise AssertionError("unreachable")

        p1 = make_provider("p1", hang)
        p2 = make_provider("p2")
        resolver = FailoverResolver([p1, p2], provider_timeout=30)

        task = asyncio.create_task(resolver.resolve("01310100"))
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert cancelled.is_set()
        assert p2.calls == []
        assert resolver.rotation_index == 0


class TestConcurrency:
    @pytest.mark.asyncio
    async def test_concurrent_lookups_advance_once_per_attempt(
        self, make_provider: Any, paulista: AddressRecord
    ) -> None:
        async def succeed(_zip_code: str) -> AddressRecord:
            await asyncio.sleep(0)
            return paulista

        providers = [make_provider(f"p{i}", succeed) for i in range(1, 4)]
        resolver = FailoverResolver(providers)

        results = await asyncio.gather(*(resolver.resolve("01310100") for _ in range(7)))

        assert all(r == paulista for r in results)
        assert sum(len(p.calls) for p in providers) == 7
        assert resolver.rotation_index == 7 % 3

    @pytest.mark.asyncio
    async def test_concurrent_failures_never_repeat_a_provider(self, make_provider: Any) -> None:
        async def fail(_zip_code: str) -> AddressRecord:
            await asyncio.sleep(0)
            raise _server_error(500)

        providers = [make_provider(f"p{i}", fail) for i in range(1, 4)]
        resolver = FailoverResolver(providers)

        outcomes = await asyncio.gather(
            *(resolver.resolve("01310100") for _ in range(4)), return_exceptions=True
        )

        for outcome in outcomes:
            assert isinstance(outcome, AggregateFailureError)
            assert sorted(outcome.providers) == ["p1", "p2", "p3"]
        assert resolver.rotation_index == (4 * 3) % 3

"""
Provider 失败记录
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from cep_gateway.core.enums import ErrorKind


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ProviderFailure:
    """单次失败尝试，仅作为 AggregateFailureError 的一部分对外暴露"""

    provider_name: str
    kind: ErrorKind
    raw_message: str
    timestamp: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider": self.provider_name,
            "kind": self.kind.value,
            "message": self.raw_message,
            "timestamp": self.timestamp.isoformat(),
        }

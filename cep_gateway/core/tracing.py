"""
执行日志包装器

在调用点显式包裹一段异步操作，记录 STARTED / FINISHED / FAILED 三种状态:

    async with log_execution("AddressService", "find_address", zip_code=cep) as span:
        ...
        span["output"] = address.to_dict()
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any, AsyncIterator

from cep_gateway.core.logger import logger


class LogStatus(str, Enum):
    STARTED = "STARTED"
    FINISHED = "FINISHED"
    FAILED = "FAILED"


@asynccontextmanager
async def log_execution(origin: str, action: str, **payload: Any) -> AsyncIterator[dict[str, Any]]:
    """
    记录一次执行的开始、结束与失败

    Args:
        origin: 调用方名称（通常是类名）
        action: 操作名称
        **payload: 附加的输入信息

    Yields:
        可写的 payload 字典，调用方可以写入 output 等字段，结束时一并输出
    """
    span: dict[str, Any] = dict(payload)
    bound = logger.bind(origin=origin, action=action)
    bound.debug("[{}.{}] {} input={}", origin, action, LogStatus.STARTED.value, payload)
    start = time.perf_counter()
    try:
        yield span
    except Exception as e:
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        bound.warning(
            "[{}.{}] {} ({}ms): {}: {}",
            origin,
            action,
            LogStatus.FAILED.value,
            elapsed_ms,
            type(e).__name__,
            getattr(e, "message", None) or str(e),
        )
        raise
    elapsed_ms = int((time.perf_counter() - start) * 1000)
    bound.info(
        "[{}.{}] {} ({}ms) payload={}",
        origin,
        action,
        LogStatus.FINISHED.value,
        elapsed_ms,
        span,
    )


__all__ = ["LogStatus", "log_execution"]

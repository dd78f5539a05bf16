"""
FastAPI 应用入口

    gunicorn -c gunicorn_conf.py
    uvicorn cep_gateway.main:app
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cep_gateway import __version__
from cep_gateway.api.address import router as address_router
from cep_gateway.clients.http_client import close_http_clients
from cep_gateway.clients.redis_client import close_redis_client
from cep_gateway.core.enums import AggregateKind
from cep_gateway.core.exceptions import AggregateFailureError, InvalidZipCodeError
from cep_gateway.core.logger import logger
from cep_gateway.services.address.service import AddressService, create_address_service

# 汇总错误 -> HTTP 状态码，只在这一层转换
AGGREGATE_STATUS_CODES: dict[AggregateKind, int] = {
    AggregateKind.NOT_FOUND: 404,
    AggregateKind.ALL_TIMED_OUT: 503,
    AggregateKind.ALL_UNREACHABLE: 503,
    AggregateKind.ALL_RATE_LIMITED: 429,
    AggregateKind.MIXED: 502,
}


async def _handle_aggregate_failure(_request: Request, exc: AggregateFailureError) -> JSONResponse:
    return JSONResponse(status_code=AGGREGATE_STATUS_CODES[exc.kind], content=exc.to_dict())


async def _handle_invalid_zip_code(_request: Request, exc: InvalidZipCodeError) -> JSONResponse:
    return JSONResponse(status_code=400, content=exc.to_dict())


def create_app(address_service: AddressService | None = None) -> FastAPI:
    """
    创建应用

    Args:
        address_service: 预先构建的服务（测试用）；为 None 时在启动阶段按配置构建
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        service = address_service or await create_address_service()
        app.state.address_service = service
        logger.info("CEP Gateway {} 已启动", __version__)
        try:
            yield
        finally:
            await service.close()
            await close_http_clients()
            await close_redis_client()
            logger.info("CEP Gateway 已停止")

    app = FastAPI(
        title="CEP API",
        description="API for querying Brazilian ZIP codes (CEP)",
        version=__version__,
        docs_url="/api/docs",
        lifespan=lifespan,
    )
    app.add_exception_handler(AggregateFailureError, _handle_aggregate_failure)  # type: ignore[arg-type]
    app.add_exception_handler(InvalidZipCodeError, _handle_invalid_zip_code)  # type: ignore[arg-type]
    app.include_router(address_router)

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()

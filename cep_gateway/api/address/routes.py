"""
地址查询 API

GET /cep/{zip_code}
"""

from fastapi import APIRouter, Depends, Request

from cep_gateway.models.address import AddressRecord, ErrorResponse
from cep_gateway.services.address.service import AddressService
from cep_gateway.utils.zip_code import validate_zip_code

router = APIRouter(tags=["Address"])


def get_address_service(request: Request) -> AddressService:
    return request.app.state.address_service


@router.get(
    "/cep/{zip_code}",
    response_model=AddressRecord,
    responses={
        400: {"model": ErrorResponse, "description": "CEP 格式非法"},
        404: {"model": ErrorResponse, "description": "所有 Provider 均未找到地址"},
        429: {"model": ErrorResponse, "description": "所有 Provider 均限流"},
        502: {"model": ErrorResponse, "description": "Provider 返回了不同类型的错误"},
        503: {"model": ErrorResponse, "description": "所有 Provider 超时或不可达"},
    },
)
async def find_address(
    zip_code: str,
    service: AddressService = Depends(get_address_service),
) -> AddressRecord:
    """
    根据 CEP 查询地址

    依次轮转查询已配置的 Provider，任一成功即返回；成功结果会被缓存。

    **路径参数**
    - zip_code: 8 位数字 CEP，如 01310100

    **返回字段**
    - zipCode: CEP（仅数字）
    - state: 州缩写
    - city: 城市
    - neighborhood: 街区
    - street: 街道
    """
    validate_zip_code(zip_code)
    return await service.find_address(zip_code)

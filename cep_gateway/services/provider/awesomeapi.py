"""
AwesomeAPI CEP 适配器

GET https://cep.awesomeapi.com.br/json/{cep}
未找到时返回 404 + {"code": "not_found", ...}
"""

from typing import Any

from cep_gateway.models.address import AddressRecord
from cep_gateway.services.provider.base import ProviderAdapter


class AwesomeApiAdapter(ProviderAdapter):
    name = "awesomeapi"
    display_name = "AwesomeAPI"
    base_url = "https://cep.awesomeapi.com.br/json"

    def build_url(self, zip_code: str) -> str:
        return f"{self.base_url}/{zip_code}"

    def is_not_found(self, data: dict[str, Any]) -> bool:
        return data.get("code") == "not_found"

    def normalize(self, data: dict[str, Any], zip_code: str) -> AddressRecord:
        return AddressRecord(
            zip_code=data.get("cep") or zip_code,
            state=data.get("state"),
            city=data.get("city"),
            neighborhood=data.get("district"),
            street=data.get("address"),
        )

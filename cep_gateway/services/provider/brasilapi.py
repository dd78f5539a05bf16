"""
BrasilAPI 适配器

GET https://brasilapi.com.br/api/cep/v1/{cep}
未找到时返回 404
"""

from typing import Any

from cep_gateway.models.address import AddressRecord
from cep_gateway.services.provider.base import ProviderAdapter


class BrasilApiAdapter(ProviderAdapter):
    name = "brasilapi"
    display_name = "BrasilAPI"
    base_url = "https://brasilapi.com.br/api/cep/v1"

    def build_url(self, zip_code: str) -> str:
        return f"{self.base_url}/{zip_code}"

    def normalize(self, data: dict[str, Any], zip_code: str) -> AddressRecord:
        return AddressRecord(
            zip_code=data.get("cep") or zip_code,
            state=data.get("state"),
            city=data.get("city"),
            neighborhood=data.get("neighborhood"),
            street=data.get("street"),
        )

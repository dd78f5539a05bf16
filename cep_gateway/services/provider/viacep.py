"""
ViaCEP 适配器

GET https://viacep.com.br/ws/{cep}/json/
未找到时返回 200 + {"erro": true}
"""

from typing import Any

from cep_gateway.models.address import AddressRecord
from cep_gateway.services.provider.base import ProviderAdapter


class ViaCepAdapter(ProviderAdapter):
    name = "viacep"
    display_name = "ViaCEP"
    base_url = "https://viacep.com.br/ws"

    def build_url(self, zip_code: str) -> str:
        return f"{self.base_url}/{zip_code}/json/"

    def is_not_found(self, data: dict[str, Any]) -> bool:
        # 新版本返回 "erro": "true"（字符串）
        return str(data.get("erro", "")).lower() == "true"

    def normalize(self, data: dict[str, Any], zip_code: str) -> AddressRecord:
        return AddressRecord(
            zip_code=data.get("cep") or zip_code,
            state=data.get("uf"),
            city=data.get("localidade"),
            neighborhood=data.get("bairro"),
            street=data.get("logradouro"),
        )

"""Fuente de CEP: ViaCEP.

Esquema nativo: `cep`, `uf`, `localidade`, `bairro`, `logradouro`.

Nota:
- Para un CEP inexistente ViaCEP responde 200 con `{"erro": true}`; al no
  traer `cep` no valida contra el esquema y se trata como fallo.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from adapters.cep_sources.base import JsonAddressSource


class ViaCEPResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    cep: str = Field(..., min_length=1)
    logradouro: str | None = None
    bairro: str | None = None
    localidade: str | None = None
    uf: str | None = None


class ViaCEPSource(JsonAddressSource):
    schema = ViaCEPResponse
    field_map = {
        "postal_code": "cep",
        "region": "uf",
        "city": "localidade",
        "district": "bairro",
        "street": "logradouro",
    }

    @property
    def url_template(self) -> str:
        return self._settings.viacep_url_template

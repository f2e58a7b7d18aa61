"""Fuente de CEP: BrasilAPI.

Esquema nativo: `cep`, `state`, `city`, `neighborhood`, `street`.
Un CEP inexistente devuelve 404.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from adapters.cep_sources.base import JsonAddressSource


class BrasilAPIResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    cep: str = Field(..., min_length=1)
    state: str | None = None
    city: str | None = None
    neighborhood: str | None = None
    street: str | None = None


class BrasilAPISource(JsonAddressSource):
    schema = BrasilAPIResponse
    field_map = {
        "postal_code": "cep",
        "region": "state",
        "city": "city",
        "district": "neighborhood",
        "street": "street",
    }

    @property
    def url_template(self) -> str:
        return self._settings.brasilapi_url_template

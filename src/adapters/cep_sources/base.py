"""Base común para fuentes de CEP que responden JSON.

Cada fuente concreta solo declara:
- su plantilla de URL,
- su esquema nativo (modelo Pydantic),
- la tabla de remapeo hacia `NormalizedAddress`.

El resto (GET, status, parseo, contención de errores) vive aquí.
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from typing import ClassVar

import httpx
from pydantic import BaseModel, ValidationError

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.models import FetchFailure, FetchOutcome, FetchSuccess, NormalizedAddress
from core.interfaces.source import AddressSource

logger = logging.getLogger(__name__)


class JsonAddressSource(AddressSource):
    """Fuente HTTP+JSON genérica.

    Subclases definen `schema` y `field_map` (campo normalizado -> campo nativo).
    """

    schema: ClassVar[type[BaseModel]]
    field_map: ClassVar[dict[str, str]]

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    @property
    @abstractmethod
    def url_template(self) -> str:
        """Plantilla con `{cep}`; normalmente viene de `AppSettings`."""

    def build_url(self, postal_code: str) -> str:
        return self.url_template.format(cep=postal_code)

    def to_address(self, payload: BaseModel) -> NormalizedAddress:
        values = {
            target: getattr(payload, native) or ""
            for target, native in self.field_map.items()
        }
        return NormalizedAddress(**values)

    async def fetch(self, postal_code: str) -> FetchOutcome:
        url = self.build_url(postal_code)

        try:
            async with build_async_client(self._settings, transport=self._transport) as client:
                resp = await client.get(url)
        except httpx.HTTPError as exc:
            return FetchFailure(reason=f"transport error: {exc.__class__.__name__}: {exc}")

        if resp.status_code != 200:
            return FetchFailure(reason=f"unexpected status {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as exc:
            return FetchFailure(reason=f"invalid JSON body: {exc}")

        try:
            payload = self.schema.model_validate(data)
        except ValidationError as exc:
            return FetchFailure(reason=f"unexpected schema: {exc.error_count()} error(s)")

        logger.debug("parsed %s payload for %s", self.__class__.__name__, postal_code)
        return FetchSuccess(address=self.to_address(payload))

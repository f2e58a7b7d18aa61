"""Contrato de fuentes de direcciones.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite que las fuentes (BrasilAPI, ViaCEP, fakes de test) sean
  intercambiables sin acoplar el Core a implementaciones concretas.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import FetchOutcome


@runtime_checkable
class AddressSource(Protocol):
    """Contrato mínimo para una fuente de CEP.

    Reglas de diseño:
    - `fetch` es asíncrono porque hace I/O (HTTP).
    - Nunca lanza por errores de la fuente: devuelve `FetchFailure`.
    - No conoce su propio identificador; lo asigna quien la registra.
    """

    async def fetch(self, postal_code: str) -> FetchOutcome:
        """Consulta la fuente y devuelve el resultado normalizado."""

        ...

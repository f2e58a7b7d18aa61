"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- Facilita la normalización de direcciones que llegan de fuentes con
  esquemas distintos.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class NormalizedAddress(BaseModel):
    """Dirección en la forma común, independiente de la fuente.

    Por qué existe:
    - Unifica el resultado de todas las fuentes en una estructura común.
    - `source_id` lo asigna la tarea de fetch, nunca el adaptador.
    """

    model_config = ConfigDict(frozen=True)

    postal_code: str = Field(
        default="",
        description="CEP tal como lo devuelve la fuente.",
    )
    region: str = Field(
        default="",
        description="Estado/provincia (UF).",
    )
    city: str = Field(
        default="",
        description="Ciudad/localidad.",
    )
    district: str = Field(
        default="",
        description="Barrio.",
    )
    street: str = Field(
        default="",
        description="Calle/logradouro.",
    )
    source_id: str = Field(
        default="",
        description="Identificador de la fuente que produjo la dirección.",
    )


class FetchSuccess(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["success"] = "success"
    address: NormalizedAddress


class FetchFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["failure"] = "failure"
    reason: str = Field(
        ...,
        min_length=1,
        description="Motivo diagnóstico (solo para logs).",
    )


FetchOutcome = Annotated[Union[FetchSuccess, FetchFailure], Field(discriminator="kind")]


class RaceStatus(str, Enum):
    """Estados terminales de una carrera."""

    WINNER = "winner"
    TIMEOUT = "timeout"
    NO_SUCCESS = "no_success"


class RaceResult(BaseModel):
    """Resultado único de `RaceCoordinator.resolve`.

    `address` está presente si y solo si `status` es `winner`.
    """

    postal_code: str = Field(
        ...,
        description="CEP consultado.",
    )
    status: RaceStatus = Field(
        ...,
        description="Estado terminal de la carrera.",
    )
    address: NormalizedAddress | None = Field(
        default=None,
        description="Dirección ganadora (con `source_id`).",
    )
    elapsed_seconds: float = Field(
        default=0.0,
        ge=0.0,
        description="Tiempo total de la resolución.",
    )

    @property
    def ok(self) -> bool:
        return self.status is RaceStatus.WINNER and self.address is not None

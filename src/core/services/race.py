"""Carrera entre fuentes de CEP: gana la primera respuesta exitosa.

This module owns the only real control flow of the project:

- `run_fetch_task` wraps one source call, bounds it with the per-call
  timeout, contains every fault as a `FetchFailure` and tags successes with
  the identifier the source was registered under.
- `RaceCoordinator` launches one task per source at once and waits for the
  first success, the global deadline, or the failure of every source.

Policy when every source fails before the deadline: resolve immediately with
`RaceStatus.NO_SUCCESS` instead of waiting the deadline out. Callers that
only distinguish "winner" from "not winner" see no difference besides timing.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Mapping

from adapters.cep_sources import BrasilAPISource, ViaCEPSource
from core.config import AppSettings
from core.domain.models import (
    FetchFailure,
    FetchOutcome,
    FetchSuccess,
    NormalizedAddress,
    RaceResult,
    RaceStatus,
)
from core.interfaces.source import AddressSource

logger = logging.getLogger(__name__)

_POSTAL_CODE_SEPARATORS = ("-", ".", " ")


def normalize_postal_code(value: str) -> str:
    """Quita espacios y separadores habituales (`01001-000` -> `01001000`)."""

    cleaned = value.strip()
    for sep in _POSTAL_CODE_SEPARATORS:
        cleaned = cleaned.replace(sep, "")
    return cleaned


def build_default_sources(settings: AppSettings | None = None) -> dict[str, AddressSource]:
    """Registro por defecto: identificador -> fuente."""

    settings = settings or AppSettings()
    return {
        "BrasilAPI": BrasilAPISource(settings),
        "ViaCEP": ViaCEPSource(settings),
    }


async def run_fetch_task(
    source_id: str,
    source: AddressSource,
    postal_code: str,
    *,
    timeout: float,
) -> FetchOutcome:
    """Ejecuta una fuente y devuelve siempre un `FetchOutcome`.

    `asyncio.CancelledError` se propaga para que la cancelación aborte la
    petición HTTP en curso.
    """

    try:
        outcome = await asyncio.wait_for(source.fetch(postal_code), timeout=timeout)
    except asyncio.TimeoutError:
        outcome = FetchFailure(reason=f"call timed out after {timeout:.3f}s")
    except Exception as exc:
        outcome = FetchFailure(reason=f"{exc.__class__.__name__}: {exc}")

    if isinstance(outcome, FetchSuccess):
        tagged = outcome.address.model_copy(update={"source_id": source_id})
        return FetchSuccess(address=tagged)
    if not isinstance(outcome, FetchFailure):
        outcome = FetchFailure(reason=f"unexpected outcome {type(outcome).__name__}")

    logger.debug("source %s failed for %s: %s", source_id, postal_code, outcome.reason)
    return outcome


class RaceCoordinator:
    """Lanza una tarea por fuente y se queda con el primer éxito.

    Estados: pending -> winner | timeout | no_success. Cada llamada a
    `resolve` produce exactamente un `RaceResult`; las tareas pendientes se
    cancelan al resolver y su resultado nunca se observa.
    """

    def __init__(
        self,
        sources: Mapping[str, AddressSource],
        *,
        deadline: float = 1.0,
        call_timeout: float = 1.0,
    ) -> None:
        if not sources:
            raise ValueError("at least one source is required")
        if deadline <= 0:
            raise ValueError("deadline must be positive")
        if call_timeout <= 0:
            raise ValueError("call_timeout must be positive")
        if deadline < call_timeout:
            logger.warning(
                "race deadline (%.3fs) is shorter than the per-call timeout (%.3fs)",
                deadline,
                call_timeout,
            )

        self._sources = dict(sources)
        self._deadline = deadline
        self._call_timeout = call_timeout

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        sources: Mapping[str, AddressSource] | None = None,
    ) -> "RaceCoordinator":
        return cls(
            sources if sources is not None else build_default_sources(settings),
            deadline=settings.race_deadline_seconds,
            call_timeout=settings.http_timeout_seconds,
        )

    @property
    def source_ids(self) -> list[str]:
        return list(self._sources)

    async def resolve(self, postal_code: str) -> RaceResult:
        loop = asyncio.get_running_loop()
        started = time.monotonic()
        expires_at = loop.time() + self._deadline

        logger.info("racing %d sources for %s", len(self._sources), postal_code)

        pending: set[asyncio.Task[FetchOutcome]] = {
            asyncio.create_task(
                run_fetch_task(source_id, source, postal_code, timeout=self._call_timeout),
                name=f"fetch:{source_id}",
            )
            for source_id, source in self._sources.items()
        }

        winner: NormalizedAddress | None = None
        status = RaceStatus.TIMEOUT
        try:
            while pending:
                remaining = expires_at - loop.time()
                if remaining <= 0:
                    break

                done, pending = await asyncio.wait(
                    pending,
                    timeout=remaining,
                    return_when=asyncio.FIRST_COMPLETED,
                )
                if not done:
                    break

                for task in done:
                    outcome = task.result()
                    if isinstance(outcome, FetchSuccess):
                        winner = outcome.address
                        break
                if winner is not None:
                    status = RaceStatus.WINNER
                    break
            else:
                status = RaceStatus.NO_SUCCESS
        finally:
            for task in pending:
                task.cancel()

        elapsed = time.monotonic() - started
        if status is RaceStatus.WINNER:
            assert winner is not None
            logger.info("%s answered first for %s (%.3fs)", winner.source_id, postal_code, elapsed)
        elif status is RaceStatus.NO_SUCCESS:
            logger.info("every source failed for %s (%.3fs)", postal_code, elapsed)
        else:
            logger.info("no source answered %s within %.3fs", postal_code, self._deadline)

        return RaceResult(
            postal_code=postal_code,
            status=status,
            address=winner,
            elapsed_seconds=elapsed,
        )


async def resolve_postal_code(
    postal_code: str,
    *,
    settings: AppSettings | None = None,
    sources: Mapping[str, AddressSource] | None = None,
) -> RaceResult:
    """Punto de entrada programático (asíncrono)."""

    settings = settings or AppSettings()
    coordinator = RaceCoordinator.from_settings(settings, sources)
    return await coordinator.resolve(postal_code)


def lookup_postal_code(
    postal_code: str,
    *,
    settings: AppSettings | None = None,
    sources: Mapping[str, AddressSource] | None = None,
) -> RaceResult:
    """Variante síncrona de `resolve_postal_code`."""

    return asyncio.run(resolve_postal_code(postal_code, settings=settings, sources=sources))

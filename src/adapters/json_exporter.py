"""Exportación JSON del resultado de la carrera.

Por qué JSON:
- Interoperabilidad con scripts y pipelines (`--json`).
- Permite guardar el resultado sin depender del render Rich.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.models import RaceResult


def race_result_to_json(result: RaceResult) -> str:
    """Serializa `RaceResult` a JSON UTF-8 con formato estable."""

    payload = result.model_dump(mode="json")
    return json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n"


def export_race_result_json(*, result: RaceResult, output_path: Path) -> Path:
    """Escribe `RaceResult` en `output_path` (crea directorios si hace falta)."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(race_result_to_json(result), encoding="utf-8")
    return output_path

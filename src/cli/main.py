"""CLI principal (Typer).

Comandos:
- `lookup CEP`: carrera BrasilAPI vs ViaCEP, imprime la primera respuesta.
- `doctor run`: diagnóstico de configuración y de cada fuente.

La CLI solo traduce flags a `AppSettings` y presenta el `RaceResult`;
toda la lógica de la carrera vive en `core.services.race`.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from adapters.json_exporter import export_race_result_json, race_result_to_json
from cli.doctor import app as doctor_app
from cli.ui_components import build_address_panel, timeout_message
from core.config import AppSettings
from core.domain.language import Language
from core.logger import configure_logging
from core.services.race import build_default_sources, normalize_postal_code, resolve_postal_code

app = typer.Typer(
    no_args_is_help=True,
    help="Resolve a Brazilian postal code (CEP) by racing BrasilAPI and ViaCEP.",
)
app.add_typer(doctor_app, name="doctor")

_console = Console()


def _positive(value: float, name: str) -> float:
    if value <= 0:
        raise typer.BadParameter(f"{name} must be greater than zero")
    return value


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show per-source diagnostics (DEBUG logging) on stderr.",
    ),
) -> None:
    settings = AppSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)


@app.command()
def lookup(
    postal_code: str = typer.Argument(..., help="CEP to resolve, e.g. 01001000 or 01001-000."),
    deadline: Optional[float] = typer.Option(
        None,
        "--deadline",
        help="Global race deadline in seconds (default from settings).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Per-source HTTP timeout in seconds (default from settings).",
    ),
    json_output: bool = typer.Option(False, "--json", help="Print the result as JSON."),
    export_json: Optional[Path] = typer.Option(
        None,
        "--export-json",
        help="Also write the result as JSON to this path.",
    ),
    portuguese: bool = typer.Option(False, "--pt", help="Portuguese labels."),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show per-source diagnostics (DEBUG logging) on stderr.",
    ),
) -> None:
    """Query every source at once and print the first successful answer."""

    if verbose:
        configure_logging("DEBUG")

    settings = AppSettings()
    overrides: dict[str, float] = {}
    if deadline is not None:
        overrides["race_deadline_seconds"] = _positive(deadline, "--deadline")
    if timeout is not None:
        overrides["http_timeout_seconds"] = _positive(timeout, "--timeout")
    if overrides:
        settings = settings.model_copy(update=overrides)

    code = normalize_postal_code(postal_code)
    if not code:
        raise typer.BadParameter("postal code must not be empty", param_hint="POSTAL_CODE")

    language = Language.PORTUGUESE if portuguese else settings.default_language

    result = asyncio.run(
        resolve_postal_code(code, settings=settings, sources=build_default_sources(settings))
    )

    if export_json is not None:
        export_race_result_json(result=result, output_path=export_json)

    if json_output:
        typer.echo(race_result_to_json(result), nl=False)
        return

    if result.ok:
        assert result.address is not None
        _console.print(build_address_panel(result.address, language))
    else:
        # timeout y no_success se presentan igual: no hay respuesta utilizable.
        _console.print(timeout_message(language))


def run() -> None:
    app()

"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from cli.ui_components import build_sources_table, print_banner
from core.config import AppSettings
from core.domain.models import FetchOutcome, FetchSuccess
from core.services.race import build_default_sources, run_fetch_task

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and per-source checks.")

_console = Console()


async def _probe_sources(settings: AppSettings, postal_code: str) -> dict[str, FetchOutcome]:
    """Consulta cada fuente por separado (sin carrera) para ver su estado real."""

    sources = build_default_sources(settings)
    outcomes = await asyncio.gather(
        *(
            run_fetch_task(source_id, source, postal_code, timeout=settings.http_timeout_seconds)
            for source_id, source in sources.items()
        )
    )
    return dict(zip(sources, outcomes))


@app.command()
def run(
    postal_code: str = typer.Option(
        "01001000",
        "--postal-code",
        help="Known-good CEP used to probe each source.",
    ),
) -> None:
    """Run baseline diagnostics and show each source's status."""

    settings = AppSettings()
    print_banner(_console)

    table = build_sources_table("cep-race Doctor")

    # Config
    table.add_row("HTTP timeout", "OK", f"{settings.http_timeout_seconds:.3f}s per source")
    deadline_status = "OK" if settings.race_deadline_seconds >= settings.http_timeout_seconds else "WARN"
    table.add_row(
        "Race deadline",
        deadline_status,
        f"{settings.race_deadline_seconds:.3f}s (should be >= HTTP timeout)",
    )
    table.add_row("BrasilAPI URL", "OK", settings.brasilapi_url_template)
    table.add_row("ViaCEP URL", "OK", settings.viacep_url_template)
    table.add_row("Language", "OK", settings.default_language.label())

    # Connectivity (best-effort)
    outcomes = asyncio.run(_probe_sources(settings, postal_code))
    for source_id, outcome in outcomes.items():
        if isinstance(outcome, FetchSuccess):
            address = outcome.address
            table.add_row(source_id, "OK", f"{address.city}/{address.region}")
        else:
            table.add_row(source_id, "FAIL", outcome.reason)

    _console.print(table)

    if not any(isinstance(o, FetchSuccess) for o in outcomes.values()):
        _console.print(
            "\n[yellow]Note:[/yellow] No source answered; `lookup` will report a timeout."
        )

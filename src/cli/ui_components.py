"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar paneles en `lookup` y `doctor`.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.language import Language
from core.domain.models import NormalizedAddress

_LABELS: dict[Language, dict[str, str]] = {
    Language.ENGLISH: {
        "title": "Response received from {source}",
        "postal_code": "Postal code",
        "region": "State",
        "city": "City",
        "district": "District",
        "street": "Street",
        "timeout": "Timeout error: no source answered in time",
    },
    Language.PORTUGUESE: {
        "title": "Resposta recebida da {source}",
        "postal_code": "CEP",
        "region": "Estado",
        "city": "Cidade",
        "district": "Bairro",
        "street": "Rua",
        "timeout": "Erro de timeout",
    },
}

_ADDRESS_FIELDS = ("postal_code", "region", "city", "district", "street")


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida (solo en modo interactivo)."""

    title = Text("cep-race", style="bold cyan")
    subtitle = Text("BrasilAPI vs ViaCEP • first answer wins", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_address_panel(address: NormalizedAddress, language: Language) -> Panel:
    """Panel con la dirección ganadora y su fuente."""

    labels = _LABELS[language]
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()
    for field in _ADDRESS_FIELDS:
        table.add_row(f"{labels[field]}:", getattr(address, field))

    title = Text(labels["title"].format(source=address.source_id), style="bold green")
    return Panel(table, title=title, border_style="green")


def timeout_message(language: Language) -> Text:
    return Text(_LABELS[language]["timeout"], style="bold red")


def build_sources_table(title: str) -> Table:
    """Tabla para el diagnóstico por fuente (`doctor`)."""

    table = Table(title=title)
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")
    return table

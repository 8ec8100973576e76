"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from typing import Iterable

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import CaptureResult, Location


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida."""

    title = Text("GeoScreenshot", style="bold cyan")
    subtitle = Text("Capturas de una URL desde múltiples ubicaciones", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_locations_table(locations: Iterable[Location]) -> Table:
    table = Table(title="Locations")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("City", style="white")
    table.add_column("Country", style="green")
    table.add_column("Plan", style="magenta")
    table.add_column("Timezone", style="dim")
    for loc in locations:
        table.add_row(
            loc.name,
            ", ".join(p for p in (loc.city, loc.state) if p),
            loc.country_code or "",
            loc.plan or "",
            loc.timezone or "",
        )
    return table


def build_captures_table(results: Iterable[CaptureResult]) -> Table:
    """Resumen de capturas procesadas (id, ubicación, tamaño)."""

    table = Table(title="Captures")
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Location", style="white")
    table.add_column("URL", style="magenta")
    table.add_column("Size", style="green", justify="right")
    table.add_column("Error", style="red")
    for result in results:
        table.add_row(
            result.id or "",
            result.location.name if result.location else "",
            result.url or "",
            f"{result.size:,}" if result.size is not None else "",
            result.error or "",
        )
    return table

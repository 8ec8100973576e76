"""CLI de GeoScreenshot (Typer + Rich).

Modos:
- `single [URL]`: una ubicación al azar.
- `random [URL]`: N ubicaciones al azar (5 por defecto).
- `multi [URL]`: todas las ubicaciones (o las de un país).
- `locations`: lista las ubicaciones disponibles.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Optional, TypeVar

import typer
from rich.console import Console

from cli import doctor
from cli.ui_components import build_captures_table, build_locations_table, print_banner
from core.config import ClientOptions
from core.domain.models import CaptureResult
from core.errors import GeoScreenshotError
from core.logger import configure_cli_logging
from core.services.capture_pipeline import (
    GeoScreenshot,
    PipelineHooks,
    open_geoscreenshot,
    run_multi,
    run_random,
    run_single,
)

app = typer.Typer(no_args_is_help=True, help="Capture a URL from GeoScreenshot locations.")
app.add_typer(doctor.app, name="doctor")

_console = Console()

T = TypeVar("T")


@dataclass
class CliState:
    image_dir: Optional[Path] = None
    verbose: bool = False
    banner: bool = True


@app.callback()
def main(
    ctx: typer.Context,
    image_dir: Optional[Path] = typer.Option(None, "--image-dir", "-o", help="Output directory (default ./out)."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
    no_banner: bool = typer.Option(False, "--no-banner", help="Skip the welcome banner."),
) -> None:
    ctx.obj = CliState(image_dir=image_dir, verbose=verbose, banner=not no_banner)


def _execute(
    ctx: typer.Context,
    url: Optional[str],
    label: str,
    job: Callable[[GeoScreenshot], Awaitable[T]],
) -> T:
    state: CliState = ctx.obj or CliState()
    logger = configure_cli_logging(verbose=state.verbose)
    if state.banner:
        print_banner(_console)

    options = ClientOptions(url=url, image_dir=state.image_dir, verbose=True)

    async def _run() -> T:
        async with open_geoscreenshot(options, logger=logger) as gs:
            return await job(gs)

    try:
        return asyncio.run(_run())
    except GeoScreenshotError as exc:
        _console.print(f"[red]{label}: There was an error:[/red] {exc}")
        raise typer.Exit(code=1) from exc


def _hooks() -> PipelineHooks:
    def done(result: CaptureResult) -> None:
        name = result.location.name if result.location else "?"
        _console.print(f"[green]✓[/green] {name} → {result.id}.png ({result.size or 0:,} bytes)")

    def warning(message: str) -> None:
        _console.print(f"[yellow]{message}[/yellow]")

    return PipelineHooks(capture_done=done, warning=warning)


@app.command()
def single(ctx: typer.Context, url: Optional[str] = typer.Argument(None, help="URL to capture.")) -> None:
    """Capture URL from a single random location."""

    result = _execute(ctx, url, "single", lambda gs: run_single(gs, url, hooks=_hooks()))
    _console.print(build_captures_table([result]))


@app.command(name="random")
def random_(
    ctx: typer.Context,
    url: Optional[str] = typer.Argument(None, help="URL to capture."),
    count: int = typer.Option(5, "--count", "-n", min=1, help="Number of random locations."),
    country: Optional[str] = typer.Option(None, "--country", "-c", help="Alpha-2 country code filter."),
) -> None:
    """Capture URL from N random locations."""

    results = _execute(
        ctx,
        url,
        "random",
        lambda gs: run_random(gs, url, count=count, country_code=country, hooks=_hooks()),
    )
    _console.print(build_captures_table(results))
    _console.print(f"Captured {len(results)} locations")


@app.command()
def multi(
    ctx: typer.Context,
    url: Optional[str] = typer.Argument(None, help="URL to capture."),
    country: Optional[str] = typer.Option(None, "--country", "-c", help="Alpha-2 country code filter."),
) -> None:
    """Capture URL from every available location."""

    results = _execute(
        ctx,
        url,
        "multi",
        lambda gs: run_multi(gs, url, country_code=country, hooks=_hooks()),
    )
    _console.print(build_captures_table(results))
    _console.print(f"Captured {len(results)} locations")


@app.command()
def locations(
    ctx: typer.Context,
    country: Optional[str] = typer.Option(None, "--country", "-c", help="Alpha-2 country code filter."),
) -> None:
    """List the locations available to the account."""

    async def job(gs: GeoScreenshot):
        found = await gs.locations()
        return gs.filter(country)(found) if country else found

    found = _execute(ctx, None, "locations", job)
    _console.print(build_locations_table(found))


def run() -> None:
    app()


if __name__ == "__main__":
    run()

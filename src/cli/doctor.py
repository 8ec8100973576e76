"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from core.config import DEFAULT_API_BASE, ClientOptions, load_settings, resolve_config, write_user_env_vars
from core.errors import ConfigError, GeoScreenshotError
from core.services.capture_pipeline import open_geoscreenshot

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_api(options: ClientOptions) -> tuple[bool, str]:
    try:
        async with open_geoscreenshot(options) as gs:
            locations = await gs.locations()
        return True, f"{len(locations)} locations available"
    except GeoScreenshotError as exc:
        return False, str(exc)


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    table = Table(title="GeoScreenshot Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    try:
        settings = load_settings()
    except ConfigError as exc:
        table.add_row("Settings", "FAIL", str(exc))
        _console.print(table)
        raise typer.Exit(code=1)

    table.add_row("API base", "OK", settings.api_base)
    table.add_row("API limit", "OK", str(settings.api_limit))

    options = ClientOptions()
    try:
        config = resolve_config(options, settings=settings)
    except ConfigError as exc:
        table.add_row("Credentials", "FAIL", str(exc))
        _console.print(table)
        _console.print("\n[yellow]Hint:[/yellow] run `geoscreenshot doctor setup` or export GS_USERNAME/GS_PASSWORD.")
        raise typer.Exit(code=1)

    table.add_row("Credentials", "OK", "GS_USERNAME / GS_PASSWORD set")
    table.add_row("Image dir", "OK", str(config.image_dir.resolve()))

    ok_api, detail_api = asyncio.run(_check_api(options))
    table.add_row("API connectivity", "OK" if ok_api else "FAIL", detail_api)

    _console.print(table)
    if not ok_api:
        raise typer.Exit(code=1)


@app.command()
def setup() -> None:
    """Interactive credentials setup (stores config in the user config .env)."""

    username = typer.prompt("GeoScreenshot username").strip()
    password = typer.prompt("GeoScreenshot password", hide_input=True, confirmation_prompt=False).strip()
    api_base = typer.prompt("API base URL", default=DEFAULT_API_BASE, show_default=True).strip()

    if not username or not password:
        raise typer.BadParameter("username and password are required")

    env_path = write_user_env_vars(
        {
            "GS_USERNAME": username,
            "GS_PASSWORD": password,
            "GS_API_BASE": api_base,
        }
    )

    _console.print(f"[green]Saved credentials to:[/green] {env_path}")

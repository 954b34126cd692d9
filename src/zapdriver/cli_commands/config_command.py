"""Configuration CLI command."""

from dataclasses import asdict

import typer

from .deps import cli_module
from .shared import app, console


@app.command()
def config(
    action: str = typer.Argument("show", help="Action: show"),
) -> None:
    """Show the resolved zapdriver configuration."""
    if action != "show":
        console.print(f"[red]Unknown action: {action}. Use 'show'.[/red]")
        return

    settings = cli_module().load_settings()
    console.print("[bold]zapdriver configuration:[/bold]")
    for key, value in asdict(settings).items():
        if key == "api_key" and value:
            value = value[:4] + "..." if len(value) > 8 else "***"
        console.print(f"  {key}={value}")
    console.print(f"  base_url={settings.base_url}")

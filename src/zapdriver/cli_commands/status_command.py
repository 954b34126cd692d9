"""``zapdriver status`` - engine health check."""

import typer
from rich.markup import escape

from zapdriver.modules.zap import Status

from .deps import cli_module
from .shared import app, console

STATUS_ICONS = {
    Status.OK: "[green]✓[/green]",
    Status.WARNING: "[yellow]![/yellow]",
    Status.ERROR: "[red]✗[/red]",
}


@app.command()
def status() -> None:
    """Check whether the ZAP API is reachable."""
    service = cli_module().build_service()
    try:
        detail = service.status_detail()
    finally:
        service.close()

    console.print(f"  {STATUS_ICONS[detail.status]} {detail.name}: {escape(detail.message)}")
    for key, value in detail.details.items():
        console.print(f"    {key}: {value}")

    if detail.status is Status.ERROR:
        raise typer.Exit(1)

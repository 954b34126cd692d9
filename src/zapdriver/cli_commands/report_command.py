"""``zapdriver report`` - export the engine's raw XML report."""

from pathlib import Path

import typer
from rich.markup import escape

from zapdriver.modules.engine import ZapApiError

from .deps import cli_module
from .shared import app, console


@app.command()
def report(
    output: Path = typer.Option(None, "--output", "-o", help="Write the XML report here"),
) -> None:
    """Export the raw XML report of the current ZAP session."""
    service = cli_module().build_service()
    try:
        xml = service.get_raw_report()
    except ZapApiError as exc:
        console.print(f"[red]Could not export report: {escape(str(exc))}[/red]")
        raise typer.Exit(1)
    finally:
        service.close()

    if output is None:
        console.print(xml, markup=False, highlight=False)
        return
    output.write_text(xml, encoding="utf-8")
    console.print(f"[green]Report written:[/green] {output}")

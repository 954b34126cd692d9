"""zapdriver CLI - OWASP ZAP scan orchestration."""

from zapdriver.cli_commands import config_command, report_command, scan_command, status_command
from zapdriver.cli_commands.shared import app, build_service, console
from zapdriver.config import load_settings
from zapdriver.utils.log import configure_logging

__all__ = [
    "app",
    "build_service",
    "config_command",
    "configure_logging",
    "load_settings",
    "main",
    "report_command",
    "scan_command",
    "status_command",
]


@app.command()
def version() -> None:
    """Show the installed zapdriver version."""
    from importlib.metadata import PackageNotFoundError, version as pkg_version

    try:
        current_version = pkg_version("zapdriver")
    except PackageNotFoundError:
        current_version = "0.0.0+unknown"

    console.print(f"zapdriver {current_version}")


def main():
    """Entry point for the CLI."""
    app()

"""Shared CLI app objects and service construction."""

import typer
from rich.console import Console

from zapdriver.config import ZapSettings, load_settings
from zapdriver.modules.zap import ZapService

app = typer.Typer(
    name="zapdriver",
    help="Drive an OWASP ZAP engine through authenticated crawling and active scanning",
    no_args_is_help=True,
)
console = Console()


def build_service(settings: ZapSettings | None = None) -> ZapService:
    """Create a ZapService from the layered configuration."""
    return ZapService.from_settings(settings or load_settings())

"""OWASP ZAP control API access."""

from .client import ZapClient, ZapComponent, flag, guarded
from .errors import ZapApiError, ZapConnectionError

__all__ = [
    "ZapApiError",
    "ZapClient",
    "ZapComponent",
    "ZapConnectionError",
    "flag",
    "guarded",
]

"""Connection to the OWASP ZAP control API through the zapv2 client."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable
from typing import Any

import requests
from zapv2 import ZAPv2

from .errors import ZapApiError, ZapConnectionError

logger = logging.getLogger(__name__)

_STATUS_PATTERN = re.compile(r"(\d{3})response: ")


def flag(value: bool) -> str:
    """Render a boolean the way the ZAP API parses it."""
    return "true" if value else "false"


def _rejection(operation: str, exc: Exception) -> ZapApiError:
    # zapv2 reports a non-2xx answer as "...: <status>response: <body>".
    text = str(exc)
    match = _STATUS_PATTERN.search(text)
    status_code = int(match.group(1)) if match else None
    body = text.partition("response: ")[2]
    try:
        data = json.loads(body) if body else None
    except ValueError:
        data = None
    if isinstance(data, dict) and "message" in data:
        return ZapApiError(
            str(data["message"]), code=str(data.get("code", "")), status_code=status_code
        )
    return ZapApiError(f"{operation} failed: {text}", status_code=status_code)


def guarded(operation: str, func: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Any:
    """Call into zapv2 and raise ZapApiError for anything the engine side gets wrong."""
    try:
        return func(*args, **kwargs)
    except requests.exceptions.JSONDecodeError as exc:
        raise ZapApiError(f"Invalid JSON from {operation}") from exc
    except requests.exceptions.RequestException as exc:
        raise ZapConnectionError(f"Could not reach ZAP for {operation}: {exc}") from exc
    except StopIteration as exc:
        raise ZapApiError(f"Empty response from {operation}") from exc
    except Exception as exc:
        # zapv2 raises a plain Exception for rejected requests; let everything else through.
        if type(exc) is not Exception:
            raise
        raise _rejection(operation, exc) from exc


class ZapComponent:
    """One zapv2 API component (``core``, ``spider``...) with guarded calls."""

    def __init__(self, name: str, target: Any):
        self._name = name
        self._target = target

    def __getattr__(self, attr: str) -> Any:
        if attr.startswith("_"):
            raise AttributeError(attr)
        operation = f"{self._name}.{attr}"
        # zapv2 views without parameters are properties that hit the API on access.
        value = guarded(operation, getattr, self._target, attr)
        if not callable(value):
            logger.debug("ZAP API %s", operation)
            return value

        def call(**params: Any) -> Any:
            logger.debug("ZAP API %s", operation)
            return guarded(operation, value, **params)

        return call


class ZapClient:
    """Facade over ``zapv2.ZAPv2`` whose calls raise ZapApiError on failure.

    Calls read like the zapv2 calls they wrap, e.g.
    ``client.core.new_session(name="s", overwrite="true")``. Parameters are
    always passed by keyword.
    """

    def __init__(self, zap: Any):
        self._zap = zap

    @classmethod
    def connect(cls, base_url: str, api_key: str | None = None) -> ZapClient:
        """Build a client that talks to the engine listening at ``base_url``."""
        logger.debug("Connecting to ZAP at %s", base_url)
        proxies = {"http": base_url, "https": base_url}
        return cls(ZAPv2(proxies=proxies, apikey=api_key, validate_status_code=True))

    def __getattr__(self, component: str) -> ZapComponent:
        if component.startswith("_"):
            raise AttributeError(component)
        return ZapComponent(component, getattr(self._zap, component))

    def close(self) -> None:
        session = getattr(self._zap, "session", None)
        if session is not None:
            session.close()

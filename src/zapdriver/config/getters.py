"""Configuration getter functions."""

import os
from dataclasses import dataclass
from typing import Any

from .env_loader import load_dotenv_config, load_global_config

ENV_KEYS = (
    "ZAPDRIVER_ZAP_HOST",
    "ZAPDRIVER_ZAP_PORT",
    "ZAPDRIVER_ZAP_API_KEY",
    "ZAPDRIVER_SPIDER_POLL_INTERVAL",
    "ZAPDRIVER_SCANNER_POLL_INTERVAL",
    "ZAPDRIVER_SPIDER_TIMEOUT",
    "ZAPDRIVER_SCANNER_TIMEOUT",
    "ZAPDRIVER_AUTH_SCRIPT_ENGINE",
    "ZAPDRIVER_AUTH_SCRIPT_FILE",
    "ZAPDRIVER_VERBOSE",
)


def get_config(key: str, default: Any = None) -> Any:
    """
    Get configuration value with priority:
    1. Environment variable
    2. .env file
    3. Global config file
    4. Default value
    """
    env_value = os.environ.get(key)
    if env_value:
        return env_value

    dotenv = load_dotenv_config()
    if dotenv.get(key):
        return dotenv[key]

    global_config = load_global_config()
    if key in global_config and global_config[key] is not None:
        return global_config[key]

    return default


def _optional_float(value: Any) -> float | None:
    if value is None or str(value).strip() == "":
        return None
    return float(value)


def _as_bool(value: Any) -> bool:
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ZapSettings:
    """Connection and polling settings for one ZAP engine."""

    host: str = "localhost"
    port: int = 8080
    api_key: str | None = None
    spider_poll_interval: float = 1.0
    scanner_poll_interval: float = 5.0
    spider_timeout: float | None = None
    scanner_timeout: float | None = None
    auth_script_engine: str = "Oracle Nashorn"
    auth_script_file: str = "csrfAuthScript.js"
    verbose: bool = False

    @property
    def base_url(self) -> str:
        host = self.host
        if not host.startswith(("http://", "https://")):
            host = f"http://{host}"
        return f"{host.rstrip('/')}:{self.port}"


def load_settings() -> ZapSettings:
    """Resolve ZapSettings from the layered configuration sources."""
    defaults = ZapSettings()
    return ZapSettings(
        host=str(get_config("ZAPDRIVER_ZAP_HOST", defaults.host)),
        port=int(get_config("ZAPDRIVER_ZAP_PORT", defaults.port)),
        api_key=get_config("ZAPDRIVER_ZAP_API_KEY") or None,
        spider_poll_interval=float(
            get_config("ZAPDRIVER_SPIDER_POLL_INTERVAL", defaults.spider_poll_interval)
        ),
        scanner_poll_interval=float(
            get_config("ZAPDRIVER_SCANNER_POLL_INTERVAL", defaults.scanner_poll_interval)
        ),
        spider_timeout=_optional_float(get_config("ZAPDRIVER_SPIDER_TIMEOUT")),
        scanner_timeout=_optional_float(get_config("ZAPDRIVER_SCANNER_TIMEOUT")),
        auth_script_engine=str(
            get_config("ZAPDRIVER_AUTH_SCRIPT_ENGINE", defaults.auth_script_engine)
        ),
        auth_script_file=str(get_config("ZAPDRIVER_AUTH_SCRIPT_FILE", defaults.auth_script_file)),
        verbose=_as_bool(get_config("ZAPDRIVER_VERBOSE", False)),
    )

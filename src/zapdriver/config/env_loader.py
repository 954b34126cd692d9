"""Environment variable and configuration file loading."""

import os
from pathlib import Path
from typing import Any

import yaml


def global_config_dir() -> Path:
    return Path.home() / ".zapdriver"


def load_env_file(env_path: Path) -> dict[str, str]:
    """Parse KEY=VALUE lines; comments, blank lines and an ``export`` prefix are allowed."""
    if not env_path.is_file():
        return {}
    env_vars: dict[str, str] = {}
    for raw in env_path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.removeprefix("export ").split("=", 1)
        env_vars[key.strip()] = value.strip().strip("\"'")
    return env_vars


def load_global_config() -> dict[str, Any]:
    """Load global configuration from ~/.zapdriver/config.yml."""
    config_path = global_config_dir() / "config.yml"
    if not config_path.is_file():
        return {}
    data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    return data if isinstance(data, dict) else {}


def get_env_file_path() -> Path:
    """Return the .env file consulted after the process environment."""
    return Path(os.environ.get("ZAPDRIVER_ENV_FILE") or ".env")


def load_dotenv_config() -> dict[str, str]:
    return load_env_file(get_env_file_path())

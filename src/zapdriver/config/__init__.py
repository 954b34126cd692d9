"""
Configuration management for zapdriver.

Supports multiple configuration sources in order of priority:
1. Environment variables (highest priority)
2. .env file (ZAPDRIVER_ENV_FILE, default ./.env)
3. Global config file (~/.zapdriver/config.yml)
4. Default values (lowest priority)
"""

from .env_loader import (
    get_env_file_path,
    global_config_dir,
    load_dotenv_config,
    load_env_file,
    load_global_config,
)
from .getters import ENV_KEYS, ZapSettings, get_config, load_settings

__all__ = [
    "ENV_KEYS",
    "ZapSettings",
    "get_config",
    "get_env_file_path",
    "global_config_dir",
    "load_dotenv_config",
    "load_env_file",
    "load_global_config",
    "load_settings",
]

"""
Configuration
=============
Settings for the client, read from a JSON config file and the environment.

The config file lives at ``~/.config/rebrick/config.json`` unless
``REBRICK_CONFIG`` points elsewhere. Environment variables always win over
values from the file.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from rebrick.api.base import BASE_URL
from rebrick.api.exceptions import RebrickError
from rebrick.services.cache_manager import DEFAULT_TTL
from rebrick.services.debug_logger import get_logger

logger = get_logger("config")

CONFIG_ENV_VAR = "REBRICK_CONFIG"

# settings field -> environment variable
ENV_VARS = {
    "api_key": "REBRICKABLE_API_KEY",
    "username": "REBRICKABLE_USERNAME",
    "password": "REBRICKABLE_PASSWORD",
    "user_token": "REBRICKABLE_USER_TOKEN",
    "base_url": "REBRICKABLE_BASE_URL",
    "cache_ttl": "REBRICKABLE_CACHE_TTL",
    "timeout": "REBRICKABLE_TIMEOUT",
    "log_level": "REBRICKABLE_LOG_LEVEL",
}


class ConfigError(RebrickError):
    """Settings are missing or malformed."""


@dataclass
class Settings:
    api_key: str
    username: Optional[str] = None
    password: Optional[str] = None
    user_token: Optional[str] = None
    base_url: str = BASE_URL
    cache_ttl: float = DEFAULT_TTL
    timeout: float = 30.0
    log_level: str = "WARNING"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def get_config_dir() -> Path:
    """Get the directory holding the config file."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "rebrick"


def get_config_path() -> Path:
    """Get path to the config file."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return get_config_dir() / "config.json"


def load_config(path: Optional[Path] = None) -> dict:
    """Load the config file; a missing file is an empty config."""
    config_path = Path(path) if path else get_config_path()
    if not config_path.exists():
        return {}
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not read config file {config_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a JSON object")
    return data


def save_config(config: dict, path: Optional[Path] = None) -> Path:
    """Save configuration to the config file, creating its directory."""
    config_path = Path(path) if path else get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(config, indent=2), encoding="utf-8")
    logger.info(f"Saved config to {config_path}")
    return config_path


def _coerce_float(name: str, value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{name} must be a number, got {value!r}") from e


def _coerce_level(value: Any) -> str:
    level = str(value).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"log_level must be a logging level name, got {value!r}")
    return level


def load_settings(
    path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """
    Build Settings from the config file overlaid with environment variables.

    Raises:
        ConfigError: No API key configured, or a numeric value or log level is malformed
    """
    environ = os.environ if environ is None else environ
    values = {k: v for k, v in load_config(path).items() if k in ENV_VARS}

    for field_name, env_name in ENV_VARS.items():
        if environ.get(env_name):
            values[field_name] = environ[env_name]

    if not values.get("api_key"):
        raise ConfigError(
            f"No API key configured: set {ENV_VARS['api_key']} or add api_key to {path or get_config_path()}"
        )

    for numeric in ("cache_ttl", "timeout"):
        if numeric in values:
            values[numeric] = _coerce_float(numeric, values[numeric])
    if "log_level" in values:
        values["log_level"] = _coerce_level(values["log_level"])

    return Settings(**values)

"""
config.py - Configuration management for the chat command bot.

This module provides utilities for:
- Loading configuration from YAML/JSON files
- Reading environment variables (and an optional .env file)
- Building the effective BotConfig

Precedence, lowest to highest: defaults, config file, environment,
command-line overrides.
"""

import os
import json
import logging
from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised for configuration values that cannot be used."""


@dataclass
class BotConfig:
    """Configuration for the chat command bot."""
    # Server settings
    host: str = "play.example.com"
    port: int = 25565
    username: str = "MyBot"
    password: str = ""
    version: Optional[str] = None  # None = negotiate with the server

    # Commands
    owner: str = ""  # empty disables owner-only commands
    command_prefix: str = "!"

    # Behavior settings
    afk_interval: float = 60.0  # seconds, <= 0 disables idle motion
    reconnect_delay: float = 5.0

    # Safety
    dry_run: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Field values with the password masked."""
        data = asdict(self)
        if data["password"]:
            data["password"] = "********"
        return data


# Environment variable -> BotConfig field
ENV_VARS = {
    "MC_HOST": "host",
    "MC_PORT": "port",
    "MC_USER": "username",
    "MC_PASS": "password",
    "MC_VERSION": "version",
    "MC_OWNER": "owner",
    "AFK_INTERVAL": "afk_interval",
    "RECONNECT_DELAY": "reconnect_delay",
}


def load_config(path: str) -> Optional[Dict]:
    """
    Load configuration from a YAML or JSON file.

    Args:
        path: Path to configuration file

    Returns:
        Configuration dictionary, or None if file not found

    Raises:
        ConfigError: if the file cannot be parsed
    """
    if not os.path.exists(path):
        logger.info(f"Config file not found: {path}")
        return None

    try:
        with open(path, 'r') as f:
            if path.endswith('.yaml') or path.endswith('.yml'):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"Error loading config {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must contain a mapping")
    return data


def load_env_file(path: Optional[str] = None) -> bool:
    """
    Load a .env file into the process environment.

    Variables already set in the environment win.

    Returns:
        True if a file was loaded
    """
    if path is None:
        path = ".env"
    if not os.path.exists(path):
        return False
    logger.info(f"Loading environment from {path}")
    return load_dotenv(path, override=False)


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Collect BotConfig fields from environment variables."""
    if environ is None:
        environ = os.environ

    values = {}
    for var, key in ENV_VARS.items():
        if var in environ:
            values[key] = environ[var]
    return values


def _coerce(key: str, value: Any) -> Any:
    """Convert a raw config value to the type of the BotConfig field."""
    if key in ("port",):
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigError(f"{key} must be an integer, got {value!r}")

    if key in ("afk_interval", "reconnect_delay"):
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ConfigError(f"{key} must be a number, got {value!r}")

    if key == "dry_run":
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)

    if key == "version":
        if value in (None, "", False):
            return None
        return str(value)

    if value is None:
        return ""
    return str(value)


def build_config(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    overrides: Optional[Dict[str, Any]] = None
) -> BotConfig:
    """
    Build the effective configuration.

    Args:
        config_path: Optional YAML/JSON file
        environ: Environment mapping (os.environ by default)
        overrides: Command-line values; None entries are ignored

    Returns:
        BotConfig

    Raises:
        ConfigError: for unknown keys or invalid values
    """
    known = {f.name for f in fields(BotConfig)}
    merged: Dict[str, Any] = {}

    if config_path:
        file_values = load_config(config_path) or {}
        # Accept a nested "bot:" section as well as a flat mapping
        if isinstance(file_values.get("bot"), dict):
            file_values = file_values["bot"]
        unknown = set(file_values) - known
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        merged.update(file_values)

    merged.update(config_from_env(environ))

    for key, value in (overrides or {}).items():
        if value is not None:
            merged[key] = value

    values = {key: _coerce(key, value) for key, value in merged.items()}
    config = BotConfig(**values)

    if not 0 < config.port < 65536:
        raise ConfigError(f"port out of range: {config.port}")
    if config.reconnect_delay < 0:
        raise ConfigError(f"reconnect_delay must be >= 0, got {config.reconnect_delay}")
    if not config.command_prefix:
        raise ConfigError("command_prefix must not be empty")

    return config

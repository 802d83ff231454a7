"""
Utilities module for the chat command bot.

This module provides common utilities:
- Configuration management (files, environment, .env)
"""

from .config import (
    BotConfig,
    ConfigError,
    build_config,
    config_from_env,
    load_config,
    load_env_file,
)

__all__ = [
    'BotConfig',
    'ConfigError',
    'build_config',
    'config_from_env',
    'load_config',
    'load_env_file',
]

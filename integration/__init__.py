"""
Integration module for the chat command bot.

This module provides integration with external Minecraft clients:
- MinecraftClient: Abstract interface for Minecraft connectivity
"""

from .mc_client import (
    MinecraftClient,
    ClientConfig,
    ClientError,
    ActionError,
    ConnectionState,
    Position,
    Item,
    Player,
)

__all__ = [
    'MinecraftClient',
    'ClientConfig',
    'ClientError',
    'ActionError',
    'ConnectionState',
    'Position',
    'Item',
    'Player',
]

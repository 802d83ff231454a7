"""
Chat command bot.

This module provides the live bot functionality:
- SessionManager: Connection lifecycle and reconnects
- CommandDispatcher: Chat command parsing and routing
- FollowController: Keep pathing toward one player
- IdleMotionDriver: Anti-AFK motion
- ShopLedger: In-memory item counts
- Navigator: Pathfinder goals
- InventoryManager: Equip and eat
- Scheduler: Cooperative timers

SAFETY NOTE:
This bot is intended to be used only where automation is explicitly
allowed by the server owner (e.g., your own worlds, private servers,
or servers that have given explicit permission). Do not use this in
violation of any server's terms of service.
"""

from .commands import Command, CommandDispatcher, CommandInvocation, parse_command
from .follow import FollowController
from .idle_motion import IdleMotionDriver
from .inventory_manager import InventoryManager
from .navigation import GoalBlock, GoalNear, Movements, Navigator
from .session import SessionContext, SessionManager, SessionState
from .shop import ShopLedger
from .timers import Scheduler, TimerHandle

__all__ = [
    'Command',
    'CommandDispatcher',
    'CommandInvocation',
    'parse_command',
    'FollowController',
    'IdleMotionDriver',
    'InventoryManager',
    'GoalBlock',
    'GoalNear',
    'Movements',
    'Navigator',
    'SessionContext',
    'SessionManager',
    'SessionState',
    'ShopLedger',
    'Scheduler',
    'TimerHandle',
]

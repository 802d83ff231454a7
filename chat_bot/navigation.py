"""
navigation.py - Movement goals for the chat command bot.

Path planning itself is done by the client's pathfinder; this module
only builds the goals it consumes:
- GoalNear: get within a radius of a point (used for following)
- GoalBlock: stand exactly on a block (used for !goto)
"""

import math
import logging
from dataclasses import dataclass

from integration.mc_client import MinecraftClient, Position

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GoalNear:
    """Reach any block within `range` of (x, y, z)."""
    x: float
    y: float
    z: float
    range: float = 1.0


@dataclass(frozen=True)
class GoalBlock:
    """Stand on exactly the block (x, y, z)."""
    x: int
    y: int
    z: int


@dataclass
class Movements:
    """Movement capabilities handed to the pathfinder."""
    can_dig: bool = True
    allow_parkour: bool = True
    allow_sprinting: bool = True
    max_drop_down: int = 4


class Navigator:
    """
    Thin wrapper that turns movement requests into pathfinder goals.

    Usage:
        nav = Navigator(client)
        nav.configure_movements()
        nav.move_to_block(10, 64, -5)
        nav.stop()
    """

    def __init__(self, client: MinecraftClient):
        """
        Initialize the navigator.

        Args:
            client: Minecraft client owning the pathfinder
        """
        self.client = client
        self.movements = Movements()

    def configure_movements(self) -> None:
        """Install the default movement settings (once per spawn)."""
        self.client.set_movements(self.movements)
        logger.info("Pathfinder movements configured")

    def move_near(
        self,
        target: Position,
        range: float = 1.0,
        dynamic: bool = True
    ) -> GoalNear:
        """
        Path to within `range` blocks of target.

        Args:
            target: Target position
            range: Acceptable distance (in blocks)
            dynamic: Let the pathfinder re-plan as the world changes

        Returns:
            The goal that was set
        """
        goal = GoalNear(target.x, target.y, target.z, range)
        self.client.set_goal(goal, dynamic)
        return goal

    def move_to_block(self, x: float, y: float, z: float) -> GoalBlock:
        """Path onto the block containing (x, y, z)."""
        goal = GoalBlock(math.floor(x), math.floor(y), math.floor(z))
        self.client.set_goal(goal)
        return goal

    def stop(self) -> None:
        """Clear the current goal."""
        self.client.set_goal(None)

    @property
    def goal(self):
        return self.client.get_goal()

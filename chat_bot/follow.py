"""
follow.py - Keep pathing toward one player.

The pathfinder only plans toward the goal it was given, so while a
target is set the goal is re-issued toward the player's latest position
every FOLLOW_REFRESH_SECONDS.
"""

import logging
from typing import Dict, Optional

from integration.mc_client import MinecraftClient
from .navigation import Navigator
from .timers import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

FOLLOW_REFRESH_SECONDS = 2.0
FOLLOW_RANGE = 1.0

_SLOT = "current"


class FollowController:
    """
    Holds at most one follow target.

    An out-of-view target is kept; following resumes when it is seen
    again. Only stop() or a new follow() replaces it.
    """

    def __init__(
        self,
        client: MinecraftClient,
        navigator: Navigator,
        scheduler: Scheduler
    ):
        self.client = client
        self.navigator = navigator
        self.scheduler = scheduler

        self._targets: Dict[str, str] = {}
        self._timer: Optional[TimerHandle] = None

    @property
    def target(self) -> Optional[str]:
        return self._targets.get(_SLOT)

    def start(self) -> None:
        """Start the refresh timer."""
        if self._timer is not None and not self._timer.cancelled:
            return
        self._timer = self.scheduler.call_every(
            FOLLOW_REFRESH_SECONDS, self.refresh, name="follow-refresh"
        )

    def cancel(self) -> None:
        """Stop the refresh timer."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def follow(self, username: str) -> bool:
        """
        Start following username.

        Returns:
            False (and no state change) if the player is not visible
        """
        player = self.client.get_player(username)
        if player is None or not player.visible:
            logger.info(f"Cannot follow {username}: not visible")
            return False

        self._targets[_SLOT] = username
        self.navigator.move_near(player.position, FOLLOW_RANGE, dynamic=True)
        logger.info(f"Following {username}")
        return True

    def stop(self) -> None:
        """Forget the follow target. Safe to call with none set."""
        if self._targets.pop(_SLOT, None) is not None:
            logger.info("Follow target cleared")

    def refresh(self) -> None:
        """Re-issue the goal toward the target's current position."""
        username = self.target
        if username is None:
            return

        player = self.client.get_player(username)
        if player is None or not player.visible:
            return

        self.navigator.move_near(player.position, FOLLOW_RANGE, dynamic=True)

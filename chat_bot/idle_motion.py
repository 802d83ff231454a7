"""
idle_motion.py - Anti-AFK motion.

Every `interval` seconds the bot hops briefly and nudges its view by a
small random amount, enough to avoid idle kicks without really moving.
"""

import logging
from typing import Optional

import numpy as np

from integration.mc_client import MinecraftClient
from .timers import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

JUMP_SECONDS = 0.25
LOOK_JITTER = 0.05  # radians, each axis drawn from [-LOOK_JITTER, LOOK_JITTER]


class IdleMotionDriver:
    """
    Periodic jump + look perturbation.

    Args:
        client: Minecraft client to act on
        scheduler: Scheduler owning the timers
        interval: Seconds between actions; zero or negative disables
        seed: Optional RNG seed
    """

    def __init__(
        self,
        client: MinecraftClient,
        scheduler: Scheduler,
        interval: float = 60.0,
        seed: Optional[int] = None
    ):
        self.client = client
        self.scheduler = scheduler
        self.interval = interval
        self.rng = np.random.default_rng(seed)

        self._timer: Optional[TimerHandle] = None
        self._release: Optional[TimerHandle] = None

    @property
    def enabled(self) -> bool:
        return self.interval > 0

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._timer.cancelled

    def start(self) -> None:
        if not self.enabled:
            logger.info("Idle motion disabled")
            return
        if self.running:
            return

        self._timer = self.scheduler.call_every(
            self.interval, self.perform, name="idle-motion"
        )
        logger.info(f"Idle motion every {self.interval}s")

    def stop(self) -> None:
        """Cancel the periodic timer and any pending jump release."""
        for handle in (self._timer, self._release):
            if handle is not None:
                handle.cancel()
        self._timer = None
        self._release = None

    def perform(self) -> None:
        """Hop and nudge the view once."""
        if not self.client.is_connected():
            return

        self.client.set_control_state("jump", True)
        self._release = self.scheduler.call_later(
            JUMP_SECONDS, self._release_jump, name="idle-jump-release"
        )

        d_yaw, d_pitch = self.rng.uniform(-LOOK_JITTER, LOOK_JITTER, size=2)
        self.client.look(
            self.client.get_yaw() + float(d_yaw),
            self.client.get_pitch() + float(d_pitch),
            True
        )

    def _release_jump(self) -> None:
        self.client.set_control_state("jump", False)
        self._release = None

"""
timers.py - Cooperative timer scheduling for the chat command bot.

All periodic work (idle motion, follow refresh, reconnect delay) runs
from a single Scheduler that the session main loop polls between client
updates. Callbacks therefore never overlap with chat handling or with
each other.

Usage:
    scheduler = Scheduler()
    handle = scheduler.call_every(2.0, refresh, name="follow")
    while running:
        scheduler.run_due()
        client.update()
    handle.cancel()
"""

import time
import logging
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class TimerHandle:
    """A scheduled callback. Cancel it to stop any future runs."""

    def __init__(
        self,
        due: float,
        callback: Callable[[], None],
        interval: Optional[float] = None,
        name: str = "timer"
    ):
        self.due = due
        self.callback = callback
        self.interval = interval
        self.name = name
        self.cancelled = False
        self.runs = 0

    @property
    def repeating(self) -> bool:
        return self.interval is not None

    @property
    def active(self) -> bool:
        """True while the timer may still run."""
        return not self.cancelled and (self.repeating or self.runs == 0)

    def cancel(self) -> None:
        self.cancelled = True

    def __repr__(self) -> str:
        return (f"TimerHandle(name={self.name!r}, due={self.due:.3f}, "
                f"interval={self.interval}, cancelled={self.cancelled})")


class Scheduler:
    """
    Single-threaded timer queue.

    Args:
        clock: Monotonic time source in seconds (injectable for tests)
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self._timers: List[TimerHandle] = []

    def call_later(
        self,
        delay: float,
        callback: Callable[[], None],
        name: str = "timer"
    ) -> TimerHandle:
        """Run callback once, delay seconds from now."""
        handle = TimerHandle(self.clock() + max(delay, 0.0), callback, name=name)
        self._timers.append(handle)
        return handle

    def call_every(
        self,
        interval: float,
        callback: Callable[[], None],
        name: str = "timer"
    ) -> TimerHandle:
        """Run callback every interval seconds, first run one interval from now."""
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")

        handle = TimerHandle(self.clock() + interval, callback, interval=interval, name=name)
        self._timers.append(handle)
        return handle

    def run_due(self) -> int:
        """
        Run every timer whose due time has passed.

        Timers scheduled by a callback are picked up on a later call.
        A failing callback is logged and does not affect the others.

        Returns:
            Number of callbacks run
        """
        now = self.clock()
        due = sorted(
            (t for t in self._timers if not t.cancelled and t.due <= now),
            key=lambda t: t.due
        )

        ran = 0
        for timer in due:
            # An earlier callback in this pass may have cancelled it
            if timer.cancelled:
                continue

            timer.runs += 1
            ran += 1
            try:
                timer.callback()
            except Exception as e:
                logger.error(f"Error in timer '{timer.name}': {e}", exc_info=True)

            if timer.repeating:
                timer.due += timer.interval
                if timer.due <= now:
                    timer.due = now + timer.interval

        self._timers = [t for t in self._timers if t.active]
        return ran

    def pending(self) -> int:
        return sum(1 for t in self._timers if not t.cancelled)

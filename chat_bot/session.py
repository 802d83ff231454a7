"""
session.py - Session lifecycle for the chat command bot.

This module implements the session manager that:
- Builds a fresh SessionContext (client + per-session state) and connects
- Configures movements and starts idle motion once spawned
- Routes chat lines to the command dispatcher
- Tears the session down and reconnects after a fixed delay on 'end'

States:
- DISCONNECTED: No live session (initial, or waiting to reconnect)
- CONNECTING: Client created, waiting for spawn
- CONNECTED: Spawned, commands and timers active

Reconnects use a fixed delay with no cap and no backoff. Only the 'end'
event triggers a reconnect; 'error' is logged.
"""

import time
import logging
from typing import Any, Callable, Dict, Optional
from dataclasses import dataclass, field
from enum import Enum, auto

from integration.mc_client import MinecraftClient, ClientConfig
from utils.config import BotConfig
from .commands import CommandDispatcher
from .follow import FollowController
from .idle_motion import IdleMotionDriver
from .inventory_manager import InventoryManager
from .navigation import Navigator
from .shop import ShopLedger
from .timers import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Session lifecycle states."""
    DISCONNECTED = auto()
    CONNECTING = auto()
    CONNECTED = auto()


@dataclass
class SessionContext:
    """
    Everything that lives exactly as long as one connection.

    A reconnect builds a new context, so follow target, shop ledger and
    timers never carry over.
    """
    client: MinecraftClient
    navigator: Navigator
    inventory: InventoryManager
    ledger: ShopLedger
    follow: FollowController
    idle: IdleMotionDriver
    dispatcher: Optional[CommandDispatcher] = None
    started_at: float = field(default_factory=time.time)
    closed: bool = False

    def teardown(self) -> None:
        """Cancel every timer owned by this session."""
        if self.closed:
            return
        self.closed = True
        self.idle.stop()
        self.follow.cancel()


ClientFactory = Callable[[ClientConfig], MinecraftClient]


class SessionManager:
    """
    Keeps exactly one session alive, rebuilding it after disconnects.

    Usage:
        manager = SessionManager(BotConfig(host="localhost", owner="me"))
        manager.run()

    Args:
        config: Bot configuration
        scheduler: Timer scheduler (a new one by default)
        client_factory: Builds the client for each session
    """

    LOOP_SLEEP = 0.05

    def __init__(
        self,
        config: BotConfig,
        scheduler: Optional[Scheduler] = None,
        client_factory: ClientFactory = MinecraftClient,
        idle_seed: Optional[int] = None
    ):
        self.config = config
        self.scheduler = scheduler or Scheduler()
        self.client_factory = client_factory
        self.idle_seed = idle_seed

        self._state = SessionState.DISCONNECTED
        self._context: Optional[SessionContext] = None
        self._reconnect_timer: Optional[TimerHandle] = None
        self._stopping = False

        self.sessions_started = 0
        self.reconnects = 0
        self._start_time = time.time()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def context(self) -> Optional[SessionContext]:
        return self._context

    def start(self) -> SessionContext:
        """Create a new session and begin connecting."""
        self._stopping = False
        return self._create_session()

    def run(self) -> None:
        """
        Main loop.

        Runs timers and pumps the client until stop() is called or the
        process is interrupted.
        """
        logger.info("Starting chat command bot...")
        logger.info(f"Target: {self.config.host}:{self.config.port}")

        if self._context is None:
            self.start()

        try:
            while not self._stopping:
                self.step()
                time.sleep(self.LOOP_SLEEP)
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
        finally:
            self.stop()

    def step(self) -> None:
        """One loop iteration: due timers, then client events."""
        self.scheduler.run_due()
        if self._context is not None and not self._context.closed:
            self._context.client.update()

    def stop(self) -> None:
        """Disconnect for good; no reconnect is scheduled."""
        if self._stopping and self._context is None:
            return

        logger.info("Shutting down...")
        self._stopping = True

        if self._reconnect_timer is not None:
            self._reconnect_timer.cancel()
            self._reconnect_timer = None

        context = self._context
        self._context = None
        if context is not None:
            context.teardown()
            context.client.disconnect()

        self._state = SessionState.DISCONNECTED
        logger.info("Shutdown complete")

    def get_stats(self) -> Dict[str, Any]:
        """Get session statistics."""
        return {
            "state": self._state.name,
            "uptime_minutes": (time.time() - self._start_time) / 60,
            "sessions_started": self.sessions_started,
            "reconnects": self.reconnects,
        }

    def _create_session(self) -> SessionContext:
        client_config = ClientConfig(
            host=self.config.host,
            port=self.config.port,
            username=self.config.username,
            password=self.config.password or None,
            version=self.config.version or None,
            dry_run=self.config.dry_run
        )
        client = self.client_factory(client_config)

        navigator = Navigator(client)
        context = SessionContext(
            client=client,
            navigator=navigator,
            inventory=InventoryManager(client),
            ledger=ShopLedger(),
            follow=FollowController(client, navigator, self.scheduler),
            idle=IdleMotionDriver(
                client, self.scheduler, self.config.afk_interval, seed=self.idle_seed
            ),
        )
        context.dispatcher = CommandDispatcher(
            context, owner=self.config.owner, prefix=self.config.command_prefix
        )

        client.on_event('spawn', lambda: self._on_spawn(context))
        client.on_event('chat', context.dispatcher.handle_chat)
        client.on_event('error', self._on_error)
        client.on_event('end', lambda reason: self._on_end(context, reason))
        client.on_event('autoeat_started', lambda: logger.info("Auto-eat started"))
        client.on_event('autoeat_stopped', lambda: logger.info("Auto-eat stopped"))

        self._context = context
        self.sessions_started += 1
        self._transition_to(SessionState.CONNECTING)

        context.follow.start()
        client.connect()
        return context

    def _on_spawn(self, context: SessionContext) -> None:
        if context is not self._context:
            return

        context.navigator.configure_movements()
        context.idle.start()
        self._transition_to(SessionState.CONNECTED)
        logger.info("Bot spawned")

    def _on_error(self, error: Exception) -> None:
        logger.error(f"Bot error: {error}")

    def _on_end(self, context: SessionContext, reason: str) -> None:
        # A stale or already torn down session may report its end again
        if context is not self._context or context.closed:
            return

        logger.warning(f"Bot disconnected. Reason: {reason}")
        context.teardown()
        self._transition_to(SessionState.DISCONNECTED)

        if self._stopping:
            return
        self._schedule_reconnect()

    def _schedule_reconnect(self) -> None:
        delay = self.config.reconnect_delay
        logger.info(f"Reconnecting in {delay:.1f}s...")
        self._reconnect_timer = self.scheduler.call_later(
            delay, self._reconnect, name="reconnect"
        )

    def _reconnect(self) -> None:
        self._reconnect_timer = None
        if self._stopping:
            return

        logger.info("Reconnecting...")
        self.reconnects += 1
        try:
            self._create_session()
        except Exception as e:
            logger.error(f"Reconnect failed: {e}", exc_info=True)
            if self._context is not None:
                self._context.teardown()
            self._transition_to(SessionState.DISCONNECTED)
            self._schedule_reconnect()

    def _transition_to(self, new_state: SessionState) -> None:
        if new_state != self._state:
            logger.info(f"State: {self._state.name} -> {new_state.name}")
            self._state = new_state

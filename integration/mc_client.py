"""
mc_client.py - Minecraft client abstraction for the chat command bot.

This module provides a clean abstraction layer over the actual Minecraft
client/bot library. The rest of the bot code interacts with this interface
rather than directly with protocol-level details (pathfinding, physics,
auto-eat and version negotiation are all behind this seam).

Two modes are supported:
- dry_run: an in-process simulated world. Players, inventory and chat can
  be injected with the simulate_* helpers, which is also what the tests use.
- live: holds a TCP connection to the server so disconnects are detected
  and reported through the same 'error'/'end' events.

Events emitted (register with on_event):
- 'spawn'            ()               session reached the playing state
- 'chat'             (username, text) a chat line was received
- 'error'            (exception)      transport level error
- 'end'              (reason)         session is over, terminal
- 'autoeat_started'  ()
- 'autoeat_stopped'  ()

SAFETY NOTE:
This bot is intended to be used only where automation is explicitly
allowed by the server owner. Do not use this in violation of any
server's terms of service.
"""

import math
import socket
import logging
from collections import deque
from typing import Dict, List, Optional, Tuple, Any, Callable
from dataclasses import dataclass
from enum import IntEnum

logger = logging.getLogger(__name__)


class ClientError(Exception):
    """Raised when the client cannot perform a requested action."""


class ActionError(ClientError):
    """Raised when an in-game action (eat, equip) fails."""


class ConnectionState(IntEnum):
    """Connection state for the Minecraft client."""
    DISCONNECTED = 0
    CONNECTING = 1
    CONNECTED = 2


@dataclass
class Position:
    """3D position in the world."""
    x: float
    y: float
    z: float

    def to_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def floored(self) -> Tuple[int, int, int]:
        """Block coordinates containing this position."""
        return (math.floor(self.x), math.floor(self.y), math.floor(self.z))

    def distance_to(self, other: 'Position') -> float:
        """Calculate Euclidean distance to another position."""
        return math.sqrt(
            (self.x - other.x) ** 2 +
            (self.y - other.y) ** 2 +
            (self.z - other.z) ** 2
        )


@dataclass
class Item:
    """Inventory item information."""
    name: str  # e.g., "diamond_sword"
    count: int = 1
    slot: int = 0


@dataclass
class Player:
    """
    A player known to the server (tab list entry).

    position is None when the player's entity is out of view range.
    """
    username: str
    position: Optional[Position] = None

    @property
    def visible(self) -> bool:
        return self.position is not None


@dataclass
class ClientConfig:
    """
    Configuration for the Minecraft client.

    password is optional; when empty the client joins in offline mode.
    version None lets the server negotiate the protocol version.
    """
    host: str = "localhost"
    port: int = 25565
    username: str = "MyBot"
    password: Optional[str] = None
    version: Optional[str] = None

    # Connection settings
    connect_timeout: float = 10.0

    # Safety settings
    dry_run: bool = False

    @property
    def auth_mode(self) -> str:
        return "microsoft" if self.password else "offline"


# Food points restored per item, used by the simulated auto-eat
FOOD_VALUES = {
    "apple": 4,
    "baked_potato": 5,
    "bread": 5,
    "carrot": 3,
    "cooked_beef": 8,
    "cooked_chicken": 6,
    "cooked_porkchop": 8,
    "golden_carrot": 6,
}

MAX_FOOD = 20


class MinecraftClient:
    """
    Abstraction over the actual Minecraft client/bot library.

    This class provides a high-level interface for:
    - Connecting to servers and reporting session lifecycle events
    - Sending and receiving chat messages
    - Reading position, orientation, players and inventory
    - Setting control states, looking, equipping and eating
    - Handing movement goals to the pathfinder

    Usage:
        config = ClientConfig(host="localhost", username="bot", dry_run=True)
        client = MinecraftClient(config)
        client.on_event('chat', lambda user, text: print(user, text))
        client.connect()
        client.update()
        client.send_chat("hello")
        client.disconnect()
    """

    def __init__(self, config: Optional[ClientConfig] = None):
        """
        Initialize the Minecraft client.

        Args:
            config: Client configuration
        """
        self.config = config or ClientConfig()

        # Connection state
        self._state = ConnectionState.DISCONNECTED
        self._connection: Optional[socket.socket] = None
        self._ended = False

        # Cached entity state
        self._position: Optional[Position] = None
        self._yaw: float = 0.0
        self._pitch: float = 0.0
        self._food: int = MAX_FOOD
        self._controls: Dict[str, bool] = {}

        # World state
        self._players: Dict[str, Player] = {}
        self._inventory: List[Item] = []
        self._held_item: Optional[Item] = None

        # Pathfinder state
        self._goal: Any = None
        self._goal_dynamic = False
        self._movements: Any = None

        # Outbound chat history (most recent last)
        self.sent_messages: List[str] = []

        # Event callbacks and inbound queue
        self._event_handlers: Dict[str, List[Callable]] = {}
        self._pending_events: deque = deque()

    @property
    def username(self) -> str:
        return self.config.username

    @property
    def state(self) -> ConnectionState:
        return self._state

    def connect(self) -> bool:
        """
        Connect to the Minecraft server.

        The 'spawn' event fires from the next update() call. A failed
        connection queues 'error' and 'end' events instead.

        Returns:
            True if the connection was opened, False otherwise
        """
        if self._state != ConnectionState.DISCONNECTED:
            logger.warning("Client already connected or connecting")
            return False

        self._state = ConnectionState.CONNECTING
        self._ended = False
        version = self.config.version or "auto"
        logger.info(f"Connecting to {self.config.host}:{self.config.port} "
                    f"as {self.config.username} (auth={self.config.auth_mode}, "
                    f"version={version})...")

        if self.config.dry_run:
            logger.info("[DRY RUN] Simulating connection")
            return True

        try:
            self._connection = socket.create_connection(
                (self.config.host, self.config.port),
                timeout=self.config.connect_timeout
            )
            self._connection.setblocking(False)
        except (OSError, UnicodeError) as e:
            # UnicodeError: host name fails IDNA encoding
            logger.error(f"Connection failed: {e}")
            self._connection = None
            self._queue_event('error', e)
            self._queue_event('end', f"connect failed: {e}")
            return False

        return True

    def disconnect(self, reason: str = "disconnect.quitting") -> None:
        """Disconnect from the server and emit 'end'."""
        if self._state == ConnectionState.DISCONNECTED:
            return

        logger.info("Disconnecting...")
        self._close(reason)

    def is_connected(self) -> bool:
        """Check if client is connected and playing."""
        return self._state == ConnectionState.CONNECTED

    def update(self) -> None:
        """
        Update client state (call periodically).

        Completes a pending spawn, polls the transport for closure and
        delivers queued inbound events to the registered handlers.
        """
        # Spawn first so chat queued during login sees a connected client
        opened = self.config.dry_run or self._connection is not None
        if self._state == ConnectionState.CONNECTING and opened:
            self._state = ConnectionState.CONNECTED
            self._position = Position(0.5, 64.0, 0.5)
            logger.info("Spawned in world")
            self._emit_event('spawn')

        if self._connection is not None and self._state != ConnectionState.DISCONNECTED:
            self._poll_connection()

        while self._pending_events:
            event_type, args = self._pending_events.popleft()
            if event_type == 'end':
                self._close(args[0])
                continue
            self._emit_event(event_type, *args)

    def send_chat(self, message: str) -> bool:
        """
        Send a chat message or command.

        Args:
            message: Chat message or command

        Returns:
            True if sent successfully
        """
        if not self.is_connected():
            logger.warning("Cannot send chat: not connected")
            return False

        self.sent_messages.append(message)

        if self.config.dry_run:
            logger.info(f"[DRY RUN] Would send chat: {message}")
            return True

        logger.info(f"Sending chat: {message}")
        return True

    def get_position(self) -> Optional[Position]:
        """
        Get the current player position.

        Returns:
            Current position or None if not spawned
        """
        return self._position

    def get_yaw(self) -> float:
        return self._yaw

    def get_pitch(self) -> float:
        return self._pitch

    def get_food(self) -> int:
        """Get current food level (0-20)."""
        return self._food

    def look(self, yaw: float, pitch: float, force: bool = True) -> bool:
        """
        Set the player's orientation.

        Args:
            yaw: Yaw in radians
            pitch: Pitch in radians
            force: Skip server-side smoothing

        Returns:
            True if successful
        """
        if not self.is_connected():
            return False

        self._yaw = yaw
        self._pitch = pitch
        logger.debug(f"Look yaw={yaw:.3f} pitch={pitch:.3f} force={force}")
        return True

    def set_control_state(self, control: str, state: bool) -> None:
        """Press or release a movement control ('jump', 'sneak', ...)."""
        self._controls[control] = state

    def get_control_state(self, control: str) -> bool:
        return self._controls.get(control, False)

    def get_player(self, username: str) -> Optional[Player]:
        """
        Look up a player by exact username.

        Returns:
            Player record, or None if the player is not online
        """
        return self._players.get(username)

    def get_inventory_items(self) -> List[Item]:
        """Get the non-empty inventory slots in slot order."""
        return [item for item in self._inventory if item.count > 0]

    def get_held_item(self) -> Optional[Item]:
        return self._held_item

    def equip(self, item: Item, destination: str = "hand") -> None:
        """
        Equip an inventory item.

        Raises:
            ActionError: if the item is not in the inventory
        """
        if not self.is_connected():
            raise ActionError("not connected")
        if item not in self._inventory:
            raise ActionError(f"{item.name} is not in the inventory")
        if destination != "hand":
            raise ActionError(f"unsupported destination: {destination}")

        self._held_item = item
        logger.info(f"Equipped {item.name} to {destination}")

    def eat(self) -> None:
        """
        Eat the best food item in the inventory.

        Raises:
            ActionError: if there is nothing to eat
        """
        if not self.is_connected():
            raise ActionError("not connected")

        foods = [i for i in self.get_inventory_items() if i.name in FOOD_VALUES]
        if not foods:
            raise ActionError("no food in inventory")

        food = max(foods, key=lambda i: FOOD_VALUES[i.name])
        self._emit_event('autoeat_started')
        food.count -= 1
        self._food = min(MAX_FOOD, self._food + FOOD_VALUES[food.name])
        self._emit_event('autoeat_stopped')

    def set_goal(self, goal: Any, dynamic: bool = False) -> None:
        """Hand a movement goal to the pathfinder (None clears it)."""
        self._goal = goal
        self._goal_dynamic = dynamic
        logger.debug(f"Pathfinder goal: {goal} (dynamic={dynamic})")

    def get_goal(self) -> Any:
        return self._goal

    def is_goal_dynamic(self) -> bool:
        return self._goal_dynamic

    def set_movements(self, movements: Any) -> None:
        """Configure the pathfinder's movement capabilities."""
        self._movements = movements

    def get_movements(self) -> Any:
        return self._movements

    def on_event(self, event_type: str, handler: Callable) -> None:
        """
        Register an event handler.

        Args:
            event_type: Event type (e.g., 'chat', 'spawn', 'end')
            handler: Callback function
        """
        if event_type not in self._event_handlers:
            self._event_handlers[event_type] = []
        self._event_handlers[event_type].append(handler)

    # Simulation hooks (dry run / tests)

    def simulate_chat(self, username: str, message: str) -> None:
        """Queue an inbound chat line, delivered on the next update()."""
        self._queue_event('chat', username, message)

    def add_player(self, username: str, position: Optional[Position] = None) -> Player:
        """Add or move a player. position None means out of view."""
        player = Player(username, position)
        self._players[username] = player
        return player

    def hide_player(self, username: str) -> None:
        """Keep the player online but remove its entity from view."""
        player = self._players.get(username)
        if player is not None:
            player.position = None

    def remove_player(self, username: str) -> None:
        self._players.pop(username, None)

    def give_item(self, name: str, count: int = 1) -> Item:
        """Put an item stack into the next free slot."""
        item = Item(name=name, count=count, slot=len(self._inventory))
        self._inventory.append(item)
        return item

    def set_food(self, food: int) -> None:
        self._food = max(0, min(MAX_FOOD, food))

    def drop_connection(self, reason: str, error: Optional[Exception] = None) -> None:
        """Queue a connection loss: an optional 'error' followed by 'end'."""
        if error is not None:
            self._queue_event('error', error)
        self._queue_event('end', reason)

    # Internals

    def _queue_event(self, event_type: str, *args: Any) -> None:
        self._pending_events.append((event_type, args))

    def _emit_event(self, event_type: str, *args: Any) -> None:
        """Emit an event to registered handlers."""
        for handler in list(self._event_handlers.get(event_type, [])):
            try:
                handler(*args)
            except Exception as e:
                logger.error(f"Error in {event_type} handler: {e}", exc_info=True)

    def _poll_connection(self) -> None:
        """Detect a closed or broken transport without blocking."""
        try:
            data = self._connection.recv(4096)
        except (BlockingIOError, socket.timeout):
            return
        except OSError as e:
            self._queue_event('error', e)
            self._queue_event('end', f"socket error: {e}")
            return

        if not data:
            self._queue_event('end', "socket closed")

    def _close(self, reason: str) -> None:
        if self._connection is not None:
            try:
                self._connection.close()
            except OSError as e:
                logger.debug(f"Error closing socket: {e}")
            self._connection = None

        self._state = ConnectionState.DISCONNECTED
        self._position = None
        self._controls.clear()
        self._pending_events.clear()

        if self._ended:
            return
        self._ended = True
        logger.info(f"Disconnected: {reason}")
        self._emit_event('end', reason)

"""
commands.py - Chat command parsing and dispatch.

Chat lines starting with the command prefix ("!" by default) are split
into a command and its arguments and routed to one handler per Command.

Commands:
- Public: !help, !ping, !pos
- Owner only: !follow <player>, !stop, !goto <x> <y> <z>, !say <msg>,
  !eat, !equip <item>, !shop <buy|sell> <item> [amount]

Owner-only commands from anyone else are dropped without a reply. With
no owner configured they are never run.
"""

import math
import logging
from typing import Callable, Dict, List, Optional, TYPE_CHECKING
from dataclasses import dataclass
from enum import Enum

from integration.mc_client import ClientError

if TYPE_CHECKING:
    from .session import SessionContext

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "!"

HELP_TEXT = ("Commands: !help, !ping, !pos. Owner: !follow <player>, !stop, "
             "!goto x y z, !say msg, !eat, !equip <item>, !shop")


class Command(Enum):
    """Every chat command the bot understands."""
    HELP = "help"
    PING = "ping"
    POS = "pos"
    FOLLOW = "follow"
    STOP = "stop"
    GOTO = "goto"
    SAY = "say"
    EAT = "eat"
    EQUIP = "equip"
    SHOP = "shop"


PUBLIC_COMMANDS = frozenset({Command.HELP, Command.PING, Command.POS})


@dataclass
class CommandInvocation:
    """One parsed command, alive for a single dispatch."""
    command: Command
    args: List[str]
    username: str
    message: str  # lowercased full text


def parse_command(
    username: str,
    message: str,
    prefix: str = DEFAULT_PREFIX
) -> Optional[CommandInvocation]:
    """
    Parse a chat line into a CommandInvocation.

    The command token is matched case-insensitively; arguments keep the
    case they were typed with.

    Returns:
        The invocation, or None for non-commands and unknown commands
    """
    if not message or not message.startswith(prefix):
        return None

    tokens = message[len(prefix):].split()
    if not tokens:
        return None

    try:
        command = Command(tokens[0].lower())
    except ValueError:
        return None

    return CommandInvocation(
        command=command,
        args=tokens[1:],
        username=username,
        message=message.lower()
    )


def _parse_coordinate(token: str) -> Optional[float]:
    try:
        value = float(token)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _format_number(value: float) -> str:
    """10.0 -> '10', 10.5 -> '10.5'"""
    return str(int(value)) if value.is_integer() else str(value)


class CommandDispatcher:
    """
    Routes chat commands for one session.

    Args:
        context: Session state the handlers act on
        owner: Privileged username (empty disables owner-only commands)
        prefix: Command prefix character
    """

    def __init__(
        self,
        context: 'SessionContext',
        owner: str = "",
        prefix: str = DEFAULT_PREFIX
    ):
        self.context = context
        self.owner = owner.strip().lower()
        self.prefix = prefix

        self._handlers: Dict[Command, Callable[[CommandInvocation], None]] = {
            Command.HELP: self._handle_help,
            Command.PING: self._handle_ping,
            Command.POS: self._handle_pos,
            Command.FOLLOW: self._handle_follow,
            Command.STOP: self._handle_stop,
            Command.GOTO: self._handle_goto,
            Command.SAY: self._handle_say,
            Command.EAT: self._handle_eat,
            Command.EQUIP: self._handle_equip,
            Command.SHOP: self._handle_shop,
        }

        missing = [c.name for c in Command if c not in self._handlers]
        if missing:
            raise RuntimeError(f"No handler for commands: {', '.join(missing)}")

    def handle_chat(self, username: str, message: str) -> None:
        """Chat event entry point."""
        if not message:
            return

        logger.info(f"<{username}> {message}")

        if username == self.context.client.username:
            return

        invocation = parse_command(username, message, self.prefix)
        if invocation is None:
            return

        self.dispatch(invocation)

    def dispatch(self, invocation: CommandInvocation) -> bool:
        """
        Run an invocation if the speaker may use it.

        Returns:
            True if a handler ran
        """
        if not self.is_authorized(invocation.username, invocation.command):
            logger.debug(f"Dropped !{invocation.command.value} from {invocation.username}")
            return False

        self._handlers[invocation.command](invocation)
        return True

    def is_authorized(self, username: str, command: Command) -> bool:
        if command in PUBLIC_COMMANDS:
            return True
        if not self.owner:
            return False
        return username.lower() == self.owner

    def reply(self, message: str) -> None:
        self.context.client.send_chat(message)

    # Public commands

    def _handle_help(self, invocation: CommandInvocation) -> None:
        self.reply(HELP_TEXT)

    def _handle_ping(self, invocation: CommandInvocation) -> None:
        self.reply("pong")

    def _handle_pos(self, invocation: CommandInvocation) -> None:
        pos = self.context.client.get_position()
        if pos is None:
            return
        x, y, z = pos.floored()
        self.reply(f"pos: {x}, {y}, {z}")

    # Owner commands

    def _handle_follow(self, invocation: CommandInvocation) -> None:
        if not invocation.args:
            self.reply(f"Usage: {self.prefix}follow <player>")
            return

        target = invocation.args[0]
        player = self.context.client.get_player(target)
        if player is None or not player.visible:
            self.reply(f"I can't see {target}")
            return

        self.reply(f"Following {target}")
        self.context.follow.follow(target)

    def _handle_stop(self, invocation: CommandInvocation) -> None:
        self.reply("Stopping movement.")
        self.context.navigator.stop()
        self.context.follow.stop()

    def _handle_goto(self, invocation: CommandInvocation) -> None:
        if len(invocation.args) < 3:
            self.reply(f"Usage: {self.prefix}goto <x> <y> <z>")
            return

        # Every argument must be numeric, extras included
        coords = [_parse_coordinate(a) for a in invocation.args]
        if any(c is None for c in coords):
            self.reply("Invalid coordinates.")
            return

        x, y, z = coords[:3]
        self.reply(f"Going to {_format_number(x)} {_format_number(y)} {_format_number(z)}")
        self.context.navigator.move_to_block(x, y, z)

    def _handle_say(self, invocation: CommandInvocation) -> None:
        text = " ".join(invocation.args)
        if not text:
            self.reply(f"Usage: {self.prefix}say <msg>")
            return
        self.reply(text)

    def _handle_eat(self, invocation: CommandInvocation) -> None:
        try:
            self.context.inventory.eat()
        except ClientError as e:
            logger.warning(f"Eat failed: {e}")
            self.reply("Could not eat")
            return
        self.reply("Tried to eat")

    def _handle_equip(self, invocation: CommandInvocation) -> None:
        query = " ".join(invocation.args)
        if not query:
            self.reply(f"Usage: {self.prefix}equip <item>")
            return

        item = self.context.inventory.find_item(query)
        if item is None:
            self.reply("I do not have that item")
            return

        try:
            self.context.inventory.equip_to_hand(item)
        except ClientError as e:
            logger.warning(f"Equip failed: {e}")
            self.reply(f"Could not equip {item.name}")
            return
        self.reply(f"Equipped {item.name}")

    def _handle_shop(self, invocation: CommandInvocation) -> None:
        usage = f"Usage: {self.prefix}shop <buy/sell> <item> <amount>"
        args = invocation.args
        if len(args) < 2:
            self.reply(usage)
            return

        action, item = args[0].lower(), args[1]
        amount = 1
        if len(args) > 2:
            try:
                amount = int(args[2])
            except ValueError:
                amount = 0
            if amount < 1:
                self.reply(usage)
                return

        ledger = self.context.ledger
        ledger.touch(item)

        if action == "buy":
            total = ledger.buy(item, amount)
            self.reply(f"Bought {amount} {item}. Total: {total}")
        elif action == "sell":
            remaining = ledger.sell(item, amount)
            self.reply(f"Sold {amount} {item}. Remaining: {remaining}")
        else:
            self.reply("Unknown action. Use buy or sell")

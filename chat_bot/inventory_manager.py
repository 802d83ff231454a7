"""
inventory_manager.py - Item lookup, equipping and eating.
"""

import logging
from typing import Optional

from integration.mc_client import MinecraftClient, Item

logger = logging.getLogger(__name__)


class InventoryManager:
    """
    Inventory helpers for chat commands.

    Client failures are raised as ClientError so command handlers can
    turn them into a short chat reply.
    """

    HAND = "hand"

    def __init__(self, client: MinecraftClient):
        self.client = client

    def find_item(self, query: str) -> Optional[Item]:
        """
        Find the first inventory item whose name contains query.

        Matching is case-sensitive, in slot order.

        Args:
            query: Substring of the item name

        Returns:
            Matching item, or None
        """
        for item in self.client.get_inventory_items():
            if query in item.name:
                return item
        return None

    def equip_to_hand(self, item: Item) -> None:
        """Equip item into the main hand."""
        self.client.equip(item, self.HAND)

    def eat(self) -> None:
        """Trigger the auto-eat action once."""
        logger.info(f"Eating (food={self.client.get_food()})")
        self.client.eat()

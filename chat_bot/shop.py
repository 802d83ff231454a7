"""
shop.py - In-memory shop ledger.

Tracks a quantity per item name for the !shop command. Nothing is
persisted; a ledger lives as long as the session that owns it.
"""

import logging
from typing import Dict

logger = logging.getLogger(__name__)


class ShopLedger:
    """
    Item name -> non-negative quantity.

    Item names are case-sensitive as typed. Selling more than is held
    clamps the quantity at zero.
    """

    def __init__(self):
        self._stock: Dict[str, int] = {}

    def touch(self, item: str) -> int:
        """Create a zero entry for item if it does not exist yet."""
        return self._stock.setdefault(item, 0)

    def quantity(self, item: str) -> int:
        return self._stock.get(item, 0)

    def buy(self, item: str, amount: int = 1) -> int:
        """
        Add amount to item's quantity.

        Returns:
            The new quantity
        """
        self._check_amount(amount)
        self._stock[item] = self.touch(item) + amount
        logger.debug(f"Ledger buy {amount} {item} -> {self._stock[item]}")
        return self._stock[item]

    def sell(self, item: str, amount: int = 1) -> int:
        """
        Remove amount from item's quantity, never going below zero.

        Returns:
            The new quantity
        """
        self._check_amount(amount)
        self._stock[item] = max(self.touch(item) - amount, 0)
        logger.debug(f"Ledger sell {amount} {item} -> {self._stock[item]}")
        return self._stock[item]

    def snapshot(self) -> Dict[str, int]:
        return dict(self._stock)

    def __contains__(self, item: str) -> bool:
        return item in self._stock

    def __len__(self) -> int:
        return len(self._stock)

    @staticmethod
    def _check_amount(amount: int) -> None:
        if amount < 0:
            raise ValueError(f"amount must be non-negative, got {amount}")

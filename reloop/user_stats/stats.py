from __future__ import annotations
import json
from typing import Any, Dict, Tuple

from reloop.utils import normalize_address


class UserStats:
    """
    Running per-address activity totals.

    Every counter starts at zero and only ever grows.
    """

    _address: str
    #: Number of tokens minted
    tokens_minted: int
    #: Number of marketplace purchases
    tokens_bought: int
    #: Number of marketplace sales
    tokens_sold: int
    #: Total paid for purchases in wei
    total_spent: int
    #: Total received from sales in wei, excluding the cascade share
    total_earned: int
    #: Total received from profit cascades in wei
    profit_received: int

    def __init__(
        self,
        address: str,
        tokens_minted: int = 0,
        tokens_bought: int = 0,
        tokens_sold: int = 0,
        total_spent: int = 0,
        total_earned: int = 0,
        profit_received: int = 0,
    ):
        self.address = address
        self.tokens_minted = tokens_minted
        self.tokens_bought = tokens_bought
        self.tokens_sold = tokens_sold
        self.total_spent = total_spent
        self.total_earned = total_earned
        self.profit_received = profit_received

    @property
    def address(self) -> str:
        """
        User address, lowercase
        """
        return self._address

    @address.setter
    def address(self, val: str):
        self._address = normalize_address(val)

    @staticmethod
    def from_row(row: Tuple[str, int, int, int, str, str, str]) -> UserStats:
        """
        Deserialize from database row

        Args:
            row: database row
        """
        address, minted, bought, sold, spent, earned, profit = row
        return UserStats(
            address, minted, bought, sold, int(spent), int(earned), int(profit)
        )

    def to_row(self) -> Tuple[str, int, int, int, str, str, str]:
        """
        Serialize to database row

        Returns:
            database row
        """
        return (
            self.address,
            self.tokens_minted,
            self.tokens_bought,
            self.tokens_sold,
            str(self.total_spent),
            str(self.total_earned),
            str(self.profit_received),
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert :class:`UserStats` to dict
        """
        return {
            "id": self.address,
            "tokensMinted": self.tokens_minted,
            "tokensBought": self.tokens_bought,
            "tokensSold": self.tokens_sold,
            "totalSpent": str(self.total_spent),
            "totalEarned": str(self.total_earned),
            "profitReceived": str(self.profit_received),
        }

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"UserStats({json.dumps(self.to_dict())})"

from __future__ import annotations
import json
from typing import Any, Dict, Tuple

from reloop.utils import normalize_address


class Sale:
    """
    Sale represents a completed marketplace purchase. Sales are immutable.
    """

    #: Unique id, ``{tx_hash}-{log_index}`` of the ``Sale`` event
    id: str
    #: Token id
    token_id: int
    _seller: str
    _buyer: str
    #: Price paid in wei
    price: int
    #: Part of the price that went to the profit cascade
    profit: int
    #: UNIX timestamp of the sale block
    timestamp: int
    #: Hash of the sale transaction
    tx_hash: str
    #: Number of the sale block
    block_number: int

    def __init__(
        self,
        id: str,
        token_id: int,
        seller: str,
        buyer: str,
        price: int,
        profit: int,
        timestamp: int,
        tx_hash: str,
        block_number: int,
    ):
        self.id = id
        self.token_id = token_id
        self.seller = seller
        self.buyer = buyer
        self.price = price
        self.profit = profit
        self.timestamp = timestamp
        self.tx_hash = tx_hash
        self.block_number = block_number

    @property
    def seller(self) -> str:
        """
        Seller address, lowercase
        """
        return self._seller

    @seller.setter
    def seller(self, val: str):
        self._seller = normalize_address(val)

    @property
    def buyer(self) -> str:
        """
        Buyer address, lowercase
        """
        return self._buyer

    @buyer.setter
    def buyer(self, val: str):
        self._buyer = normalize_address(val)

    @staticmethod
    def from_row(row: Tuple[str, str, str, str, str, str, int, str, int]) -> Sale:
        """
        Deserialize from database row

        Args:
            row: database row
        """
        id, token_id, seller, buyer, price, profit, timestamp, tx_hash, block = row
        return Sale(
            id,
            int(token_id),
            seller,
            buyer,
            int(price),
            int(profit),
            timestamp,
            tx_hash,
            block,
        )

    def to_row(self) -> Tuple[str, str, str, str, str, str, int, str, int]:
        """
        Serialize to database row

        Returns:
            database row
        """
        return (
            self.id,
            str(self.token_id),
            self.seller,
            self.buyer,
            str(self.price),
            str(self.profit),
            self.timestamp,
            self.tx_hash,
            self.block_number,
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert :class:`Sale` to dict
        """
        return {
            "id": self.id,
            "tokenId": str(self.token_id),
            "seller": self.seller,
            "buyer": self.buyer,
            "price": str(self.price),
            "profit": str(self.profit),
            "timestamp": str(self.timestamp),
            "txHash": self.tx_hash,
            "blockNumber": str(self.block_number),
        }

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"Sale({json.dumps(self.to_dict())})"

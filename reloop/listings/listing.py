from __future__ import annotations
import json
from typing import Any, Dict, Tuple

from reloop.utils import normalize_address


class Listing:
    """
    Listing represents the marketplace slot of a token.

    There's at most one listing per token. Relisting overwrites
    every field of the slot, delisting and selling clear :attr:`active`.
    """

    #: Token id
    token_id: int
    _seller: str
    #: Asking price in wei
    price: int
    #: ``True`` while the token is for sale
    active: bool
    #: UNIX timestamp of the listing block
    listed_at: int
    #: Hash of the listing transaction
    tx_hash: str

    def __init__(
        self,
        token_id: int,
        seller: str,
        price: int,
        active: bool,
        listed_at: int,
        tx_hash: str,
    ):
        self.token_id = token_id
        self.seller = seller
        self.price = price
        self.active = active
        self.listed_at = listed_at
        self.tx_hash = tx_hash

    @property
    def seller(self) -> str:
        """
        Seller address, lowercase
        """
        return self._seller

    @seller.setter
    def seller(self, val: str):
        self._seller = normalize_address(val)

    @staticmethod
    def from_row(row: Tuple[str, str, str, int, int, str]) -> Listing:
        """
        Deserialize from database row

        Args:
            row: database row
        """
        token_id, seller, price, active, listed_at, tx_hash = row
        return Listing(int(token_id), seller, int(price), bool(active), listed_at, tx_hash)

    def to_row(self) -> Tuple[str, str, str, int, int, str]:
        """
        Serialize to database row

        Returns:
            database row
        """
        return (
            str(self.token_id),
            self.seller,
            str(self.price),
            int(self.active),
            self.listed_at,
            self.tx_hash,
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert :class:`Listing` to dict
        """
        return {
            "id": str(self.token_id),
            "tokenId": str(self.token_id),
            "seller": self.seller,
            "price": str(self.price),
            "active": self.active,
            "listedAt": str(self.listed_at),
            "txHash": self.tx_hash,
        }

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"Listing({json.dumps(self.to_dict())})"

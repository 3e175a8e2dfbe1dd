from __future__ import annotations
import json
from typing import Any, Dict, Tuple

from reloop.utils import normalize_address


class OwnerHistoryRecord:
    """
    One entry in the ownership chain of a token.

    The first entry is written at mint (with zero purchase price), the
    rest come from ``OwnerHistoryUpdated`` events. The chain is what the
    profit cascade pays out along.
    """

    #: Unique id, ``{tx_hash}-{log_index}`` of the source event
    id: str
    #: Token id
    token_id: int
    _owner: str
    #: Price the owner paid in wei (0 for the minter)
    purchase_price: int
    #: UNIX timestamp of the block
    timestamp: int
    #: Hash of the transaction
    tx_hash: str
    #: Number of the block
    block_number: int
    #: Log index of the source event
    log_index: int

    def __init__(
        self,
        id: str,
        token_id: int,
        owner: str,
        purchase_price: int,
        timestamp: int,
        tx_hash: str,
        block_number: int,
        log_index: int,
    ):
        self.id = id
        self.token_id = token_id
        self.owner = owner
        self.purchase_price = purchase_price
        self.timestamp = timestamp
        self.tx_hash = tx_hash
        self.block_number = block_number
        self.log_index = log_index

    @property
    def owner(self) -> str:
        """
        Owner address, lowercase
        """
        return self._owner

    @owner.setter
    def owner(self, val: str):
        self._owner = normalize_address(val)

    @staticmethod
    def from_row(row: Tuple[str, str, str, str, int, str, int, int]) -> OwnerHistoryRecord:
        """
        Deserialize from database row

        Args:
            row: database row
        """
        id, token_id, owner, price, timestamp, tx_hash, block_number, log_index = row
        return OwnerHistoryRecord(
            id, int(token_id), owner, int(price), timestamp, tx_hash, block_number, log_index
        )

    def to_row(self) -> Tuple[str, str, str, str, int, str, int, int]:
        """
        Serialize to database row

        Returns:
            database row
        """
        return (
            self.id,
            str(self.token_id),
            self.owner,
            str(self.purchase_price),
            self.timestamp,
            self.tx_hash,
            self.block_number,
            self.log_index,
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert :class:`OwnerHistoryRecord` to dict
        """
        return {
            "id": self.id,
            "tokenId": str(self.token_id),
            "owner": self.owner,
            "purchasePrice": str(self.purchase_price),
            "timestamp": str(self.timestamp),
            "txHash": self.tx_hash,
            "blockNumber": str(self.block_number),
            "logIndex": self.log_index,
        }

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"OwnerHistoryRecord({json.dumps(self.to_dict())})"

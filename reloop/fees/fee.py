from __future__ import annotations
import json
from typing import Any, Dict, Tuple


class PlatformFeeRecord:
    """
    Marketplace fee collected on a sale
    """

    #: Unique id, ``{tx_hash}-{log_index}`` of the event
    id: str
    #: Token id
    token_id: int
    #: Fee in wei
    amount: int
    #: UNIX timestamp of the block
    timestamp: int
    #: Hash of the transaction
    tx_hash: str

    def __init__(self, id: str, token_id: int, amount: int, timestamp: int, tx_hash: str):
        self.id = id
        self.token_id = token_id
        self.amount = amount
        self.timestamp = timestamp
        self.tx_hash = tx_hash

    @staticmethod
    def from_row(row: Tuple[str, str, str, int, str]) -> PlatformFeeRecord:
        id, token_id, amount, timestamp, tx_hash = row
        return PlatformFeeRecord(id, int(token_id), int(amount), timestamp, tx_hash)

    def to_row(self) -> Tuple[str, str, str, int, str]:
        return (self.id, str(self.token_id), str(self.amount), self.timestamp, self.tx_hash)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "tokenId": str(self.token_id),
            "amount": str(self.amount),
            "timestamp": str(self.timestamp),
            "txHash": self.tx_hash,
        }

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"PlatformFeeRecord({json.dumps(self.to_dict())})"

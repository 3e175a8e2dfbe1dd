from __future__ import annotations
import json
from typing import Any, Dict, Tuple

from reloop.utils import normalize_address


class ProfitDistribution:
    """
    A single cascade payment to a prior owner of a token
    """

    #: Unique id, ``{tx_hash}-{log_index}`` of the event
    id: str
    #: Token id
    token_id: int
    #: Id of the :class:`reloop.sales.Sale` that triggered the payment, if known
    sale_id: str | None
    _recipient: str
    #: Amount paid in wei
    amount: int
    #: 0 for the most recent prior owner, 1 for the one before, etc.
    generation: int
    #: UNIX timestamp of the block
    timestamp: int
    #: Hash of the transaction
    tx_hash: str

    def __init__(
        self,
        id: str,
        token_id: int,
        sale_id: str | None,
        recipient: str,
        amount: int,
        generation: int,
        timestamp: int,
        tx_hash: str,
    ):
        self.id = id
        self.token_id = token_id
        self.sale_id = sale_id
        self.recipient = recipient
        self.amount = amount
        self.generation = generation
        self.timestamp = timestamp
        self.tx_hash = tx_hash

    @property
    def recipient(self) -> str:
        """
        Recipient address, lowercase
        """
        return self._recipient

    @recipient.setter
    def recipient(self, val: str):
        self._recipient = normalize_address(val)

    @staticmethod
    def from_row(
        row: Tuple[str, str, str | None, str, str, int, int, str]
    ) -> ProfitDistribution:
        """
        Deserialize from database row

        Args:
            row: database row
        """
        id, token_id, sale_id, recipient, amount, generation, timestamp, tx_hash = row
        return ProfitDistribution(
            id, int(token_id), sale_id, recipient, int(amount), generation, timestamp, tx_hash
        )

    def to_row(self) -> Tuple[str, str, str | None, str, str, int, int, str]:
        """
        Serialize to database row

        Returns:
            database row
        """
        return (
            self.id,
            str(self.token_id),
            self.sale_id,
            self.recipient,
            str(self.amount),
            self.generation,
            self.timestamp,
            self.tx_hash,
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert :class:`ProfitDistribution` to dict
        """
        return {
            "id": self.id,
            "tokenId": str(self.token_id),
            "saleId": self.sale_id,
            "recipient": self.recipient,
            "amount": str(self.amount),
            "generation": self.generation,
            "timestamp": str(self.timestamp),
            "txHash": self.tx_hash,
        }

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"ProfitDistribution({json.dumps(self.to_dict())})"

from __future__ import annotations
from typing import Any, Dict, Tuple
import json

from reloop.utils import Web3JsonEncoder, normalize_address


class Event:
    """
    Event represents a decoded event log of the ReLoop contracts.
    """

    #: Ethereum chain_id
    chain_id: int
    #: Block number of the log
    block_number: int
    #: UNIX timestamp of the block
    block_timestamp: int
    #: Hash of the emitting transaction, lowercase
    transaction_hash: str
    #: Position of the log inside its block
    log_index: int
    _address: str
    #: Event name, e.g. ``TokenMinted``
    event: str
    #: Decoded event arguments
    args: Dict[str, Any]

    def __init__(
        self,
        chain_id: int,
        block_number: int,
        block_timestamp: int,
        transaction_hash: str,
        log_index: int,
        address: str,
        event: str,
        args: Dict[str, Any],
    ):
        self.chain_id = chain_id
        self.block_number = block_number
        self.block_timestamp = block_timestamp
        self.transaction_hash = transaction_hash
        self.log_index = log_index
        self.address = address
        self.event = event
        self.args = args

    @property
    def position(self) -> Tuple[int, int]:
        """
        Chain order of the event: ``(block_number, log_index)``
        """
        return (self.block_number, self.log_index)

    @property
    def uid(self) -> str:
        """
        Unique id of the event (``{transaction_hash}-{log_index}``)
        used as natural key of immutable records
        """
        return f"{self.transaction_hash}-{self.log_index}"

    @property
    def address(self) -> str:
        """
        Emitting contract, lowercase
        """
        return self._address

    @address.setter
    def address(self, val: str):
        self._address = normalize_address(val)

    @property
    def transaction_hash(self) -> str:
        """
        Lowercase hex transaction hash
        """
        return self._transaction_hash

    @transaction_hash.setter
    def transaction_hash(self, val: str):
        self._transaction_hash = val.lower()

    @staticmethod
    def from_row(row: Tuple[int, int, int, str, int, str, str, str]) -> Event:
        *head, args = row
        return Event(*head, json.loads(args))

    def to_row(self) -> Tuple[int, int, int, str, int, str, str, str]:
        """
        Database row, ``args`` stored as JSON text
        """
        return (
            self.chain_id,
            self.block_number,
            self.block_timestamp,
            self.transaction_hash,
            self.log_index,
            self.address,
            self.event,
            json.dumps(self.args, cls=Web3JsonEncoder),
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert :class:`Event` to dict
        """
        return {
            "chainId": self.chain_id,
            "blockNumber": self.block_number,
            "blockTimestamp": self.block_timestamp,
            "transactionHash": self.transaction_hash,
            "logIndex": self.log_index,
            "address": self.address,
            "event": self.event,
            "args": self.args,
        }

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"Event({json.dumps(self.to_dict(), cls=Web3JsonEncoder)})"

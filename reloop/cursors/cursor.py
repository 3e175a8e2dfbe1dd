from __future__ import annotations
import json
from typing import Any, Dict, Tuple

FETCHER_CURSOR = "fetcher"
PROJECTOR_CURSOR = "projector"


class Cursor:
    """
    A named position in the event stream of a chain
    """

    #: Ethereum chain_id
    chain_id: int
    #: Cursor name
    name: str
    #: Block number of the position
    block_number: int
    #: Log index inside the block
    log_index: int

    def __init__(self, chain_id: int, name: str, block_number: int, log_index: int):
        self.chain_id = chain_id
        self.name = name
        self.block_number = block_number
        self.log_index = log_index

    @property
    def position(self) -> Tuple[int, int]:
        """
        ``(block_number, log_index)`` tuple, comparable with
        :attr:`reloop.events.Event.position`
        """
        return (self.block_number, self.log_index)

    @staticmethod
    def from_row(row: Tuple[int, str, int, int]) -> Cursor:
        """
        Deserialize from database row

        Args:
            row: database row
        """
        return Cursor(*row)

    def to_row(self) -> Tuple[int, str, int, int]:
        """
        Serialize to database row

        Returns:
            database row
        """
        return (self.chain_id, self.name, self.block_number, self.log_index)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert :class:`Cursor` to dict
        """
        return {
            "chainId": self.chain_id,
            "name": self.name,
            "blockNumber": self.block_number,
            "logIndex": self.log_index,
        }

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"Cursor({json.dumps(self.to_dict())})"

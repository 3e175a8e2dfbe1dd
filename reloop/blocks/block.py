from __future__ import annotations
from typing import Any, Mapping, Tuple


class Block:
    """
    Block number to timestamp pair, the only block data the indexer needs.
    """

    #: Ethereum chain_id
    chain_id: int
    #: Block number
    number: int
    #: UNIX timestamp of the block
    timestamp: int

    def __init__(self, chain_id: int, number: int, timestamp: int):
        self.chain_id = chain_id
        self.number = number
        self.timestamp = timestamp

    @staticmethod
    def from_rpc(chain_id: int, raw: Mapping[str, Any]) -> Block:
        """
        Build from an ``eth_getBlockByNumber`` response
        """
        return Block(chain_id, int(raw["number"]), int(raw["timestamp"]))

    @staticmethod
    def from_row(row: Tuple[int, int, int]) -> Block:
        return Block(*row)

    def to_row(self) -> Tuple[int, int, int]:
        return (self.chain_id, self.number, self.timestamp)

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"Block(chain_id={self.chain_id}, number={self.number}, timestamp={self.timestamp})"

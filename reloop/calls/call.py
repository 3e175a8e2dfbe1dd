from __future__ import annotations
from typing import Tuple

from reloop.utils import normalize_address


class Call:
    """
    Decoded result of a read-only contract call pinned to a block.

    Only reads at a fixed block are stored: their result can't change,
    while a read at ``latest`` can.
    """

    #: Ethereum chain_id
    chain_id: int
    #: Contract address, lowercase
    address: str
    #: ``0x`` calldata (selector + encoded args), lowercase
    calldata: str
    #: The block the call was made at
    block_number: int
    #: Decoded string result (e.g. a token URI)
    response: str

    def __init__(
        self,
        chain_id: int,
        address: str,
        calldata: str,
        block_number: int,
        response: str,
    ):
        self.chain_id = chain_id
        self.address = normalize_address(address)
        self.calldata = calldata.lower()
        self.block_number = block_number
        self.response = response

    @staticmethod
    def from_row(row: Tuple[int, str, str, int, str]) -> Call:
        return Call(*row)

    def to_row(self) -> Tuple[int, str, str, int, str]:
        return (
            self.chain_id,
            self.address,
            self.calldata,
            self.block_number,
            self.response,
        )

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return (
            f"Call({self.address} {self.calldata[:10]} "
            f"@{self.block_number} -> {self.response!r})"
        )

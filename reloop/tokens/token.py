from __future__ import annotations
import json
from typing import Any, Dict, List, Tuple

from reloop.utils import ipfs_to_http, normalize_address


class Token:
    """
    Token represents a minted ReLoop NFT (a tokenized vehicle).

    The token is created once, on ``TokenMinted``. Only the :attr:`owner`
    (on transfers) and :attr:`token_uri` (on metadata repair) change later.
    """

    #: Token id
    token_id: int
    _minter: str
    _owner: str
    #: Metadata URI, ``None`` if it couldn't be resolved at mint
    token_uri: str | None
    #: Number of prior owners sharing in resale profit
    depth: int
    #: Profit share of each generation in basis points
    profit_splits_bps: List[int]
    #: UNIX timestamp of the mint block
    minted_at: int
    #: Hash of the mint transaction
    mint_tx_hash: str

    def __init__(
        self,
        token_id: int,
        minter: str,
        owner: str,
        token_uri: str | None,
        depth: int,
        profit_splits_bps: List[int],
        minted_at: int,
        mint_tx_hash: str,
    ):
        self.token_id = token_id
        self.minter = minter
        self.owner = owner
        self.token_uri = token_uri
        self.depth = depth
        self.profit_splits_bps = profit_splits_bps
        self.minted_at = minted_at
        self.mint_tx_hash = mint_tx_hash

    @property
    def minter(self) -> str:
        """
        Address that minted the token, lowercase
        """
        return self._minter

    @minter.setter
    def minter(self, val: str):
        self._minter = normalize_address(val)

    @property
    def owner(self) -> str:
        """
        Current owner address, lowercase
        """
        return self._owner

    @owner.setter
    def owner(self, val: str):
        self._owner = normalize_address(val)

    @staticmethod
    def from_row(row: Tuple[str, str, str, str | None, int, str, int, str]) -> Token:
        """
        Deserialize from database row

        Args:
            row: database row
        """
        token_id, minter, owner, uri, depth, splits, minted_at, tx_hash = row
        return Token(
            int(token_id), minter, owner, uri, depth, json.loads(splits), minted_at, tx_hash
        )

    def to_row(self) -> Tuple[str, str, str, str | None, int, str, int, str]:
        """
        Serialize to database row

        Returns:
            database row
        """
        return (
            str(self.token_id),
            self.minter,
            self.owner,
            self.token_uri,
            self.depth,
            json.dumps(self.profit_splits_bps),
            self.minted_at,
            self.mint_tx_hash,
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert :class:`Token` to dict
        """
        return {
            "id": str(self.token_id),
            "tokenId": str(self.token_id),
            "minter": self.minter,
            "owner": self.owner,
            "tokenUri": self.token_uri,
            "depth": self.depth,
            "profitSplitsBps": list(self.profit_splits_bps),
            "mintedAt": str(self.minted_at),
            "mintTxHash": self.mint_tx_hash,
        }

    def metadata_url(self, gateway: str) -> str | None:
        """
        Fetchable URL of the token metadata

        Args:
            gateway: IPFS HTTP gateway prefix
        """
        return ipfs_to_http(self.token_uri, gateway)

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"Token({json.dumps(self.to_dict())})"

from __future__ import annotations
import logging
from typing import Any
import backoff
from eth_abi import decode
from eth_abi.exceptions import DecodingError
from requests.exceptions import RequestException
from web3 import Web3
from web3.exceptions import ContractLogicError, Web3Exception

from reloop.calls.call import Call
from reloop.calls.repo import CallsRepo
from reloop.core import Core
from reloop.utils import calldata, short_address

logger = logging.getLogger(__name__)

TOKEN_URI_SIGNATURE = "tokenURI(uint256)"
DEFAULT_MAX_TRIES = 3
DEFAULT_MAX_TIME = 15

#: Errors worth retrying. Reverts are excluded with ``giveup``.
TRANSIENT_ERRORS = (RequestException, Web3Exception, TimeoutError, ConnectionError)


class CallsService(Core):
    """
    Reads ``tokenURI`` from the NFT contract.

    It's used to read the metadata URI of a freshly minted token.
    The read is best effort: it's retried with exponential backoff a bounded
    number of times and for a bounded time, and if it still fails
    the result is ``None``. Indexing never stalls on it.

    Successful reads at a fixed block are cached, so replaying
    events doesn't hit the RPC again.

    **Request/Response flow**

    ::

             +-----------+        +--------------+     +-----------+     +------+
             | Projector |        | CallsService |     | CallsRepo |     | Web3 |
             +-----------+        +--------------+     +-----------+     +------+
                   |                      |                  |              |
                   | token_uri(id, block) |                  |              |
                   |--------------------->|                  |              |
                   |                      | get              |              |
                   |                      |----------------->|              |
                   |                      |                  |              |
                   |                      | eth_call (miss, retried)        |
                   |                      |-------------------------------->|
                   |                      |                  |              |
                   |                      | save             |              |
                   |                      |----------------->|              |
                   |        uri | None    |                  |              |
                   |<---------------------|                  |              |

    Note:
        Saved responses are not committed here, the caller owns the transaction.

    Args:
        calls_repo: Cache of pinned reads
        max_tries: Maximum number of attempts per read
        max_time: Maximum total seconds spent on one read
        kwargs: Args for the :class:`reloop.core.Core`
    """

    _calls_repo: CallsRepo

    def __init__(
        self,
        calls_repo: CallsRepo,
        max_tries: int = DEFAULT_MAX_TRIES,
        max_time: float = DEFAULT_MAX_TIME,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._calls_repo = calls_repo
        self._call_with_retries = backoff.on_exception(
            backoff.expo,
            TRANSIENT_ERRORS,
            max_tries=max_tries,
            max_time=max_time,
            giveup=lambda e: isinstance(e, ContractLogicError),
            logger=logger,
            giveup_log_level=logging.INFO,
        )(self._call)

    @staticmethod
    def create(**kwargs) -> CallsService:
        return CallsService(CallsRepo(**kwargs), **kwargs)

    def token_uri(
        self, address: str, token_id: int, block_number: int | None = None
    ) -> str | None:
        """
        Read ``tokenURI(token_id)`` from the NFT contract.

        Args:
            address: NFT contract address
            token_id: Token id
            block_number: Read at this block, the latest block if ``None``
                          (latest reads are not cached)

        Returns:
            The metadata URI, ``None`` if the read failed or the contract
            doesn't support it
        """
        data = calldata(TOKEN_URI_SIGNATURE, ["uint256"], [token_id])
        if not block_number is None:
            cached = self._calls_repo.get(address, data, block_number)
            if not cached is None:
                return cached.response

        try:
            raw = self._call_with_retries(address, data, block_number)
            uri = decode(["string"], raw)[0]
        except (ContractLogicError, DecodingError) as e:
            logger.info(
                "tokenURI(%d) is not available at %s: %s",
                token_id,
                short_address(address),
                e,
            )
            return None
        except TRANSIENT_ERRORS as e:
            logger.warning(
                "Failed to fetch tokenURI(%d) from %s: %s",
                token_id,
                short_address(address),
                e,
            )
            return None

        if not block_number is None:
            self._calls_repo.save([Call(self.chain_id, address, data, block_number, uri)])
        return uri

    def _call(self, address: str, data: str, block_number: int | None) -> Any:
        return self.w3.eth.call(
            {"to": Web3.to_checksum_address(address), "data": data},
            block_identifier="latest" if block_number is None else block_number,
        )

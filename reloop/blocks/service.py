from __future__ import annotations

import logging
from typing import Dict, Iterable, List

from reloop.blocks.repo import BlocksRepo
from reloop.blocks.block import Block
from reloop.core import Core
from reloop.utils import print_progress

logger = logging.getLogger(__name__)


class BlocksService(Core):
    """
    Resolves block numbers to timestamps, asking the RPC for each block
    at most once.

    **Request/Response flow**

    ::

             +---------------+          +------------+     +------+
             | EventsService |          | BlocksRepo |     | Web3 |
             +---------------+          +------------+     +------+
                     |                        |                |
                     | find(numbers)          |                |
                     |----------------------->|                |
                     |                        |                |
                     | eth_getBlockByNumber (uncached only)    |
                     |---------------------------------------->|
                     |                        |                |
                     | save(fetched)          |                |
                     |----------------------->|                |
                     |                        |                |

    Note:
        Saved blocks are not committed here. They are committed
        together with the events that referenced them.

    Args:
        blocks_repo: An instance of :class:`reloop.blocks.BlocksRepo`
        kwargs: Args for the :class:`reloop.core.Core`
    """

    _blocks_repo: BlocksRepo

    def __init__(self, blocks_repo: BlocksRepo, **kwargs):
        super().__init__(**kwargs)
        self._blocks_repo = blocks_repo

    @staticmethod
    def create(**kwargs) -> BlocksService:
        """
        Build the service and its repo from :class:`reloop.core.Core` args
        """
        return BlocksService(BlocksRepo(**kwargs), **kwargs)

    @property
    def latest_block_number(self) -> int:
        """
        Latest block number from the RPC (not cached)
        """
        return self.w3.eth.block_number

    def get_blocks(self, numbers: int | Iterable[int]) -> List[Block]:
        """
        Blocks for ``numbers``, sorted and without duplicates.
        Missing ones are fetched and cached.
        """
        wanted = {numbers} if isinstance(numbers, int) else set(numbers)
        found = {b.number: b for b in self._blocks_repo.find(wanted)}
        missing = sorted(wanted - found.keys())

        label = f"Fetching {len(missing)} blocks"
        for i, number in enumerate(missing):
            print_progress(i, len(missing), label)
            found[number] = Block.from_rpc(
                self.chain_id, self.w3.eth.get_block(number)
            )
        if missing:
            print_progress(len(missing), len(missing), label)
            logger.debug("Fetched %d blocks from rpc", len(missing))
            self._blocks_repo.save([found[n] for n in missing])

        return [found[n] for n in sorted(found)]

    def get_timestamps(self, numbers: Iterable[int]) -> Dict[int, int]:
        """
        Map of block number to UNIX timestamp
        """
        return {b.number: b.timestamp for b in self.get_blocks(numbers)}

    def clear_cache(self):
        """
        Delete all cached entries
        """
        self._blocks_repo.purge()
        self._blocks_repo.commit()

"""
Module for fetching and caching block timestamps from web3.

Event logs don't carry the time they happened at, only the block number.
:class:`BlocksService` resolves block numbers to timestamps and stores them
so that each block is requested from the RPC at most once.

Example:
    ::

        from reloop.blocks import BlocksService

        service = BlocksService.create()
        service.get_timestamps([33427584, 33427590])
        # => {33427584: 1718000000, 33427590: 1718000012}
"""

from reloop.blocks.block import Block
from reloop.blocks.repo import BlocksRepo
from reloop.blocks.service import BlocksService

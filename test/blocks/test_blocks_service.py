from typing import List
from hypothesis import HealthCheck, given, settings
from hypothesis.strategies import integers, lists

from reloop.blocks import Block, BlocksService
from fixtures.w3 import CHAIN_ID, START_BLOCK, LATEST_BLOCK, Web3Mock, block_timestamp


@settings(suppress_health_check=[HealthCheck.function_scoped_fixture], deadline=None)
@given(numbers=lists(integers(START_BLOCK, LATEST_BLOCK), max_size=20))
def test_blocks_service_cache(
    numbers: List[int], blocks_service: BlocksService, w3_mock: Web3Mock
):
    try:
        blocks = blocks_service.get_blocks(numbers)
        assert [b.number for b in blocks] == sorted(set(numbers))
        assert w3_mock.number_of_blocks == len(set(numbers))
        assert blocks_service.get_blocks(numbers) == blocks
        assert w3_mock.number_of_blocks == len(set(numbers))
    finally:
        blocks_service.clear_cache()
        w3_mock.number_of_blocks = 0


def test_blocks_service_timestamps(blocks_service: BlocksService):
    assert blocks_service.get_timestamps([START_BLOCK, START_BLOCK + 5]) == {
        START_BLOCK: block_timestamp(START_BLOCK),
        START_BLOCK + 5: block_timestamp(START_BLOCK + 5),
    }
    assert blocks_service.get_blocks(START_BLOCK) == [
        Block(CHAIN_ID, START_BLOCK, block_timestamp(START_BLOCK))
    ]


def test_blocks_service_latest(blocks_service: BlocksService):
    assert blocks_service.latest_block_number == LATEST_BLOCK

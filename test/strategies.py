from string import ascii_letters, digits
from hypothesis.strategies import (
    SearchStrategy,
    binary,
    builds,
    dictionaries,
    integers,
    just,
    lists,
    none,
    one_of,
    sampled_from,
    text,
)
from web3 import Web3

from reloop.events.event import Event
from reloop.tokens.token import Token

UINT256 = integers(0, 2**256 - 1)


def address() -> SearchStrategy[str]:
    return binary(min_size=20, max_size=20).map(Web3.to_checksum_address)


def tx_hash() -> SearchStrategy[str]:
    return binary(min_size=32, max_size=32).map(lambda b: Web3.to_hex(b))


def event() -> SearchStrategy[Event]:
    return builds(
        Event,
        just(5003),
        integers(0, 100_000_000),
        integers(1_600_000_000, 1_900_000_000),
        tx_hash(),
        integers(0, 1000),
        address(),
        sampled_from(["TokenMinted", "Transfer", "Listed", "Sale"]),
        dictionaries(text(min_size=1, max_size=10), one_of(UINT256, address())),
    )


def token() -> SearchStrategy[Token]:
    return integers(0, 5).flatmap(
        lambda depth: builds(
            Token,
            UINT256,
            address(),
            address(),
            one_of(none(), text(ascii_letters + digits + ":/", max_size=60)),
            just(depth),
            lists(integers(0, 10_000), min_size=depth, max_size=depth),
            integers(1_600_000_000, 1_900_000_000),
            tx_hash(),
        )
    )

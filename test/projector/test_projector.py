from typing import Any, Dict, List
import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis.strategies import integers, lists, sampled_from, tuples

from reloop.events import Event
from reloop.exceptions import InvalidEventError
from reloop.projector import Projector
from reloop.user_stats import UserStats
from reloop.utils import ZERO_ADDRESS
from fixtures.w3 import Web3Mock, block_timestamp, make_event, make_log, tx_hash

A = "0x00000000000000000000000000000000000000aA"
B = "0x00000000000000000000000000000000000000Bb"
C = "0x00000000000000000000000000000000000000cc"
URI = "ipfs://QmToken7"
SALE_TX = tx_hash(42)

TABLES = [
    "tokens",
    "listings",
    "sales",
    "owner_history",
    "profit_distributions",
    "platform_fees",
    "user_stats",
]


def round_trip() -> List[Event]:
    return [
        make_event(
            "TokenMinted",
            {"tokenId": 7, "minter": A, "depth": 2, "profitSplitsBps": [500, 300]},
            1010,
            0,
        ),
        make_event("Listed", {"tokenId": 7, "seller": A, "price": 1000}, 1020, 0),
        make_event(
            "Sale",
            {"tokenId": 7, "seller": A, "buyer": B, "price": 1000, "profit": 80},
            1030,
            1,
            SALE_TX,
        ),
        make_event(
            "ProfitDistributed",
            {"tokenId": 7, "recipient": A, "amount": 50, "generation": 0},
            1030,
            2,
            SALE_TX,
        ),
    ]


def dump(projector: Projector) -> Dict[str, List[Any]]:
    conn = projector.tokens_repo.conn
    return {t: sorted(conn.execute(f"SELECT * FROM {t}").fetchall()) for t in TABLES}


def test_projector_round_trip(projector: Projector, w3_mock: Web3Mock):
    w3_mock.token_uris[7] = URI
    assert projector.process(round_trip()) == 4

    token = projector.tokens_repo.get(7)
    assert token.owner == B.lower()
    assert token.token_uri == URI
    assert token.profit_splits_bps == [500, 300]
    assert not projector.listings_repo.get(7).active

    sales = projector.sales_repo.find_by_token(7)
    assert len(sales) == 1
    assert (sales[0].price, sales[0].profit) == (1000, 80)

    seller = projector.user_stats_repo.get(A)
    assert seller.tokens_minted == 1
    assert seller.tokens_sold == 1
    assert seller.total_earned == 920
    assert seller.profit_received == 50
    buyer = projector.user_stats_repo.get(B)
    assert buyer.tokens_bought == 1
    assert buyer.total_spent == 1000

    distributions = projector.profits_repo.find_by_token(7)
    assert distributions[0].sale_id == sales[0].id


def test_projector_links_distribution_before_sale(projector: Projector):
    mint, listed, sale, distributed = round_trip()
    distributed.log_index, sale.log_index = 1, 2
    projector.process([mint, listed, distributed, sale])
    assert projector.profits_repo.find_by_token(7)[0].sale_id == f"{SALE_TX}-2"


def test_projector_replay_is_noop(projector: Projector):
    events = round_trip()
    projector.process(events)
    state = dump(projector)
    for event in events:
        projector.apply(event)
    assert dump(projector) == state


def test_projector_replay_keeps_sale_owner(projector: Projector):
    mint, listed, sale, distributed = round_trip()
    transfer = make_event("Transfer", {"from": A, "to": C, "tokenId": 7}, 1015, 0)
    events = [mint, transfer, listed, sale, distributed]
    projector.process(events)
    state = dump(projector)
    assert projector.tokens_repo.get(7).owner == B.lower()

    for event in events:
        projector.apply(event)
    assert dump(projector) == state
    assert projector.tokens_repo.get(7).owner == B.lower()


def test_projector_process_skips_applied_events(projector: Projector):
    events = round_trip()
    assert projector.process(events[:2]) == 2
    assert projector.process(events) == 2
    assert projector.process(events) == 0
    assert projector.position == events[-1].position


def test_projector_mint_transfer_suppressed(projector: Projector):
    mint = round_trip()[0]
    transfer = make_event("Transfer", {"from": ZERO_ADDRESS, "to": A, "tokenId": 7}, 1010, 1)
    projector.process([mint, transfer])
    assert len(projector.owner_history_repo.find_by_token(7)) == 1
    assert projector.user_stats_repo.get(A) == UserStats(A, tokens_minted=1)


def test_projector_transfer_moves_owner_only(projector: Projector):
    mint = round_trip()[0]
    transfer = make_event("Transfer", {"from": A, "to": C, "tokenId": 7}, 1011, 0)
    projector.process([mint, transfer])
    assert projector.tokens_repo.get(7).owner == C
    assert len(projector.owner_history_repo.find_by_token(7)) == 1
    assert projector.user_stats_repo.get(C) is None


def test_projector_owner_history(projector: Projector):
    mint = round_trip()[0]
    updated = make_event(
        "OwnerHistoryUpdated", {"tokenId": 7, "newOwner": B, "purchasePrice": 1000}, 1030, 0
    )
    projector.process([mint, updated])
    projector.apply(updated)
    history = projector.owner_history_repo.find_by_token(7)
    assert [(r.owner, r.purchase_price) for r in history] == [(B.lower(), 1000), (A.lower(), 0)]
    assert history[1].id == mint.uid


def test_projector_delist_and_relist(projector: Projector):
    listed = make_event("Listed", {"tokenId": 7, "seller": A, "price": 1000}, 1020, 0)
    delisted = make_event("Delisted", {"tokenId": 7}, 1021, 0)
    relisted = make_event("Listed", {"tokenId": 7, "seller": A, "price": 900}, 1022, 0)
    projector.process([make_event("Delisted", {"tokenId": 8}, 1019, 0), listed, delisted])
    assert not projector.listings_repo.get(7).active
    assert projector.listings_repo.get(8) is None
    projector.process([relisted])
    listing = projector.listings_repo.get(7)
    assert listing.active and listing.price == 900
    assert listing.listed_at == block_timestamp(1022)


def test_projector_platform_fee(projector: Projector):
    fee = make_event("PlatformFeeCollected", {"tokenId": 7, "amount": 25}, 1030, 3)
    projector.process([fee])
    projector.apply(fee)
    assert [f.amount for f in projector.fees_repo.find_by_token(7)] == [25]
    assert projector.user_stats_repo.conn.execute("SELECT COUNT(*) FROM user_stats").fetchone()[0] == 0


def test_projector_metadata_failure_gives_null_uri(projector: Projector, w3_mock: Web3Mock):
    projector.process(round_trip()[:1])
    assert projector.tokens_repo.get(7).token_uri is None

    w3_mock.token_uris[7] = URI
    assert projector.repair_token_uris() == 1
    assert projector.tokens_repo.get(7).token_uri == URI


def test_projector_invalid_depth(projector: Projector):
    mint = make_event(
        "TokenMinted",
        {"tokenId": 7, "minter": A, "depth": 3, "profitSplitsBps": [500, 300]},
        1010,
        0,
    )
    with pytest.raises(InvalidEventError):
        projector.apply(mint)
    assert projector.tokens_repo.get(7) is None
    assert projector.position is None


def test_projector_rollback_on_failure(projector: Projector):
    mint, listed, sale, _ = round_trip()
    projector.process([mint, listed])
    state = dump(projector)

    def broken(*args, **kwargs):
        raise RuntimeError("disk I/O error")

    projector.profits_repo.link_sale = broken
    with pytest.raises(RuntimeError):
        projector.apply(sale)
    assert dump(projector) == state
    assert projector.position == listed.position

    del projector.profits_repo.link_sale
    assert projector.process([sale]) == 1
    assert projector.user_stats_repo.get(B).tokens_bought == 1


def test_projector_unknown_event_advances_cursor(projector: Projector):
    event = make_event("Listed", {}, 1050, 0)
    event.event = "Approval"
    projector.apply(event)
    assert projector.position == (1050, 0)


def test_projector_run_drains_event_log(projector: Projector, w3_mock: Web3Mock):
    w3_mock.logs = [
        make_log(
            "TokenMinted",
            {"tokenId": 7, "minter": A.lower(), "depth": 1, "profitSplitsBps": [500]},
            1010,
            0,
        ),
        make_log("Listed", {"tokenId": 7, "seller": A.lower(), "price": 10}, 1020, 0),
    ]
    projector.events_service.sync()
    assert projector.run() == 2
    assert projector.run() == 0
    assert projector.listings_repo.get(7).active


MARKET = [
    ("Listed", A),
    ("Listed", B),
    ("Delisted", None),
    ("Sale", B),
    ("Sale", C),
]


@settings(suppress_health_check=[HealthCheck.function_scoped_fixture], deadline=None)
@given(
    steps=lists(
        tuples(sampled_from(MARKET), integers(1, 3), integers(0, 10**21)),
        max_size=25,
    )
)
def test_projector_market_invariants(steps, projector: Projector):
    """
    Any sequence of listings, delistings and sales keeps at most one
    listing per token and never decreases user stats.
    """
    conn = projector.tokens_repo.conn
    try:
        previous: Dict[str, tuple] = {}
        for i, ((name, actor), token_id, price) in enumerate(steps):
            args: Dict[str, Any] = {"tokenId": token_id}
            if name == "Listed":
                args.update(seller=actor, price=price)
            if name == "Sale":
                args.update(seller=A, buyer=actor, price=price, profit=price // 10)
            projector.apply(make_event(name, args, 2000 + i, 0))

            counts = conn.execute(
                "SELECT COUNT(*) FROM listings WHERE active = 1 GROUP BY token_id"
            ).fetchall()
            assert all(c[0] <= 1 for c in counts)
            for stats in conn.execute("SELECT * FROM user_stats").fetchall():
                current = UserStats.from_row(stats)
                before = previous.get(current.address)
                values = current.to_row()[1:]
                if before is not None:
                    assert all(int(v) >= int(b) for v, b in zip(values, before))
                previous[current.address] = values
    finally:
        for table in TABLES + ["cursors"]:
            conn.execute(f"DELETE FROM {table}")
        conn.commit()


@settings(suppress_health_check=[HealthCheck.function_scoped_fixture], deadline=None)
@given(cuts=lists(integers(0, 4), max_size=4))
def test_projector_batching_independent(cuts, projector: Projector):
    conn = projector.tokens_repo.conn
    events = round_trip()
    try:
        projector.process(events)
        expected = dump(projector)
        for table in TABLES + ["cursors"]:
            conn.execute(f"DELETE FROM {table}")
        conn.commit()

        bounds = [0] + sorted(cuts) + [len(events)]
        for start, end in zip(bounds, bounds[1:]):
            projector.process(events[start:end])
        assert dump(projector) == expected
    finally:
        for table in TABLES + ["cursors"]:
            conn.execute(f"DELETE FROM {table}")
        conn.commit()

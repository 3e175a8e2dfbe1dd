import pytest

from reloop.projector import Projector
from reloop.query import QueryService
from fixtures.w3 import Web3Mock, make_event, tx_hash

A = "0x00000000000000000000000000000000000000aa"
B = "0x00000000000000000000000000000000000000bb"
SALE_TX = tx_hash(42)


@pytest.fixture
def indexed(projector: Projector, w3_mock: Web3Mock) -> Projector:
    w3_mock.token_uris[7] = "ipfs://QmToken7"
    projector.process(
        [
            make_event(
                "TokenMinted",
                {"tokenId": 7, "minter": A, "depth": 2, "profitSplitsBps": [500, 300]},
                1010,
                0,
            ),
            make_event(
                "TokenMinted",
                {"tokenId": 8, "minter": A, "depth": 0, "profitSplitsBps": []},
                1011,
                0,
            ),
            make_event("Listed", {"tokenId": 7, "seller": A, "price": 1000}, 1020, 0),
            make_event("Listed", {"tokenId": 8, "seller": A, "price": 2**80}, 1021, 0),
            make_event(
                "OwnerHistoryUpdated",
                {"tokenId": 7, "newOwner": B, "purchasePrice": 1000},
                1030,
                0,
                SALE_TX,
            ),
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
    )
    return projector


def test_query_list_tokens(indexed: Projector, query_service: QueryService):
    page = query_service.list_tokens()
    assert [t["tokenId"] for t in page["tokens"]] == ["8", "7"]
    assert (page["limit"], page["offset"]) == (20, 0)
    assert query_service.list_tokens(limit=1000)["limit"] == 100
    assert query_service.list_tokens(limit=1, offset=1)["tokens"][0]["id"] == "7"


def test_query_get_token(indexed: Projector, query_service: QueryService):
    detail = query_service.get_token(7)
    assert detail["token"]["owner"] == B
    assert detail["token"]["profitSplitsBps"] == [500, 300]
    assert detail["token"]["metadataUrl"] == "https://gateway.pinata.cloud/ipfs/QmToken7"
    assert detail["listing"] is None
    assert [r["owner"] for r in detail["ownerHistory"]] == [B, A]
    assert detail["sales"][0]["price"] == "1000"
    assert detail["sales"][0]["id"] == f"{SALE_TX}-1"

    assert query_service.get_token(8)["listing"]["price"] == str(2**80)
    assert query_service.get_token(9) is None


def test_query_listings(indexed: Projector, query_service: QueryService):
    listings = query_service.list_listings()["listings"]
    assert [l["tokenId"] for l in listings] == ["8"]
    assert query_service.get_listing(8)["listing"]["active"] is True
    assert query_service.get_listing(7) is None
    assert query_service.get_listing(9) is None


def test_query_sales(indexed: Projector, query_service: QueryService):
    sales = query_service.list_sales()["sales"]
    assert len(sales) == 1
    assert sales[0]["profit"] == "80"


def test_query_get_user(indexed: Projector, query_service: QueryService):
    user = query_service.get_user(A)
    assert user["stats"] == {
        "id": A,
        "tokensMinted": 2,
        "tokensBought": 0,
        "tokensSold": 1,
        "totalSpent": "0",
        "totalEarned": "920",
        "profitReceived": "50",
    }
    assert [t["tokenId"] for t in user["ownedTokens"]] == ["8"]
    assert [t["tokenId"] for t in user["mintedTokens"]] == ["8", "7"]
    assert user["recentProfits"][0]["saleId"] == f"{SALE_TX}-1"


def test_query_get_user_case_insensitive(indexed: Projector, query_service: QueryService):
    assert query_service.get_user(B.upper().replace("0X", "0x")) == query_service.get_user(B)


def test_query_get_user_unknown(query_service: QueryService):
    user = query_service.get_user("0x" + "c" * 40)
    assert user["stats"]["tokensMinted"] == 0
    assert user["stats"]["totalSpent"] == "0"
    assert user["ownedTokens"] == [] and user["recentProfits"] == []


def test_query_get_token_profits(indexed: Projector, query_service: QueryService):
    profits = query_service.get_token_profits(7)["profits"]
    assert [(p["recipient"], p["amount"], p["generation"]) for p in profits] == [(A, "50", 0)]
    assert query_service.get_token_profits(8) == {"profits": []}
    assert query_service.get_token_profits(9) is None


def test_query_get_stats(indexed: Projector, query_service: QueryService):
    assert query_service.get_stats() == {
        "totalTokens": 2,
        "totalSales": 1,
        "activeListings": 1,
        "totalVolume": "1000",
        "totalProfitDistributed": "80",
    }

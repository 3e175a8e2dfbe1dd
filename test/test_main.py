import pytest

from reloop.__main__ import main, sync
from reloop.projector import Projector
from fixtures.w3 import Web3Mock, make_log

A = "0x00000000000000000000000000000000000000aa"


def test_sync_fetches_and_applies(projector: Projector, w3_mock: Web3Mock):
    w3_mock.logs = [
        make_log(
            "TokenMinted",
            {"tokenId": 1, "minter": A, "depth": 0, "profitSplitsBps": []},
            1100,
            0,
        )
    ]
    assert sync(projector) == 1
    assert sync(projector) == 0
    assert projector.tokens_repo.get(1).minter == A


def test_main_requires_command():
    with pytest.raises(SystemExit):
        main([])


def test_main_missing_rpc(monkeypatch: pytest.MonkeyPatch, db_path: str):
    monkeypatch.delenv("WEB3_PROVIDER_URI", raising=False)
    assert main(["--db", db_path, "sync"]) == 1

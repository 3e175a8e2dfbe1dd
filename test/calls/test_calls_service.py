import logging
from requests.exceptions import ConnectionError

from reloop.calls import CallsRepo, CallsService
from reloop.core import DEFAULT_RWA_ADDRESS
from fixtures.w3 import Web3Mock

URI = "ipfs://QmYwAPJzv5CZsnA625s3Xf2nemtYgPpHdWEz79ojWnPbdG"


def test_calls_service_token_uri_cached(calls_service: CallsService, w3_mock: Web3Mock):
    w3_mock.token_uris[7] = URI
    assert calls_service.token_uri(DEFAULT_RWA_ADDRESS, 7, 1200) == URI
    assert calls_service.token_uri(DEFAULT_RWA_ADDRESS, 7, 1200) == URI
    assert w3_mock.number_of_calls == 1


def test_calls_service_latest_not_cached(calls_service: CallsService, w3_mock: Web3Mock):
    w3_mock.token_uris[7] = URI
    assert calls_service.token_uri(DEFAULT_RWA_ADDRESS, 7) == URI
    assert calls_service.token_uri(DEFAULT_RWA_ADDRESS, 7) == URI
    assert w3_mock.number_of_calls == 2


def test_calls_service_revert_gives_none(
    calls_service: CallsService, calls_repo: CallsRepo, w3_mock: Web3Mock
):
    assert calls_service.token_uri(DEFAULT_RWA_ADDRESS, 8, 1200) is None
    assert w3_mock.number_of_calls == 1
    assert calls_repo.conn.execute("SELECT COUNT(*) FROM calls").fetchone()[0] == 0


def test_calls_service_transient_error_gives_none(
    calls_service: CallsService, w3_mock: Web3Mock
):
    w3_mock.token_uris[7] = URI
    w3_mock.call_error = ConnectionError("connection refused")
    assert calls_service.token_uri(DEFAULT_RWA_ADDRESS, 7, 1200) is None

    w3_mock.call_error = None
    assert calls_service.token_uri(DEFAULT_RWA_ADDRESS, 7, 1200) == URI


def test_calls_service_retries_transient_errors(calls_repo: CallsRepo, core_args, w3_mock: Web3Mock):
    service = CallsService(calls_repo, max_tries=3, max_time=5, **core_args)
    w3_mock.call_error = ConnectionError("connection refused")
    assert service.token_uri(DEFAULT_RWA_ADDRESS, 7, 1200) is None
    assert w3_mock.number_of_calls == 3


def test_calls_service_revert_logged_below_error(
    calls_service: CallsService, w3_mock: Web3Mock, caplog
):
    with caplog.at_level(logging.DEBUG, logger="reloop.calls.service"):
        assert calls_service.token_uri(DEFAULT_RWA_ADDRESS, 9, 1200) is None
    assert caplog.records
    assert all(r.levelno < logging.ERROR for r in caplog.records)

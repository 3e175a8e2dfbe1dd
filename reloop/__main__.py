"""
Command line interface of the indexer.

::

    python -m reloop sync              # fetch new events and apply them
    python -m reloop run               # keep syncing every few seconds
    python -m reloop serve             # start the HTTP API
    python -m reloop repair-uris       # retry unresolved token metadata URIs
"""

import argparse
import logging
import os
import sys
import time

import backoff
import uvicorn
from requests.exceptions import RequestException
from web3.exceptions import Web3Exception

from reloop.events.service import DEFAULT_CHUNK_SIZE
from reloop.exceptions import ReloopError
from reloop.projector import Projector

logger = logging.getLogger("reloop")

DEFAULT_INTERVAL = 5.0
DEFAULT_PORT = 42069


def sync(projector: Projector, to_block: int | None = None) -> int:
    """
    Fetch new events and apply them

    Returns:
        Number of applied events
    """
    projector.events_service.sync(to_block)
    return projector.run()


def run(projector: Projector, interval: float):
    """
    Sync forever, pausing ``interval`` seconds between rounds.
    RPC failures are retried with exponential backoff.
    """
    sync_with_retries = backoff.on_exception(
        backoff.expo,
        (RequestException, Web3Exception, RuntimeError),
        max_value=60,
        logger=logger,
    )(sync)
    while True:
        sync_with_retries(projector)
        time.sleep(interval)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="reloop", description="ReLoop marketplace indexer")
    parser.add_argument("--rpc", default=None, help="Ethereum RPC url (WEB3_PROVIDER_URI)")
    parser.add_argument("--db", dest="db_path", default=None, help="Database path (RELOOP_DB_PATH)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    sync_parser = sub.add_parser("sync", help="Fetch new events and apply them")
    sync_parser.add_argument("--to-block", type=int, default=None)
    sync_parser.add_argument("--chunk-size", type=int, default=DEFAULT_CHUNK_SIZE)

    run_parser = sub.add_parser("run", help="Keep syncing")
    run_parser.add_argument("--interval", type=float, default=DEFAULT_INTERVAL)
    run_parser.add_argument("--chunk-size", type=int, default=DEFAULT_CHUNK_SIZE)

    serve_parser = sub.add_parser("serve", help="Start the HTTP API")
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument("--port", type=int, default=DEFAULT_PORT)

    sub.add_parser("repair-uris", help="Retry unresolved token metadata URIs")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.command == "serve":
        if args.db_path:
            os.environ["RELOOP_DB_PATH"] = args.db_path
        uvicorn.run("reloop.api:app", host=args.host, port=args.port)
        return 0

    try:
        if args.command == "repair-uris":
            Projector.create(rpc=args.rpc, db_path=args.db_path).repair_token_uris()
            return 0

        projector = Projector.create(
            chunk_size=args.chunk_size, rpc=args.rpc, db_path=args.db_path
        )

        if args.command == "sync":
            applied = sync(projector, args.to_block)
            logger.info("Applied %d events", applied)
            return 0

        run(projector, args.interval)
        return 0
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 0
    except ReloopError as e:
        logger.error("%s", e)
        return 1
    except Exception as e:
        logger.exception("Indexing failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())

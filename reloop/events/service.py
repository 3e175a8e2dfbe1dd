from __future__ import annotations
import logging
from typing import Any, Dict, Iterator, List, Tuple
from requests.exceptions import ReadTimeout
from web3 import Web3
from web3.exceptions import Web3RPCError

from reloop.abi import event_abis
from reloop.blocks.service import BlocksService
from reloop.core import Core
from reloop.cursors.cursor import FETCHER_CURSOR
from reloop.cursors.repo import CursorsRepo
from reloop.events.decoder import EventDecoder
from reloop.events.event import Event
from reloop.events.repo import EventsRepo
from reloop.utils import print_progress, short_address, to_hex

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 10_000
PAGE_SIZE = 1000


class EventsService(Core):
    """
    Service for fetching ReLoop contract events.

    This service is the event source of the indexer. It fetches the logs
    of the NFT and marketplace contracts from web3, decodes them, stamps
    them with block timestamps, and appends them to the local event log.
    Consumers read the log in chain order after their own cursor.

    **Request/Response flow**

    ::

                   +---------------+              +-------+ +-------------+ +-------------+
                   | EventsService |              | Web3  | | CursorsRepo | | EventsRepo  |
                   +---------------+              +-------+ +-------------+ +-------------+
        -----------------  |                          |            |               |
        | Sync events    |-|                          |            |               |
        |----------------| |                          |            |               |
                           |                          |            |               |
                           | Read fetcher cursor      |            |               |
                           |-------------------------------------->|               |
                           |                          |            |               |
                           | Fetch logs by chunks     |            |               |
                           |------------------------->|            |               |
                           |                          |            |               |
                           | Store events, advance cursor (one commit per chunk)   |
                           |------------------------------------------------------>|
                           |                          |            |               |
                           |                          |            |               |

    Args:
        events_repo: Repo of events
        cursors_repo: Repo of cursors
        blocks_service: Service resolving block timestamps
        chunk_size: Initial number of blocks per ``eth_getLogs`` request
        kwargs: Args for the :class:`reloop.core.Core`
    """

    _events_repo: EventsRepo
    _cursors_repo: CursorsRepo
    _blocks_service: BlocksService
    _decoder: EventDecoder
    chunk_size: int

    def __init__(
        self,
        events_repo: EventsRepo,
        cursors_repo: CursorsRepo,
        blocks_service: BlocksService,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._events_repo = events_repo
        self._cursors_repo = cursors_repo
        self._blocks_service = blocks_service
        self._decoder = EventDecoder(event_abis())
        self.chunk_size = chunk_size

    @staticmethod
    def create(chunk_size: int = DEFAULT_CHUNK_SIZE, **kwargs) -> EventsService:
        """
        Create an instance of :class:`EventsService`

        Args:
            chunk_size: Initial number of blocks per ``eth_getLogs`` request
            kwargs: Args for the :class:`reloop.core.Core`

        Returns:
            An instance of :class:`EventsService`
        """
        events_repo = EventsRepo(**kwargs)
        cursors_repo = CursorsRepo(**kwargs)
        blocks_service = BlocksService.create(**kwargs)
        return EventsService(
            events_repo, cursors_repo, blocks_service, chunk_size=chunk_size, **kwargs
        )

    @property
    def fetched_block(self) -> int | None:
        """
        The last block whose logs are in the event log, ``None`` if nothing
        was fetched yet
        """
        cursor = self._cursors_repo.get(FETCHER_CURSOR)
        return None if cursor is None else cursor.block_number

    def sync(self, to_block: int | None = None) -> int:
        """
        Fetch all new events up to ``to_block`` and save them to the event log.

        Fetching resumes from the block after the last fetched one
        (or from :attr:`reloop.core.Core.start_block`).

        Args:
            to_block: Last block to fetch (inclusive), the latest block if ``None``

        Returns:
            Number of new events saved

        Exceptions:
            See :meth:`fetch_events`
        """
        if to_block is None:
            to_block = self._blocks_service.latest_block_number
        fetched = self.fetched_block
        from_block = self.start_block if fetched is None else fetched + 1
        if from_block > to_block:
            return 0
        return self.fetch_events(from_block, to_block + 1)

    def fetch_events(self, from_block: int, to_block: int) -> int:
        """
        Fetch events in a block range and save them to the event log.

        Args:
            from_block: fetch events from this block (inclusive)
            to_block: fetch events up to this block (non-inclusive)

        Returns:
            Number of events saved

        Exceptions:
            This method tries to fetch events by chunks of :attr:`chunk_size`
            blocks. More often than not, rpc endpoint will block large
            ranges and ask to use a narrower block interval for fetch.
            In this case, the interval is halved, and fetch is retried.
            This is repeated until success.

            However, if at some point the interval reaches zero,
            :class:`RuntimeError` is raised.
        """
        chunk_size = self.chunk_size
        prefix = (
            f"Fetching events@{short_address(self.rwa_address)} "
            f"({from_block} - {to_block})"
        )
        total = 0
        start = from_block
        while start < to_block:
            end = min(start + chunk_size, to_block)
            try:
                events = self._fetch_events_in_one_chunk(start, end)
            except (ValueError, ReadTimeout, Web3RPCError) as e:
                chunk_size //= 2
                if chunk_size == 0:
                    raise RuntimeError(
                        "Couldn't fetch data because minimum chunk size is reached"
                    ) from e
                logger.info(
                    "Fetching %d - %d failed (%s), retrying with chunk size %d",
                    start,
                    end,
                    e,
                    chunk_size,
                )
                continue
            self._events_repo.save(events)
            self._cursors_repo.advance(FETCHER_CURSOR, end - 1, 0)
            self._events_repo.commit()
            total += len(events)
            print_progress(end - from_block, to_block - from_block, prefix=prefix)
            start = end
        logger.info("Fetched %d events from blocks %d - %d", total, from_block, to_block)
        return total

    def events_after(self, position: Tuple[int, int] | None = None) -> Iterator[Event]:
        """
        Iterate over stored events strictly after ``position``, in chain order
        (ascending block number, then ascending log index).

        The iterator reads the event log page by page, so it's safe to write
        to the database while iterating.

        Args:
            position: ``(block_number, log_index)``, ``None`` to start from the beginning

        Returns:
            Iterator over events
        """
        while True:
            page = self._events_repo.find_after(position, limit=PAGE_SIZE)
            for event in page:
                yield event
            if len(page) < PAGE_SIZE:
                return
            position = page[-1].position

    def clear_cache(self):
        """
        Delete all fetched events and the fetcher cursor
        """
        self._events_repo.purge()
        self._events_repo.conn.execute(
            "DELETE FROM cursors WHERE name = ?", (FETCHER_CURSOR,)
        )
        self._events_repo.commit()

    def _fetch_events_in_one_chunk(self, from_block: int, to_block: int) -> List[Event]:
        logs = self.w3.eth.get_logs(
            {
                "address": [
                    Web3.to_checksum_address(self.rwa_address),
                    Web3.to_checksum_address(self.marketplace_address),
                ],
                "fromBlock": from_block,
                "toBlock": to_block - 1,
            }
        )
        decoded: List[Tuple[Dict[str, Any], str, Dict[str, Any]]] = []
        for log in logs:
            result = self._decoder.decode(log)
            if result is None:
                continue
            name, args = result
            decoded.append((log, name, args))
        timestamps = self._blocks_service.get_timestamps(
            list({int(log["blockNumber"]) for log, _, _ in decoded})
        )
        events = [
            Event(
                chain_id=self.chain_id,
                block_number=int(log["blockNumber"]),
                block_timestamp=timestamps[int(log["blockNumber"])],
                transaction_hash=to_hex(log["transactionHash"]),
                log_index=int(log["logIndex"]),
                address=log["address"],
                event=name,
                args=args,
            )
            for log, name, args in decoded
        ]
        return sorted(events, key=lambda e: e.position)

from __future__ import annotations
import logging
from typing import Iterable, Tuple

from reloop.calls.service import CallsService
from reloop.core import Core
from reloop.cursors.cursor import PROJECTOR_CURSOR
from reloop.cursors.repo import CursorsRepo
from reloop.events.event import Event
from reloop.events.service import DEFAULT_CHUNK_SIZE, EventsService
from reloop.fees.repo import PlatformFeesRepo
from reloop.listings.repo import ListingsRepo
from reloop.owner_history.repo import OwnerHistoryRepo
from reloop.profits.repo import ProfitDistributionsRepo
from reloop.projector.handlers import HANDLERS
from reloop.sales.repo import SalesRepo
from reloop.tokens.repo import TokensRepo
from reloop.user_stats.repo import UserStatsRepo

logger = logging.getLogger(__name__)


class Projector(Core):
    """
    Applies events from the event log to the derived tables.

    The projector is the only writer of the derived tables. Events are
    applied one by one in chain order. Each event is one database
    transaction: the handler's changes and the projector cursor advance
    are committed together or not at all. So after a crash (or an
    exception in a handler) the projector resumes right after the last
    committed event, and redelivered events are skipped.

    **Request/Response flow**

    ::

                     +-----------+         +---------------+ +----------+ +-------------+
                     | Projector |         | EventsService | | Handlers | | CursorsRepo |
                     +-----------+         +---------------+ +----------+ +-------------+
                ---------  |                       |               |             |
                | Run    |-|                       |               |             |
                |--------| |                       |               |             |
                           |                       |               |             |
                           | Read projector cursor |               |             |
                           |---------------------------------------------------->|
                           |                       |               |             |
                           | Events after cursor   |               |             |
                           |---------------------->|               |             |
                           |                       |               |             |
                           | For each event: apply handler         |             |
                           |-------------------------------------->|             |
                           |                       |               |             |
                           | Advance cursor, commit|               |             |
                           |---------------------------------------------------->|
                           |                       |               |             |

    Args:
        events_service: Source of events
        calls_service: Service for ``tokenURI`` reads
        cursors_repo: Repo of cursors
        tokens_repo: Repo of tokens
        listings_repo: Repo of listings
        sales_repo: Repo of sales
        owner_history_repo: Repo of ownership records
        profits_repo: Repo of profit distributions
        fees_repo: Repo of platform fees
        user_stats_repo: Repo of user stats
        kwargs: Args for the :class:`reloop.core.Core`
    """

    def __init__(
        self,
        events_service: EventsService,
        calls_service: CallsService,
        cursors_repo: CursorsRepo,
        tokens_repo: TokensRepo,
        listings_repo: ListingsRepo,
        sales_repo: SalesRepo,
        owner_history_repo: OwnerHistoryRepo,
        profits_repo: ProfitDistributionsRepo,
        fees_repo: PlatformFeesRepo,
        user_stats_repo: UserStatsRepo,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.events_service = events_service
        self.calls_service = calls_service
        self.cursors_repo = cursors_repo
        self.tokens_repo = tokens_repo
        self.listings_repo = listings_repo
        self.sales_repo = sales_repo
        self.owner_history_repo = owner_history_repo
        self.profits_repo = profits_repo
        self.fees_repo = fees_repo
        self.user_stats_repo = user_stats_repo

    @staticmethod
    def create(chunk_size: int = DEFAULT_CHUNK_SIZE, **kwargs) -> Projector:
        """
        Create an instance of :class:`Projector`

        Args:
            chunk_size: Initial number of blocks per ``eth_getLogs`` request
            kwargs: Args for the :class:`reloop.core.Core`

        Returns:
            An instance of :class:`Projector`
        """
        return Projector(
            EventsService.create(chunk_size=chunk_size, **kwargs),
            CallsService.create(**kwargs),
            CursorsRepo(**kwargs),
            TokensRepo(**kwargs),
            ListingsRepo(**kwargs),
            SalesRepo(**kwargs),
            OwnerHistoryRepo(**kwargs),
            ProfitDistributionsRepo(**kwargs),
            PlatformFeesRepo(**kwargs),
            UserStatsRepo(**kwargs),
            **kwargs,
        )

    @property
    def position(self) -> Tuple[int, int] | None:
        """
        Position of the last applied event, ``None`` if nothing was applied yet
        """
        cursor = self.cursors_repo.get(PROJECTOR_CURSOR)
        return None if cursor is None else cursor.position

    def apply(self, event: Event):
        """
        Apply a single event and advance the cursor to it, atomically.

        Events of unknown types are skipped, but the cursor still moves.

        Args:
            event: Event to apply

        Raises:
            InvalidEventError: If the event payload is inconsistent.
                Nothing is written in this case.
        """
        handler = HANDLERS.get(event.event)
        try:
            if handler is None:
                logger.debug("Skipping unknown event %s (%s)", event.event, event.uid)
            else:
                handler(self, event)
            self.cursors_repo.advance(PROJECTOR_CURSOR, event.block_number, event.log_index)
            self.cursors_repo.commit()
        except Exception:
            self.cursors_repo.rollback()
            logger.error("Failed to apply %s (%s)", event.event, event.uid)
            raise

    def process(self, events: Iterable[Event]) -> int:
        """
        Apply events in order, skipping those at or before the cursor.

        Args:
            events: Events in chain order

        Returns:
            Number of applied events
        """
        position = self.position
        applied = 0
        for event in events:
            if not position is None and event.position <= position:
                continue
            self.apply(event)
            position = event.position
            applied += 1
        return applied

    def run(self) -> int:
        """
        Apply every event of the event log after the cursor

        Returns:
            Number of applied events
        """
        applied = self.process(self.events_service.events_after(self.position))
        if applied > 0:
            logger.info("Applied %d events, now at %s", applied, self.position)
        return applied

    def repair_token_uris(self) -> int:
        """
        Retry the ``tokenURI`` read for tokens minted while the
        read was failing.

        Returns:
            Number of repaired tokens
        """
        repaired = 0
        for token in self.tokens_repo.find_missing_uri():
            uri = self.calls_service.token_uri(self.rwa_address, token.token_id)
            if uri is None:
                continue
            self.tokens_repo.set_token_uri(token.token_id, uri)
            self.tokens_repo.commit()
            repaired += 1
        logger.info("Repaired metadata URIs of %d tokens", repaired)
        return repaired

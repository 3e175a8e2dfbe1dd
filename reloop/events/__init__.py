# pylint: disable=line-too-long

"""
Module for fetching events of the ReLoop contracts and reading them
back in chain order.

The main class of this module is :class:`EventsService`.
It fetches the logs of the NFT contract (``TokenMinted``, ``Transfer``,
``OwnerHistoryUpdated``) and of the marketplace contract (``Listed``,
``Delisted``, ``Sale``, ``ProfitDistributed``, ``PlatformFeeCollected``)
and appends them to the local event log.

Fetching is incremental: the last fetched block is stored as a cursor,
so a subsequent :meth:`EventsService.sync` only requests new blocks.

Reading is cursor based too: :meth:`EventsService.events_after` yields
events strictly after a ``(block_number, log_index)`` position, which
makes the stream restartable from any committed position.

Example:
    ::

        from reloop.events import EventsService

        service = EventsService.create()
        service.sync()
        for event in service.events_after((33427600, 3)):
            print(event.event, event.args)
"""

from reloop.events.event import Event
from reloop.events.decoder import EventDecoder
from reloop.events.repo import EventsRepo
from reloop.events.service import EventsService

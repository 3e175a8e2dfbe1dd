"""
ReLoop indexer reconstructs the state of the ReLoop real-world-asset
marketplace from on-chain events and serves it to clients.

The pipeline has three stages, each with its own service:

+------------------------------------------------+----------------------------------+
| Service                                        | Description                      |
+================================================+==================================+
| :class:`reloop.events.EventsService`           | Fetching and ordering contract   |
|                                                | events (the only chain reader)   |
+------------------------------------------------+----------------------------------+
| :class:`reloop.projector.Projector`            | Applying events to the derived   |
|                                                | tables (the only writer)         |
+------------------------------------------------+----------------------------------+
| :class:`reloop.query.QueryService`             | Read-only queries over the       |
|                                                | derived tables                   |
+------------------------------------------------+----------------------------------+

Supporting services are :class:`reloop.blocks.BlocksService` (block
timestamps) and :class:`reloop.calls.CallsService` (``tokenURI`` reads).
:mod:`reloop.api` exposes the query service over HTTP.

The best way to get started is the command line::

    python -m reloop sync
    python -m reloop serve
"""
